"""Unit tests for spending XP on characteristics and skills."""

import pytest

from munda.factory import create_advancement_service, create_fighter_service
from munda.models import FighterEffectType, Skill


@pytest.fixture
def advancements(session):
    return create_advancement_service(session)


@pytest.fixture
def veteran(session, user, gang, hire):
    fighter = hire(gang.id, "Grub")["fighter"]
    return create_fighter_service(session).update_xp(user, fighter.id, 10)


@pytest.fixture
def advancement_type(find):
    def _advancement_type(name):
        return find(FighterEffectType, effect_name=name).id

    return _advancement_type


class TestCharacteristicAdvancement:
    def test_spends_xp_and_raises_cost(
        self, advancements, user, gang, veteran, advancement_type, assert_consistent
    ):
        result = advancements.add_characteristic_advancement(
            user, veteran.id, advancement_type("Weapon Skill"), xp_cost=6, credits_increase=10
        )
        effect = result["effect"]

        assert result["remaining_xp"] == 4
        assert result["fighter_total_cost"] == 70
        assert result["gang_rating"] == 70
        assert effect.type_specific_data["times_increased"] == 1
        assert [(m.stat_name, m.numeric_value) for m in effect.modifiers] == [("weapon_skill", 1)]
        assert veteran.adjusted_characteristics["weapon_skill"]["delta"] == 1
        assert assert_consistent(gang.id).rating == 70

    def test_insufficient_xp(self, advancements, user, veteran, advancement_type):
        with pytest.raises(ValueError, match="Insufficient XP"):
            advancements.add_characteristic_advancement(
                user, veteran.id, advancement_type("Wounds"), xp_cost=12, credits_increase=30
            )

    def test_times_increased_counts_repeats(self, advancements, user, veteran, advancement_type):
        movement = advancement_type("Movement")
        advancements.add_characteristic_advancement(user, veteran.id, movement, 3, 10)
        result = advancements.add_characteristic_advancement(user, veteran.id, movement, 3, 10)
        assert result["effect"].type_specific_data["times_increased"] == 2
        assert veteran.adjusted_characteristics["movement"]["adjusted"] == 6

    def test_rejects_other_effect_categories(self, advancements, user, veteran, advancement_type):
        with pytest.raises(ValueError, match="is not a advancements effect"):
            advancements.add_characteristic_advancement(
                user, veteran.id, advancement_type("Hobbled"), 1, 0
            )

    def test_negative_costs(self, advancements, user, veteran, advancement_type):
        with pytest.raises(ValueError, match="XP cost cannot be negative"):
            advancements.add_characteristic_advancement(
                user, veteran.id, advancement_type("Cool"), -1, 0
            )

    def test_delete_refunds_xp(
        self, advancements, user, gang, veteran, advancement_type, assert_consistent
    ):
        added = advancements.add_characteristic_advancement(
            user, veteran.id, advancement_type("Weapon Skill"), 6, 10
        )
        result = advancements.delete_advancement(user, veteran.id, added["effect"].id)

        assert result["xp_refunded"] == 6
        assert result["fighter"].xp == 10
        assert result["gang_rating"] == 60
        assert assert_consistent(gang.id).rating == 60

    def test_delete_unknown(self, advancements, user, veteran):
        with pytest.raises(LookupError, match="Advancement not found"):
            advancements.delete_advancement(user, veteran.id, 9999)

    def test_list_available(self, advancements, user, veteran, advancement_type):
        advancements.add_characteristic_advancement(
            user, veteran.id, advancement_type("Weapon Skill"), 6, 10
        )
        available = {entry["effect_name"]: entry for entry in advancements.list_available_advancements(veteran.id)}

        assert len(available) == 12
        assert available["Weapon Skill"]["times_increased"] == 1
        assert available["Weapon Skill"]["stat_name"] == "weapon_skill"
        assert available["Strength"] == {
            "id": advancement_type("Strength"),
            "effect_name": "Strength",
            "stat_name": "strength",
            "xp_cost": 8,
            "credits_increase": 30,
            "times_increased": 0,
        }


class TestSkillAdvancement:
    @pytest.fixture
    def leader(self, gang, hire):
        return hire(gang.id, "Big Boss", "Forge Tyrant")["fighter"]

    @pytest.fixture
    def skill_id(self, find):
        def _skill_id(name):
            return find(Skill, name=name).id

        return _skill_id

    def test_advance_spends_xp(self, advancements, user, gang, veteran, skill_id, assert_consistent):
        result = advancements.add_skill_advancement(
            user, veteran.id, skill_id("Iron Jaw"), xp_cost=6, credits_increase=20
        )
        assert result["skill"].is_advance is True
        assert result["remaining_xp"] == 4
        assert result["gang_rating"] == 80
        assert assert_consistent(gang.id).rating == 80

    def test_duplicate_skill(self, advancements, user, leader, skill_id):
        with pytest.raises(ValueError, match="already has this skill"):
            advancements.add_skill_advancement(user, leader.id, skill_id("Unstoppable"), 0, 0)

    def test_free_skill_is_used_and_restored(self, advancements, user, leader, skill_id):
        assert leader.free_skill is True
        result = advancements.add_skill_advancement(
            user, leader.id, skill_id("Iron Jaw"), 0, 0, is_advance=False
        )
        assert leader.free_skill is False

        deleted = advancements.delete_advancement(
            user, leader.id, result["skill"].id, advancement_type="skill"
        )
        assert deleted["fighter"].free_skill is True

    def test_deleting_advance_keeps_free_skill_spent(self, advancements, user, leader, skill_id):
        advancements.add_skill_advancement(user, leader.id, skill_id("Iron Jaw"), 0, 0, is_advance=False)
        advance = advancements.add_skill_advancement(user, leader.id, skill_id("Fast Shot"), 0, 0)

        deleted = advancements.delete_advancement(
            user, leader.id, advance["skill"].id, advancement_type="skill"
        )
        assert deleted["fighter"].free_skill is False

    def test_add_and_delete_plain_skill(self, advancements, user, gang, veteran, skill_id, assert_consistent):
        fighter_skill = advancements.add_skill(user, veteran.id, skill_id("Overwatch"))
        assert fighter_skill.xp_cost == 0
        assert [skill.skill.name for skill in veteran.skills] == ["Overwatch"]

        advancements.delete_skill(user, veteran.id, fighter_skill.id)
        assert assert_consistent(gang.id).fighters[0].skills == []

        with pytest.raises(LookupError, match="Skill not found"):
            advancements.delete_skill(user, veteran.id, fighter_skill.id)
