"""Unit tests for buying, selling and stashing equipment."""

import warnings

import pytest
from sqlalchemy.exc import SAWarning

from munda.database import count_rows
from munda.factory import create_equipment_service, create_gang_service, create_vehicle_service
from munda.models import Equipment, FighterEffectType, FighterEquipment, GangType, VehicleType


@pytest.fixture
def equipment(session):
    return create_equipment_service(session)


@pytest.fixture
def grub(gang, hire):
    return hire(gang.id, "Grub")["fighter"]


@pytest.fixture
def item_id(find):
    def _item_id(name):
        return find(Equipment, equipment_name=name).id

    return _item_id


class TestBuyEquipment:
    def test_fighter_item_moves_rating(self, equipment, user, gang, grub, item_id, assert_consistent):
        result = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun")
        )
        assert result["gang_credits"] == 925
        assert result["rating_cost"] == 15
        assert result["gang_rating_delta"] == 15
        assert result["fighter_total_cost"] == 75
        assert result["equipment"].purchase_cost == 15

        stored = assert_consistent(gang.id)
        assert stored.rating == 75
        assert stored.wealth == 1000

    def test_stash_item_counts_toward_wealth_only(
        self, equipment, user, gang, item_id, assert_consistent
    ):
        result = equipment.buy_equipment(
            user, gang.id, equipment_id=item_id("Mesh armour"), buy_for_gang_stash=True
        )
        assert result["equipment"].gang_stash is True
        assert result["gang_rating_delta"] == 0
        assert result["fighter_total_cost"] is None

        stored = assert_consistent(gang.id)
        assert stored.rating == 0
        assert stored.credits == 985
        assert stored.wealth == 1000

    def test_item_on_unassigned_vehicle(self, session, equipment, user, gang, item_id, find, assert_consistent):
        vehicle = create_vehicle_service(session).add_vehicle(
            user, gang.id, find(VehicleType, vehicle_type="Wolfquad").id
        )["vehicle"]
        result = equipment.buy_equipment(
            user, gang.id, vehicle_id=vehicle.id, equipment_id=item_id("Ram")
        )
        assert result["gang_rating_delta"] == 0
        stored = assert_consistent(gang.id)
        assert stored.rating == 0
        assert stored.wealth == 1000

    def test_gang_type_discount(self, session, user, hire, item_id, find, assert_consistent):
        escher = find(GangType, gang_type="Escher")
        gang = create_gang_service(session).create_gang(user, "Wyld", escher.id)
        sister = hire(gang.id, "Vex", "Sister")["fighter"]
        result = create_equipment_service(session).buy_equipment(
            user, gang.id, fighter_id=sister.id, equipment_id=item_id("Lasgun")
        )
        assert result["rating_cost"] == 10
        assert result["gang_credits"] == 1000 - 55 - 10
        assert_consistent(gang.id)

    def test_manual_cost_rated_at_discounted_price(self, equipment, user, gang, grub, item_id):
        result = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun"), manual_cost=5
        )
        assert result["gang_credits"] == 935
        assert result["rating_cost"] == 15

    def test_manual_cost_rated_at_amount_paid(self, equipment, user, gang, grub, item_id):
        result = equipment.buy_equipment(
            user,
            gang.id,
            fighter_id=grub.id,
            equipment_id=item_id("Autogun"),
            manual_cost=5,
            use_base_cost_for_rating=False,
        )
        assert result["rating_cost"] == 5

    def test_master_crafted_weapon(self, equipment, user, gang, grub, item_id, assert_consistent):
        result = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun"), master_crafted=True
        )
        assert result["equipment"].is_master_crafted is True
        assert result["rating_cost"] == 20
        assert result["gang_credits"] == 925
        assert assert_consistent(gang.id).rating == 80

    def test_master_crafted_ignored_for_wargear(self, equipment, user, gang, grub, item_id):
        result = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Flak armour"), master_crafted=True
        )
        assert result["equipment"].is_master_crafted is False
        assert result["rating_cost"] == 10

    def test_insufficient_credits(self, equipment, user, gang, grub, item_id):
        with pytest.raises(ValueError, match="Required: 2000, Available: 940"):
            equipment.buy_equipment(
                user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun"), manual_cost=2000
            )

    def test_holder_required(self, equipment, user, gang, item_id):
        with pytest.raises(ValueError, match="Either fighter_id or vehicle_id is required"):
            equipment.buy_equipment(user, gang.id, equipment_id=item_id("Autogun"))

    def test_only_one_holder(self, equipment, user, gang, grub, item_id):
        with pytest.raises(ValueError, match="Specify only one"):
            equipment.buy_equipment(
                user, gang.id, fighter_id=grub.id, vehicle_id=1, equipment_id=item_id("Autogun")
            )

    def test_fighter_from_another_gang(self, session, equipment, user, gang, goliath, hire, item_id):
        other = create_gang_service(session).create_gang(user, "Other", goliath.id)
        stranger = hire(other.id, "Stranger")["fighter"]
        with pytest.raises(ValueError, match="does not belong to the same gang"):
            equipment.buy_equipment(
                user, gang.id, fighter_id=stranger.id, equipment_id=item_id("Autogun")
            )

    def test_other_users_gang(self, equipment, other_user, gang, grub, item_id):
        with pytest.raises(PermissionError):
            equipment.buy_equipment(
                other_user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun")
            )


class TestUpgrades:
    @pytest.fixture
    def hotshot(self, find):
        return find(FighterEffectType, effect_name="Hotshot las pack")

    def test_hotshot_modifies_weapon_profile(
        self, equipment, user, gang, grub, item_id, hotshot, assert_consistent
    ):
        result = equipment.buy_equipment(
            user,
            gang.id,
            fighter_id=grub.id,
            equipment_id=item_id("Lasgun"),
            selected_effect_ids=[hotshot.id],
        )
        assert len(result["applied_effects"]) == 1
        assert result["gang_rating_delta"] == 35

        profile = result["equipment"].weapon_profiles[0]
        assert profile["strength"] == "4"
        assert profile["ap"] == "-1"
        assert profile["ammo"] == "4+"
        assert profile["traits"] == "Unstable"
        assert assert_consistent(gang.id).rating == 95

    def test_upgrade_for_another_weapon(self, equipment, user, gang, grub, item_id, hotshot):
        with pytest.raises(ValueError, match="does not apply to Autogun"):
            equipment.buy_equipment(
                user,
                gang.id,
                fighter_id=grub.id,
                equipment_id=item_id("Autogun"),
                selected_effect_ids=[hotshot.id],
            )

    def test_no_upgrades_in_stash(self, equipment, user, gang, item_id, hotshot):
        with pytest.raises(ValueError, match="Upgrades cannot be applied"):
            equipment.buy_equipment(
                user,
                gang.id,
                equipment_id=item_id("Lasgun"),
                buy_for_gang_stash=True,
                selected_effect_ids=[hotshot.id],
            )

    def test_deleting_item_removes_upgrade_value(
        self, equipment, user, gang, grub, item_id, hotshot, assert_consistent
    ):
        bought = equipment.buy_equipment(
            user,
            gang.id,
            fighter_id=grub.id,
            equipment_id=item_id("Lasgun"),
            selected_effect_ids=[hotshot.id],
        )
        result = equipment.delete_equipment(user, bought["equipment"].id)
        assert len(result["deleted_effect_ids"]) == 1
        assert result["gang_rating"] == 60
        assert assert_consistent(gang.id).rating == 60

    @pytest.fixture
    def lasgun(self, equipment, user, gang, grub, item_id):
        return equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Lasgun")
        )["equipment"]

    def test_upgrade_added_after_purchase(
        self, equipment, user, gang, lasgun, hotshot, assert_consistent
    ):
        result = equipment.apply_equipment_effect(user, lasgun.id, hotshot.id)
        assert result["effect"].effect_name == "Hotshot las pack"
        assert result["fighter_total_cost"] == 95
        assert result["gang_rating"] == 95

        stored = assert_consistent(gang.id)
        assert stored.credits == 925
        assert stored.wealth == 1020

    def test_upgrade_removed_again(
        self, equipment, user, gang, lasgun, hotshot, assert_consistent
    ):
        effect = equipment.apply_equipment_effect(user, lasgun.id, hotshot.id)["effect"]
        result = equipment.delete_equipment_effect(user, lasgun.id, effect.id)
        assert result["deleted_effect_id"] == effect.id
        assert result["gang_rating"] == 75

        stored = assert_consistent(gang.id)
        assert stored.rating == 75
        assert stored.wealth == 1000

    def test_upgrade_applied_twice(self, equipment, user, lasgun, hotshot):
        equipment.apply_equipment_effect(user, lasgun.id, hotshot.id)
        with pytest.raises(ValueError, match="already has 'Hotshot las pack'"):
            equipment.apply_equipment_effect(user, lasgun.id, hotshot.id)

    def test_upgrade_added_to_wrong_weapon(
        self, equipment, user, gang, grub, item_id, hotshot, assert_consistent
    ):
        autogun = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun")
        )["equipment"]
        with pytest.raises(ValueError, match="does not apply to Autogun"):
            equipment.apply_equipment_effect(user, autogun.id, hotshot.id)
        assert assert_consistent(gang.id).rating == 75

    def test_upgrade_on_stashed_item(self, equipment, user, gang, item_id, hotshot):
        stashed = equipment.buy_equipment(
            user, gang.id, equipment_id=item_id("Lasgun"), buy_for_gang_stash=True
        )["equipment"]
        with pytest.raises(ValueError, match="equipment in the stash"):
            equipment.apply_equipment_effect(user, stashed.id, hotshot.id)

    def test_removing_effect_from_another_item(
        self, equipment, user, gang, grub, item_id, lasgun, hotshot
    ):
        effect = equipment.apply_equipment_effect(user, lasgun.id, hotshot.id)["effect"]
        autogun = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun")
        )["equipment"]
        with pytest.raises(LookupError, match="Equipment effect not found"):
            equipment.delete_equipment_effect(user, autogun.id, effect.id)

    def test_upgrade_needs_owner(self, equipment, other_user, lasgun, hotshot):
        with pytest.raises(PermissionError):
            equipment.apply_equipment_effect(other_user, lasgun.id, hotshot.id)


class TestBeasts:
    def test_buying_a_beast(self, equipment, user, gang, grub, item_id, assert_consistent):
        result = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Cyber-mastiff")
        )
        beast = result["created_beasts"][0]

        assert beast.fighter_type == "Cyber-mastiff"
        assert beast.credits == 0
        assert beast.owner_id == grub.id
        assert [item.name for item in beast.equipment] == ["Flak armour"]
        assert result["gang_credits"] == 840
        assert result["gang_rating_delta"] == 200

        stored = assert_consistent(gang.id)
        assert stored.rating == 260

    def test_selling_the_item_removes_the_beast(
        self, session, equipment, user, gang, grub, item_id, assert_consistent
    ):
        bought = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Cyber-mastiff")
        )
        result = equipment.sell_equipment(user, bought["equipment"].id, manual_cost=50)

        assert result["sold_for"] == 50
        assert result["gang_credits"] == 890
        assert result["gang_rating"] == 60
        stored = assert_consistent(gang.id)
        assert len(stored.fighters) == 1

    def test_deleting_the_item_removes_each_link_once(
        self, session, equipment, user, gang, grub, item_id, assert_consistent
    ):
        bought = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Cyber-mastiff")
        )
        assert len(grub.owned_beasts) == 1
        with warnings.catch_warnings():
            warnings.simplefilter("error", SAWarning)
            result = equipment.delete_equipment(user, bought["equipment"].id)

        assert result["gang_rating"] == 60
        assert assert_consistent(gang.id).rating == 60
        assert count_rows(session, "fighter_exotic_beasts") == 0

    def test_stashing_removes_and_restores_the_beast(
        self, equipment, user, gang, grub, item_id, assert_consistent
    ):
        bought = equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Cyber-mastiff")
        )
        equipment.move_to_stash(user, bought["equipment"].id)
        stored = assert_consistent(gang.id)
        assert stored.rating == 60
        assert len(stored.fighters) == 1
        assert stored.wealth == 840 + 60 + 100

        result = equipment.move_from_stash(user, bought["equipment"].id, fighter_id=grub.id)
        assert len(result["created_beasts"]) == 1
        assert result["gang_rating"] == 260
        assert_consistent(gang.id)


class TestRemoval:
    @pytest.fixture
    def autogun(self, equipment, user, gang, grub, item_id):
        return equipment.buy_equipment(
            user, gang.id, fighter_id=grub.id, equipment_id=item_id("Autogun")
        )["equipment"]

    def test_delete_without_refund(self, equipment, user, gang, autogun, assert_consistent):
        result = equipment.delete_equipment(user, autogun.id)
        assert result["deleted_equipment"]["name"] == "Autogun"
        assert result["gang_credits"] == 925
        assert result["fighter_total_cost"] == 60
        stored = assert_consistent(gang.id)
        assert stored.wealth == 985

    def test_sell_defaults_to_purchase_cost(self, equipment, user, gang, autogun, assert_consistent):
        result = equipment.sell_equipment(user, autogun.id)
        assert result["sold_for"] == 15
        assert result["gang_credits"] == 940
        assert assert_consistent(gang.id).wealth == 1000

    def test_negative_sale(self, equipment, user, autogun):
        with pytest.raises(ValueError, match="Sell value cannot be negative"):
            equipment.sell_equipment(user, autogun.id, manual_cost=-1)

    def test_missing_item(self, equipment, user):
        with pytest.raises(LookupError):
            equipment.delete_equipment(user, 9999)


class TestStash:
    @pytest.fixture
    def stashed(self, equipment, user, gang, item_id):
        return equipment.buy_equipment(
            user, gang.id, equipment_id=item_id("Mesh armour"), buy_for_gang_stash=True
        )["equipment"]

    def test_move_to_fighter(self, equipment, user, gang, grub, stashed, assert_consistent):
        result = equipment.move_from_stash(user, stashed.id, fighter_id=grub.id)
        assert result["equipment"].fighter_id == grub.id
        assert result["equipment"].gang_stash is False
        assert result["fighter_total_cost"] == 75
        stored = assert_consistent(gang.id)
        assert stored.rating == 75
        assert stored.wealth == 1000

    def test_move_requires_one_target(self, equipment, user, stashed):
        with pytest.raises(ValueError, match="Specify exactly one of fighter_id or vehicle_id"):
            equipment.move_from_stash(user, stashed.id)

    def test_move_back_into_stash(self, equipment, user, gang, grub, stashed, assert_consistent):
        equipment.move_from_stash(user, stashed.id, fighter_id=grub.id)
        item = equipment.move_to_stash(user, stashed.id)
        assert item.gang_stash is True
        assert item.fighter_id is None
        assert assert_consistent(gang.id).rating == 60

        with pytest.raises(ValueError, match="already in the gang stash"):
            equipment.move_to_stash(user, stashed.id)

    def test_non_stash_item_rejected(self, equipment, user, gang, grub):
        stub_gun = grub.equipment[0]
        with pytest.raises(ValueError, match="Item is not in gang stash"):
            equipment.sell_from_stash(user, stub_gun.id)

    @pytest.mark.parametrize(("manual_cost", "expected"), [(None, 15), (7.9, 7), (2, 5), (0, 5)])
    def test_sell_from_stash(
        self, equipment, user, gang, stashed, manual_cost, expected, assert_consistent
    ):
        result = equipment.sell_from_stash(user, stashed.id, manual_cost=manual_cost)
        assert result["sold_for"] == expected
        assert result["gang_credits"] == 985 + expected
        stored = assert_consistent(gang.id)
        assert stored.stash == []

    def test_delete_from_stash(self, equipment, user, gang, stashed, assert_consistent):
        result = equipment.delete_from_stash(user, stashed.id)
        assert result["gang_wealth"] == 985
        assert assert_consistent(gang.id).wealth == 985

    def test_list_stash(self, session, equipment, gang, stashed):
        assert [item.id for item in equipment.list_stash(gang.id)] == [stashed.id]
        assert isinstance(equipment.list_stash(gang.id)[0], FighterEquipment)
