"""Unit tests for catalog reads and custom content."""

import pytest

from munda.factory import create_catalog_service, create_equipment_service, create_fighter_service
from munda.models import Equipment, GangType


@pytest.fixture
def catalog(session):
    return create_catalog_service(session)


@pytest.fixture
def gang_type_id(find):
    def _gang_type_id(name):
        return find(GangType, gang_type=name).id

    return _gang_type_id


class TestCatalogReads:
    def test_fighter_types_for_gang(self, catalog, gang_type_id):
        names = [entry["fighter_type"] for entry in catalog.list_fighter_types(gang_type_id("Goliath"))]
        assert "Bully" in names
        assert "Hive Scum" in names
        assert "Sister" not in names

    def test_gang_specific_hire_cost(self, catalog, gang_type_id):
        scum = {
            entry["fighter_type"]: entry
            for entry in catalog.list_fighter_types(gang_type_id("Outcast"))
        }["Hive Scum"]
        assert scum["cost"] == 30
        assert scum["adjusted_cost"] == 25

    def test_fighter_types_for_unknown_gang_type(self, catalog):
        with pytest.raises(LookupError, match="Gang type not found"):
            catalog.list_fighter_types(9999)

    def test_equipment_discount(self, catalog, gang_type_id):
        lasgun = {
            entry["equipment_name"]: entry
            for entry in catalog.list_equipment(gang_type_id=gang_type_id("Escher"))
        }["Lasgun"]
        assert lasgun["cost"] == 15
        assert lasgun["adjusted_cost"] == 10
        assert lasgun["weapon_profiles"][0]["ammo"] == "2+"

    def test_equipment_type_filter(self, catalog):
        names = {entry["equipment_name"] for entry in catalog.list_equipment(equipment_type="vehicle_upgrade")}
        assert names == {"Ram"}

    def test_unknown_equipment_type(self, catalog):
        with pytest.raises(ValueError):
            catalog.list_equipment(equipment_type="snacks")

    def test_upgrades_for_equipment(self, catalog, find):
        lasgun = find(Equipment, equipment_name="Lasgun")
        autogun = find(Equipment, equipment_name="Autogun")
        assert [u.effect_name for u in catalog.list_equipment_upgrades(lasgun.id)] == ["Hotshot las pack"]
        assert catalog.list_equipment_upgrades(autogun.id) == []

    def test_effect_type_lists(self, catalog):
        assert len(catalog.list_characteristic_types()) == 12
        assert "Hobbled" in [injury.effect_name for injury in catalog.list_injury_types()]
        assert "Loss of Power" in [damage.effect_name for damage in catalog.list_vehicle_damage_types()]

    def test_vehicle_types_by_cost(self, catalog):
        assert [v.vehicle_type for v in catalog.list_vehicle_types()] == ["Wolfquad", "Cargo-8 Ridgehauler"]

    def test_skills(self, catalog):
        assert "Unstoppable" in [skill.name for skill in catalog.list_skills()]


class TestCustomEquipment:
    def test_create_and_buy(self, session, catalog, user, gang, hire, assert_consistent):
        custom = catalog.create_custom_equipment(
            user, {"equipment_name": "Scrap cannon", "equipment_type": "weapon", "cost": 35}
        )
        grub = hire(gang.id, "Grub")["fighter"]
        result = create_equipment_service(session).buy_equipment(
            user, gang.id, fighter_id=grub.id, custom_equipment_id=custom.id
        )
        assert result["equipment"].name == "Scrap cannon"
        assert result["gang_credits"] == 905
        assert assert_consistent(gang.id).rating == 95

    def test_validation(self, catalog, user):
        with pytest.raises(ValueError, match="Equipment name is required"):
            catalog.create_custom_equipment(user, {"cost": 5})
        with pytest.raises(ValueError, match="Cost cannot be negative"):
            catalog.create_custom_equipment(user, {"equipment_name": "Rock", "cost": -1})
        with pytest.raises(ValueError, match="Field 'rarity' cannot be set"):
            catalog.create_custom_equipment(user, {"equipment_name": "Rock", "rarity": "R9"})

    def test_owner_only(self, catalog, user, other_user, admin):
        custom = catalog.create_custom_equipment(user, {"equipment_name": "Rock", "cost": 1})
        with pytest.raises(PermissionError, match="permission to modify this custom content"):
            catalog.update_custom_equipment(other_user, custom.id, {"cost": 2})
        assert catalog.update_custom_equipment(admin, custom.id, {"cost": 2}).cost == 2

    def test_list_and_delete(self, catalog, user, other_user):
        custom = catalog.create_custom_equipment(user, {"equipment_name": "Rock", "cost": 1})
        assert [item.id for item in catalog.list_custom_equipment(user)] == [custom.id]
        assert catalog.list_custom_equipment(other_user) == []

        catalog.delete_custom_equipment(user, custom.id)
        assert catalog.list_custom_equipment(user) == []


class TestCustomFighterTypes:
    def test_hire_custom_type(self, session, catalog, user, gang, goliath, assert_consistent):
        custom = catalog.create_custom_fighter_type(
            user,
            {
                "fighter_type": "Pit Slave",
                "fighter_class": "Hanger-on",
                "gang_type_id": goliath.id,
                "cost": 40,
                "movement": 5,
                "toughness": 4,
            },
        )
        result = create_fighter_service(session).add_fighter(
            user, gang.id, "Chains", custom_fighter_type_id=custom.id
        )
        fighter = result["fighter"]
        assert fighter.fighter_type == "Pit Slave"
        assert fighter.movement == 5
        assert result["gang_credits"] == 960
        assert assert_consistent(gang.id).rating == 40

    def test_other_users_type_cannot_be_hired(self, session, catalog, other_user, user, gang):
        custom = catalog.create_custom_fighter_type(other_user, {"fighter_type": "Spy", "cost": 10})
        with pytest.raises(PermissionError):
            create_fighter_service(session).add_fighter(
                user, gang.id, "Mole", custom_fighter_type_id=custom.id
            )

    def test_validation(self, catalog, user):
        with pytest.raises(ValueError, match="Fighter type name is required"):
            catalog.create_custom_fighter_type(user, {"cost": 10})
        with pytest.raises(LookupError, match="Gang type not found"):
            catalog.create_custom_fighter_type(user, {"fighter_type": "X", "gang_type_id": 9999})

    def test_update_and_delete(self, catalog, user):
        custom = catalog.create_custom_fighter_type(user, {"fighter_type": "Spy", "cost": 10})
        assert catalog.update_custom_fighter_type(user, custom.id, {"free_skill": True}).free_skill is True
        assert [t.fighter_type for t in catalog.list_custom_fighter_types(user)] == ["Spy"]

        catalog.delete_custom_fighter_type(user, custom.id)
        assert catalog.list_custom_fighter_types(user) == []


class TestCustomSkills:
    def test_create_trims_name(self, catalog, user):
        skill = catalog.create_custom_skill(user, {"skill_name": "Gutter Fighter  ", "skill_type": "Ferocity"})
        assert skill.skill_name == "Gutter Fighter"
        assert skill.user_id == user.id

    def test_validation(self, catalog, user):
        with pytest.raises(ValueError, match="Skill name is required"):
            catalog.create_custom_skill(user, {"skill_name": "  ", "skill_type": "Ferocity"})
        with pytest.raises(ValueError, match="Skill name and skill set are required"):
            catalog.create_custom_skill(user, {"skill_name": "Headbutt"})
        with pytest.raises(ValueError, match="Field 'cost' cannot be set"):
            catalog.create_custom_skill(user, {"skill_name": "Headbutt", "skill_type": "Muscle", "cost": 5})

    def test_listed_per_owner_by_skill_set(self, catalog, user, other_user):
        catalog.create_custom_skill(user, {"skill_name": "Headbutt", "skill_type": "Muscle"})
        catalog.create_custom_skill(user, {"skill_name": "Scream", "skill_type": "Ferocity"})
        assert [s.skill_name for s in catalog.list_custom_skills(user)] == ["Scream", "Headbutt"]
        assert catalog.list_custom_skills(other_user) == []

    def test_update_and_delete(self, catalog, user, other_user):
        skill = catalog.create_custom_skill(user, {"skill_name": "Headbutt", "skill_type": "Muscle"})
        with pytest.raises(PermissionError):
            catalog.update_custom_skill(other_user, skill.id, {"skill_type": "Brawn"})
        assert catalog.update_custom_skill(user, skill.id, {"skill_type": "Brawn"}).skill_type == "Brawn"

        with pytest.raises(PermissionError):
            catalog.delete_custom_skill(other_user, skill.id)
        catalog.delete_custom_skill(user, skill.id)
        with pytest.raises(LookupError, match="Custom skill not found"):
            catalog.delete_custom_skill(user, skill.id)


class TestCustomTerritories:
    def test_create_and_list(self, catalog, user, other_user):
        catalog.create_custom_territory(user, {"territory_name": "Sump Lake "})
        catalog.create_custom_territory(user, {"territory_name": "Ash Wastes"})
        assert [t.territory_name for t in catalog.list_custom_territories(user)] == [
            "Ash Wastes",
            "Sump Lake",
        ]
        assert catalog.list_custom_territories(other_user) == []

    def test_name_required(self, catalog, user):
        with pytest.raises(ValueError, match="Territory name is required"):
            catalog.create_custom_territory(user, {})
        territory = catalog.create_custom_territory(user, {"territory_name": "Sump Lake"})
        with pytest.raises(ValueError, match="Territory name is required"):
            catalog.update_custom_territory(user, territory.id, {"territory_name": ""})

    def test_rename_and_delete(self, catalog, user, admin):
        territory = catalog.create_custom_territory(user, {"territory_name": "Sump Lake"})
        renamed = catalog.update_custom_territory(admin, territory.id, {"territory_name": "Drain Pit"})
        assert renamed.territory_name == "Drain Pit"

        catalog.delete_custom_territory(user, territory.id)
        assert catalog.list_custom_territories(user) == []
