"""Unit tests for lasting injuries."""

import pytest

from munda.factory import create_fighter_service, create_injury_service
from munda.models import FighterEffectType
from munda.utils.dice import generate_seed, roll_lasting_injury


@pytest.fixture
def injuries(session):
    return create_injury_service(session)


@pytest.fixture
def grub(gang, hire):
    return hire(gang.id, "Grub")["fighter"]


@pytest.fixture
def injury_id(find):
    def _injury_id(name):
        return find(FighterEffectType, effect_name=name).id

    return _injury_id


def test_injury_modifies_characteristics(injuries, user, grub, injury_id):
    result = injuries.add_injury(user, grub.id, injury_id("Hobbled"))
    assert result["injury"].effect_name == "Hobbled"
    assert result["gang_rating"] == 60
    assert grub.adjusted_characteristics["movement"]["adjusted"] == 3


def test_recovery_keeps_rating(injuries, user, grub, injury_id):
    result = injuries.add_injury(user, grub.id, injury_id("Hobbled"), send_to_recovery=True)
    assert result["fighter"].recovery is True
    assert result["gang_rating"] == 60


def test_capture_drops_rating(injuries, user, gang, grub, injury_id, assert_consistent):
    result = injuries.add_injury(user, grub.id, injury_id("Captured"), set_captured=True)
    assert result["fighter"].captured is True
    assert result["gang_rating"] == 0
    assert assert_consistent(gang.id).rating == 0


def test_recovery_and_capture_are_exclusive(injuries, user, grub, injury_id):
    with pytest.raises(ValueError, match="recovery and captured at once"):
        injuries.add_injury(
            user, grub.id, injury_id("Captured"), send_to_recovery=True, set_captured=True
        )


def test_status_conflict(session, injuries, user, grub, injury_id):
    create_fighter_service(session).update_status(user, grub.id, "kill")
    with pytest.raises(ValueError, match="Cannot capture a fighter who is killed"):
        injuries.add_injury(user, grub.id, injury_id("Captured"), set_captured=True)


def test_only_injury_types_accepted(injuries, user, grub, injury_id):
    with pytest.raises(ValueError, match="is not a injuries effect"):
        injuries.add_injury(user, grub.id, injury_id("Weapon Skill"))


def test_delete_injury(injuries, user, grub, injury_id):
    added = injuries.add_injury(user, grub.id, injury_id("Hobbled"))
    result = injuries.delete_injury(user, grub.id, added["injury"].id)
    assert result["fighter"].adjusted_characteristics["movement"]["adjusted"] == 4

    with pytest.raises(LookupError, match="Injury not found"):
        injuries.delete_injury(user, grub.id, added["injury"].id)


def test_other_user_cannot_injure(injuries, other_user, grub, injury_id):
    with pytest.raises(PermissionError):
        injuries.add_injury(other_user, grub.id, injury_id("Hobbled"))


def test_roll_resolves_catalog_injury(injuries, gang, grub, find):
    result = injuries.roll_lasting_injury(gang.id, grub.id, "lasting_injury:0")
    expected = roll_lasting_injury(generate_seed(gang.id, grub.id, "lasting_injury:0"))

    assert result["total"] == expected["total"]
    assert result["injury"] == expected["injury"]
    assert find(FighterEffectType, id=result["injury_type_id"]).effect_name == result["injury"]
    assert injuries.roll_lasting_injury(gang.id, grub.id, "lasting_injury:0") == result
