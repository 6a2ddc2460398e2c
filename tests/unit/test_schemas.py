import pytest
from pydantic import ValidationError

from munda.domain.enums import BalanceOperation, FighterAction
from munda.schemas import Envelope, GangSummary, ok
from munda.schemas.custom import CustomEquipmentCreate
from munda.schemas.dice import DiceRollRequest
from munda.schemas.equipment import EquipmentBuy, StashSell
from munda.schemas.fighter import FighterRead, FighterStatusUpdate
from munda.schemas.gang import GangCreate, GangUpdate


def test_gang_create_requires_name():
    with pytest.raises(ValidationError):
        GangCreate(name="", gang_type_id=1)
    assert GangCreate(name="Iron Fists", gang_type_id=1).alignment is None


def test_gang_update_tracks_set_fields():
    update = GangUpdate(credits=50, credits_operation="add")
    assert update.model_dump(exclude_unset=True) == {
        "credits": 50,
        "credits_operation": BalanceOperation.ADD,
    }
    with pytest.raises(ValidationError):
        GangUpdate(meat=-1)


def test_status_update_rejects_unknown_action():
    assert FighterStatusUpdate(action="kill").action == FighterAction.KILL
    with pytest.raises(ValidationError):
        FighterStatusUpdate(action="explode")


def test_equipment_buy_defaults():
    request = EquipmentBuy(gang_id=1, equipment_id=2)
    assert request.use_base_cost_for_rating is True
    assert request.buy_for_gang_stash is False
    assert request.selected_effect_ids == []
    with pytest.raises(ValidationError):
        EquipmentBuy(gang_id=1, equipment_id=2, manual_cost=-1)


def test_stash_sell_accepts_fractional_value():
    assert StashSell(manual_cost=7.9).manual_cost == 7.9


def test_dice_request_defaults():
    request = DiceRollRequest(gang_id=1, context="scavenge")
    assert request.notation == "1d6"
    assert request.fighter_id is None


def test_custom_equipment_cost_not_negative():
    with pytest.raises(ValidationError):
        CustomEquipmentCreate(equipment_name="Rock", cost=-5)


def test_envelope_wraps_orm_rows(gang):
    payload = Envelope[GangSummary].model_validate(ok(gang))
    assert payload.success is True
    assert payload.data.name == "Iron Fists"
    assert payload.data.wealth == 1000


def test_fighter_read_from_orm(gang, hire):
    fighter = hire(gang.id, "Grub")["fighter"]
    read = FighterRead.model_validate(fighter)
    assert read.fighter_name == "Grub"
    assert read.total_cost == 60
    assert read.adjusted_characteristics["movement"]["base"] == fighter.movement
    json_data = read.model_dump()
    assert "gang" not in json_data
