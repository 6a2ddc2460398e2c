"""Unit tests for gang-level operations."""

import pytest
from sqlalchemy import select

from munda.domain.enums import GangLogAction
from munda.factory import (
    create_equipment_service,
    create_gang_log_service,
    create_gang_service,
    create_vehicle_service,
)
from munda.models import Equipment, Gang, GangLog, VehicleType
from munda.services.financials_service import FinancialsService
from munda.services.gang_log_service import GangLogService
from munda.services.gang_service import GangService


@pytest.fixture
def gangs(session):
    return create_gang_service(session)


def _actions(session, gang_id):
    return [log.action_type for log in create_gang_log_service(session).list_logs(gang_id)]


class TestCreateGang:
    def test_starting_values(self, gang, goliath):
        assert gang.credits == 1000
        assert gang.wealth == 1000
        assert gang.rating == 0
        assert gang.reputation == 1
        assert gang.gang_type == "Goliath"
        assert gang.alignment == goliath.alignment

    def test_trailing_whitespace_dropped(self, gangs, user, goliath):
        assert gangs.create_gang(user, "  Spaced  ", goliath.id).name == "  Spaced"

    def test_blank_name_rejected(self, gangs, user, goliath):
        with pytest.raises(ValueError, match="Gang name is required"):
            gangs.create_gang(user, "   ", goliath.id)

    def test_unknown_gang_type(self, gangs, user):
        with pytest.raises(LookupError, match="Gang type not found"):
            gangs.create_gang(user, "Nobody", 9999)

    def test_invalid_alignment(self, gangs, user, goliath):
        with pytest.raises(ValueError, match="Alignment must be one of"):
            gangs.create_gang(user, "Chaos", goliath.id, alignment="Chaotic")

    def test_creation_is_logged(self, session, gang):
        assert _actions(session, gang.id) == [GangLogAction.GANG_CREATED]

    def test_custom_starting_credits(self, session, user, goliath):
        service = GangService(
            session, FinancialsService(session), GangLogService(session), starting_credits=500
        )
        gang = service.create_gang(user, "Poor", goliath.id)
        assert gang.credits == 500
        assert gang.wealth == 500


class TestUpdateGang:
    def test_add_credits_moves_wealth(self, gangs, user, gang, assert_consistent):
        gangs.update_gang(user, gang.id, {"credits": 50, "credits_operation": "add"})
        stored = assert_consistent(gang.id)
        assert stored.credits == 1050
        assert stored.wealth == 1050

    def test_credits_require_operation(self, gangs, user, gang):
        with pytest.raises(ValueError, match="operation"):
            gangs.update_gang(user, gang.id, {"credits": 50})

    def test_credits_cannot_go_negative(self, gangs, user, gang):
        with pytest.raises(ValueError, match="Credits cannot be negative"):
            gangs.update_gang(user, gang.id, {"credits": 1001, "credits_operation": "subtract"})

    def test_reputation_and_counters(self, session, gangs, user, gang):
        updated = gangs.update_gang(
            user,
            gang.id,
            {"reputation": 3, "reputation_operation": "add", "meat": 4, "note": "Hungry"},
        )
        assert updated.reputation == 4
        assert updated.meat == 4
        assert updated.note == "Hungry"
        assert GangLogAction.REPUTATION_CHANGED in _actions(session, gang.id)

    def test_alignment_change_logged(self, session, gangs, user, gang):
        gangs.update_gang(user, gang.id, {"alignment": "Outlaw"})
        assert GangLogAction.ALIGNMENT_CHANGED in _actions(session, gang.id)

    def test_unknown_field(self, gangs, user, gang):
        with pytest.raises(ValueError, match="Unknown gang fields: rating"):
            gangs.update_gang(user, gang.id, {"rating": 9000})

    def test_only_owner_may_edit(self, gangs, other_user, gang):
        with pytest.raises(PermissionError):
            gangs.update_gang(other_user, gang.id, {"note": "mine now"})

    def test_admin_may_edit(self, gangs, admin, gang):
        assert gangs.update_gang(admin, gang.id, {"note": "audited"}).note == "audited"


class TestPositionsCopyDelete:
    @pytest.fixture
    def roster(self, gang, hire):
        first = hire(gang.id, "Grub")["fighter"]
        second = hire(gang.id, "Krag")["fighter"]
        return first, second

    def test_positions(self, gangs, user, gang, roster):
        first, second = roster
        ordered = gangs.update_positions(user, gang.id, {0: second.id, 1: first.id})
        assert [fighter.id for fighter in ordered] == [second.id, first.id]

    def test_positions_reject_foreign_fighter(self, gangs, user, gang, roster):
        with pytest.raises(ValueError, match="does not belong"):
            gangs.update_positions(user, gang.id, {0: 9999})

    def test_copy_gang_recomputes_financials(
        self, session, gangs, user, gang, roster, find, assert_consistent
    ):
        equipment = create_equipment_service(session)
        equipment.buy_equipment(
            user,
            gang.id,
            equipment_id=find(Equipment, equipment_name="Mesh armour").id,
            buy_for_gang_stash=True,
        )
        create_vehicle_service(session).add_vehicle(
            user, gang.id, find(VehicleType, vehicle_type="Wolfquad").id
        )

        source = assert_consistent(gang.id)
        copy = gangs.copy_gang(user, gang.id)
        copied = assert_consistent(copy.id)

        assert copied.name == "Iron Fists (Copy)"
        assert len(copied.fighters) == 2
        assert len(copied.stash) == 1
        assert len(copied.vehicles) == 1
        assert copied.rating == source.rating
        assert copied.wealth == source.wealth

    def test_delete_gang(self, session, gangs, user, gang, roster):
        gangs.delete_gang(user, gang.id)
        session.expire_all()
        assert session.get(Gang, gang.id) is None
        assert session.execute(select(GangLog).where(GangLog.gang_id == gang.id)).first() is None


def test_recalculate_repairs_drift(session, gangs, user, gang, assert_consistent):
    gang.rating = 999
    gang.wealth = 5
    session.commit()

    result = gangs.recalculate_gang(user, gang.id)
    assert result["old_rating"] == 999
    assert result["new_rating"] == 0
    assert result["new_wealth"] == 1000
    assert assert_consistent(gang.id).rating == 0
    assert GangLogAction.RATING_RECALCULATED in _actions(session, gang.id)


def test_list_gangs_only_returns_own(gangs, user, other_user, gang, goliath):
    gangs.create_gang(other_user, "Rivals", goliath.id)
    assert [g.id for g in gangs.list_gangs(user)] == [gang.id]
