"""Gang endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from munda.api.deps import (
    EquipmentServiceDep,
    GangLogServiceDep,
    GangServiceDep,
    UserDep,
    VehicleServiceDep,
)
from munda.schemas import Envelope, ok
from munda.schemas.equipment import FighterEquipmentRead
from munda.schemas.fighter import FighterRead
from munda.schemas.gang import (
    GangCopy,
    GangCreate,
    GangDetail,
    GangLogRead,
    GangRead,
    GangUpdate,
    PositionsUpdate,
    RecalculateResult,
)
from munda.schemas.vehicle import VehicleRead

router = APIRouter(prefix="/gangs", tags=["gangs"])


@router.post("", response_model=Envelope[GangRead], status_code=status.HTTP_201_CREATED)
def create_gang(request: GangCreate, user: UserDep, gangs: GangServiceDep) -> dict[str, object]:
    gang = gangs.create_gang(
        user,
        request.name,
        request.gang_type_id,
        alignment=request.alignment,
        gang_colour=request.gang_colour,
    )
    return ok(gang)


@router.get("", response_model=Envelope[list[GangRead]])
def list_gangs(user: UserDep, gangs: GangServiceDep) -> dict[str, object]:
    return ok(gangs.list_gangs(user))


@router.get("/{gang_id}", response_model=Envelope[GangDetail])
def get_gang(gang_id: int, gangs: GangServiceDep) -> dict[str, object]:
    return ok(gangs.get_gang(gang_id))


@router.patch("/{gang_id}", response_model=Envelope[GangRead])
def update_gang(
    gang_id: int, request: GangUpdate, user: UserDep, gangs: GangServiceDep
) -> dict[str, object]:
    return ok(gangs.update_gang(user, gang_id, request.model_dump(exclude_unset=True)))


@router.delete("/{gang_id}", response_model=Envelope[None])
def delete_gang(gang_id: int, user: UserDep, gangs: GangServiceDep) -> dict[str, object]:
    gangs.delete_gang(user, gang_id)
    return ok(None)


@router.put("/{gang_id}/positions", response_model=Envelope[list[FighterRead]])
def update_positions(
    gang_id: int, request: PositionsUpdate, user: UserDep, gangs: GangServiceDep
) -> dict[str, object]:
    return ok(gangs.update_positions(user, gang_id, request.positions))


@router.post(
    "/{gang_id}/copy", response_model=Envelope[GangRead], status_code=status.HTTP_201_CREATED
)
def copy_gang(
    gang_id: int, request: GangCopy, user: UserDep, gangs: GangServiceDep
) -> dict[str, object]:
    return ok(gangs.copy_gang(user, gang_id, new_name=request.new_name))


@router.post("/{gang_id}/recalculate", response_model=Envelope[RecalculateResult])
def recalculate_gang(gang_id: int, user: UserDep, gangs: GangServiceDep) -> dict[str, object]:
    return ok(gangs.recalculate_gang(user, gang_id))


@router.get("/{gang_id}/logs", response_model=Envelope[list[GangLogRead]])
def list_logs(
    gang_id: int,
    gangs: GangServiceDep,
    logs: GangLogServiceDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> dict[str, object]:
    gangs.get_gang(gang_id)
    return ok(logs.list_logs(gang_id, limit=limit, offset=offset))


@router.get("/{gang_id}/stash", response_model=Envelope[list[FighterEquipmentRead]])
def list_stash(gang_id: int, equipment: EquipmentServiceDep) -> dict[str, object]:
    return ok(equipment.list_stash(gang_id))


@router.get("/{gang_id}/vehicles", response_model=Envelope[list[VehicleRead]])
def list_vehicles(
    gang_id: int, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.list_vehicles(user, gang_id))
