"""Vehicle endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from munda.api.deps import UserDep, VehicleServiceDep
from munda.schemas import Envelope, ok
from munda.schemas.effect import EffectRead
from munda.schemas.vehicle import (
    AddVehicleResult,
    CrewChangeResult,
    HardpointFit,
    HardpointUpdate,
    HardpointUpdateResult,
    RemoveVehicleResult,
    VehicleAssign,
    VehicleCreate,
    VehicleDamageCreate,
    VehicleDamageResult,
    VehicleRead,
    VehicleSell,
    VehicleUpdate,
)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post("", response_model=Envelope[AddVehicleResult], status_code=status.HTTP_201_CREATED)
def add_vehicle(
    request: VehicleCreate, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    result = vehicles.add_vehicle(
        user,
        request.gang_id,
        request.vehicle_type_id,
        vehicle_name=request.vehicle_name,
        cost=request.cost,
    )
    return ok(result)


@router.patch("/{vehicle_id}", response_model=Envelope[VehicleRead])
def update_vehicle(
    vehicle_id: int, request: VehicleUpdate, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(vehicles.update_vehicle(user, vehicle_id, changes))


@router.post("/{vehicle_id}/assign", response_model=Envelope[CrewChangeResult])
def assign_vehicle(
    vehicle_id: int, request: VehicleAssign, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.assign_vehicle(user, vehicle_id, request.fighter_id))


@router.post("/{vehicle_id}/unassign", response_model=Envelope[CrewChangeResult])
def unassign_vehicle(
    vehicle_id: int, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.unassign_vehicle(user, vehicle_id))


@router.post("/{vehicle_id}/sell", response_model=Envelope[RemoveVehicleResult])
def sell_vehicle(
    vehicle_id: int, request: VehicleSell, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.sell_vehicle(user, vehicle_id, request.manual_cost))


@router.delete("/{vehicle_id}", response_model=Envelope[RemoveVehicleResult])
def delete_vehicle(
    vehicle_id: int, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.delete_vehicle(user, vehicle_id))


@router.post(
    "/{vehicle_id}/damage",
    response_model=Envelope[VehicleDamageResult],
    status_code=status.HTTP_201_CREATED,
)
def add_vehicle_damage(
    vehicle_id: int, request: VehicleDamageCreate, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.add_vehicle_damage(user, vehicle_id, request.damage_type_id))


@router.delete("/{vehicle_id}/damage/{effect_id}", response_model=Envelope[VehicleDamageResult])
def remove_vehicle_damage(
    vehicle_id: int, effect_id: int, user: UserDep, vehicles: VehicleServiceDep
) -> dict[str, object]:
    return ok(vehicles.remove_vehicle_damage(user, vehicle_id, effect_id))


@router.put("/{vehicle_id}/hardpoints/{hardpoint_id}/weapon", response_model=Envelope[EffectRead])
def fit_weapon_to_hardpoint(
    vehicle_id: int,
    hardpoint_id: int,
    request: HardpointFit,
    user: UserDep,
    vehicles: VehicleServiceDep,
) -> dict[str, object]:
    hardpoint = vehicles.fit_weapon_to_hardpoint(
        user, vehicle_id, hardpoint_id, request.fighter_equipment_id
    )
    return ok(hardpoint)


@router.patch(
    "/{vehicle_id}/hardpoints/{hardpoint_id}", response_model=Envelope[HardpointUpdateResult]
)
def update_vehicle_hardpoint(
    vehicle_id: int,
    hardpoint_id: int,
    request: HardpointUpdate,
    user: UserDep,
    vehicles: VehicleServiceDep,
) -> dict[str, object]:
    result = vehicles.update_vehicle_hardpoint(
        user, vehicle_id, hardpoint_id, request.operated_by, request.arcs
    )
    return ok(result)
