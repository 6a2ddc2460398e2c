"""Equipment endpoints: trading post purchases, sales and the gang stash."""

from __future__ import annotations

from fastapi import APIRouter, status

from munda.api.deps import EquipmentServiceDep, UserDep
from munda.schemas import Envelope, ok
from munda.schemas.equipment import (
    BuyEquipmentResult,
    EquipmentBuy,
    EquipmentEffectAdd,
    EquipmentEffectDeleteResult,
    EquipmentEffectResult,
    EquipmentSell,
    FighterEquipmentRead,
    MoveFromStash,
    MoveFromStashResult,
    RemoveEquipmentResult,
    StashDeleteResult,
    StashSell,
    StashSellResult,
)

router = APIRouter(prefix="/equipment", tags=["equipment"])


@router.post("", response_model=Envelope[BuyEquipmentResult], status_code=status.HTTP_201_CREATED)
def buy_equipment(
    request: EquipmentBuy, user: UserDep, equipment: EquipmentServiceDep
) -> dict[str, object]:
    result = equipment.buy_equipment(
        user,
        request.gang_id,
        fighter_id=request.fighter_id,
        vehicle_id=request.vehicle_id,
        equipment_id=request.equipment_id,
        custom_equipment_id=request.custom_equipment_id,
        manual_cost=request.manual_cost,
        master_crafted=request.master_crafted,
        use_base_cost_for_rating=request.use_base_cost_for_rating,
        buy_for_gang_stash=request.buy_for_gang_stash,
        selected_effect_ids=request.selected_effect_ids,
    )
    return ok(result)


@router.delete("/{fighter_equipment_id}", response_model=Envelope[RemoveEquipmentResult])
def delete_equipment(
    fighter_equipment_id: int, user: UserDep, equipment: EquipmentServiceDep
) -> dict[str, object]:
    return ok(equipment.delete_equipment(user, fighter_equipment_id))


@router.post("/{fighter_equipment_id}/sell", response_model=Envelope[RemoveEquipmentResult])
def sell_equipment(
    fighter_equipment_id: int,
    request: EquipmentSell,
    user: UserDep,
    equipment: EquipmentServiceDep,
) -> dict[str, object]:
    return ok(equipment.sell_equipment(user, fighter_equipment_id, request.manual_cost))


@router.post("/{fighter_equipment_id}/stash", response_model=Envelope[FighterEquipmentRead])
def move_to_stash(
    fighter_equipment_id: int, user: UserDep, equipment: EquipmentServiceDep
) -> dict[str, object]:
    return ok(equipment.move_to_stash(user, fighter_equipment_id))


@router.post(
    "/{fighter_equipment_id}/unstash", response_model=Envelope[MoveFromStashResult]
)
def move_from_stash(
    fighter_equipment_id: int,
    request: MoveFromStash,
    user: UserDep,
    equipment: EquipmentServiceDep,
) -> dict[str, object]:
    result = equipment.move_from_stash(
        user,
        fighter_equipment_id,
        fighter_id=request.fighter_id,
        vehicle_id=request.vehicle_id,
    )
    return ok(result)


@router.post("/{fighter_equipment_id}/stash/sell", response_model=Envelope[StashSellResult])
def sell_from_stash(
    fighter_equipment_id: int,
    request: StashSell,
    user: UserDep,
    equipment: EquipmentServiceDep,
) -> dict[str, object]:
    return ok(equipment.sell_from_stash(user, fighter_equipment_id, request.manual_cost))


@router.delete("/{fighter_equipment_id}/stash", response_model=Envelope[StashDeleteResult])
def delete_from_stash(
    fighter_equipment_id: int, user: UserDep, equipment: EquipmentServiceDep
) -> dict[str, object]:
    return ok(equipment.delete_from_stash(user, fighter_equipment_id))


@router.post(
    "/{fighter_equipment_id}/effects",
    response_model=Envelope[EquipmentEffectResult],
    status_code=status.HTTP_201_CREATED,
)
def apply_equipment_effect(
    fighter_equipment_id: int,
    request: EquipmentEffectAdd,
    user: UserDep,
    equipment: EquipmentServiceDep,
) -> dict[str, object]:
    return ok(
        equipment.apply_equipment_effect(user, fighter_equipment_id, request.effect_type_id)
    )


@router.delete(
    "/{fighter_equipment_id}/effects/{effect_id}",
    response_model=Envelope[EquipmentEffectDeleteResult],
)
def delete_equipment_effect(
    fighter_equipment_id: int, effect_id: int, user: UserDep, equipment: EquipmentServiceDep
) -> dict[str, object]:
    return ok(equipment.delete_equipment_effect(user, fighter_equipment_id, effect_id))
