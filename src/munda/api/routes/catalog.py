"""Read-only catalog endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from munda.api.deps import CatalogServiceDep
from munda.domain.enums import EquipmentType
from munda.schemas import Envelope, ok
from munda.schemas.catalog import (
    EffectTypeRead,
    EquipmentWithCost,
    FighterTypeWithCost,
    GangTypeRead,
    SkillRead,
    VehicleTypeRead,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/gang-types", response_model=Envelope[list[GangTypeRead]])
def list_gang_types(catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_gang_types())


@router.get(
    "/gang-types/{gang_type_id}/fighter-types",
    response_model=Envelope[list[FighterTypeWithCost]],
)
def list_fighter_types(gang_type_id: int, catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_fighter_types(gang_type_id))


@router.get("/equipment", response_model=Envelope[list[EquipmentWithCost]])
def list_equipment(
    catalog: CatalogServiceDep,
    gang_type_id: int | None = None,
    fighter_type_id: int | None = None,
    equipment_type: Annotated[EquipmentType | None, Query()] = None,
) -> dict[str, object]:
    return ok(catalog.list_equipment(gang_type_id, fighter_type_id, equipment_type))


@router.get("/equipment/{equipment_id}/upgrades", response_model=Envelope[list[EffectTypeRead]])
def list_equipment_upgrades(equipment_id: int, catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_equipment_upgrades(equipment_id))


@router.get("/vehicle-types", response_model=Envelope[list[VehicleTypeRead]])
def list_vehicle_types(
    catalog: CatalogServiceDep, gang_type_id: int | None = None
) -> dict[str, object]:
    return ok(catalog.list_vehicle_types(gang_type_id))


@router.get("/skills", response_model=Envelope[list[SkillRead]])
def list_skills(catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_skills())


@router.get("/injury-types", response_model=Envelope[list[EffectTypeRead]])
def list_injury_types(catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_injury_types())


@router.get("/characteristic-types", response_model=Envelope[list[EffectTypeRead]])
def list_characteristic_types(catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_characteristic_types())


@router.get("/vehicle-damage-types", response_model=Envelope[list[EffectTypeRead]])
def list_vehicle_damage_types(catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_vehicle_damage_types())

