"""User-defined equipment, fighter types, skills and territories."""

from __future__ import annotations

from fastapi import APIRouter, status

from munda.api.deps import CatalogServiceDep, UserDep
from munda.schemas import Envelope, ok
from munda.schemas.custom import (
    CustomEquipmentCreate,
    CustomEquipmentRead,
    CustomEquipmentUpdate,
    CustomFighterTypeCreate,
    CustomFighterTypeRead,
    CustomFighterTypeUpdate,
    CustomSkillCreate,
    CustomSkillRead,
    CustomSkillUpdate,
    CustomTerritoryCreate,
    CustomTerritoryRead,
    CustomTerritoryUpdate,
)

router = APIRouter(prefix="/custom", tags=["custom"])


@router.get("/equipment", response_model=Envelope[list[CustomEquipmentRead]])
def list_custom_equipment(user: UserDep, catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_custom_equipment(user))


@router.post(
    "/equipment",
    response_model=Envelope[CustomEquipmentRead],
    status_code=status.HTTP_201_CREATED,
)
def create_custom_equipment(
    request: CustomEquipmentCreate, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    return ok(catalog.create_custom_equipment(user, request.model_dump()))


@router.patch("/equipment/{custom_equipment_id}", response_model=Envelope[CustomEquipmentRead])
def update_custom_equipment(
    custom_equipment_id: int,
    request: CustomEquipmentUpdate,
    user: UserDep,
    catalog: CatalogServiceDep,
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(catalog.update_custom_equipment(user, custom_equipment_id, changes))


@router.delete("/equipment/{custom_equipment_id}", response_model=Envelope[None])
def delete_custom_equipment(
    custom_equipment_id: int, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    catalog.delete_custom_equipment(user, custom_equipment_id)
    return ok(None)


@router.get("/fighter-types", response_model=Envelope[list[CustomFighterTypeRead]])
def list_custom_fighter_types(user: UserDep, catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_custom_fighter_types(user))


@router.post(
    "/fighter-types",
    response_model=Envelope[CustomFighterTypeRead],
    status_code=status.HTTP_201_CREATED,
)
def create_custom_fighter_type(
    request: CustomFighterTypeCreate, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    return ok(catalog.create_custom_fighter_type(user, request.model_dump()))


@router.patch(
    "/fighter-types/{custom_fighter_type_id}", response_model=Envelope[CustomFighterTypeRead]
)
def update_custom_fighter_type(
    custom_fighter_type_id: int,
    request: CustomFighterTypeUpdate,
    user: UserDep,
    catalog: CatalogServiceDep,
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(catalog.update_custom_fighter_type(user, custom_fighter_type_id, changes))


@router.delete("/fighter-types/{custom_fighter_type_id}", response_model=Envelope[None])
def delete_custom_fighter_type(
    custom_fighter_type_id: int, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    catalog.delete_custom_fighter_type(user, custom_fighter_type_id)
    return ok(None)


@router.get("/skills", response_model=Envelope[list[CustomSkillRead]])
def list_custom_skills(user: UserDep, catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_custom_skills(user))


@router.post(
    "/skills", response_model=Envelope[CustomSkillRead], status_code=status.HTTP_201_CREATED
)
def create_custom_skill(
    request: CustomSkillCreate, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    return ok(catalog.create_custom_skill(user, request.model_dump()))


@router.patch("/skills/{custom_skill_id}", response_model=Envelope[CustomSkillRead])
def update_custom_skill(
    custom_skill_id: int, request: CustomSkillUpdate, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(catalog.update_custom_skill(user, custom_skill_id, changes))


@router.delete("/skills/{custom_skill_id}", response_model=Envelope[None])
def delete_custom_skill(
    custom_skill_id: int, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    catalog.delete_custom_skill(user, custom_skill_id)
    return ok(None)


@router.get("/territories", response_model=Envelope[list[CustomTerritoryRead]])
def list_custom_territories(user: UserDep, catalog: CatalogServiceDep) -> dict[str, object]:
    return ok(catalog.list_custom_territories(user))


@router.post(
    "/territories",
    response_model=Envelope[CustomTerritoryRead],
    status_code=status.HTTP_201_CREATED,
)
def create_custom_territory(
    request: CustomTerritoryCreate, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    return ok(catalog.create_custom_territory(user, request.model_dump()))


@router.patch("/territories/{custom_territory_id}", response_model=Envelope[CustomTerritoryRead])
def update_custom_territory(
    custom_territory_id: int,
    request: CustomTerritoryUpdate,
    user: UserDep,
    catalog: CatalogServiceDep,
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(catalog.update_custom_territory(user, custom_territory_id, changes))


@router.delete("/territories/{custom_territory_id}", response_model=Envelope[None])
def delete_custom_territory(
    custom_territory_id: int, user: UserDep, catalog: CatalogServiceDep
) -> dict[str, object]:
    catalog.delete_custom_territory(user, custom_territory_id)
    return ok(None)
