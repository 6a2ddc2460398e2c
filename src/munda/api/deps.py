"""Request dependencies: API state, database session, caller and services."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from munda import factory
from munda.api.runtime import ApiState
from munda.database import get_db
from munda.models import Profile
from munda.services import (
    AdvancementService,
    CampaignService,
    CatalogService,
    EquipmentService,
    FighterService,
    GangLogService,
    GangService,
    InjuryService,
    ProfileService,
    VehicleService,
)


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - the lifespan always initialises state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]
DbDep = Annotated[Session, Depends(get_db)]


def current_user(
    db: DbDep, x_user_id: Annotated[str | None, Header()] = None
) -> Profile:
    """Resolve the ``X-User-Id`` header set by the authenticating proxy."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )
    try:
        user_id = int(x_user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user id"
        ) from exc
    user = db.get(Profile, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return user


UserDep = Annotated[Profile, Depends(current_user)]


def _gang_service(db: DbDep) -> GangService:
    return factory.create_gang_service(db)


def _fighter_service(db: DbDep) -> FighterService:
    return factory.create_fighter_service(db)


def _equipment_service(db: DbDep) -> EquipmentService:
    return factory.create_equipment_service(db)


def _advancement_service(db: DbDep) -> AdvancementService:
    return factory.create_advancement_service(db)


def _injury_service(db: DbDep) -> InjuryService:
    return factory.create_injury_service(db)


def _vehicle_service(db: DbDep) -> VehicleService:
    return factory.create_vehicle_service(db)


def _campaign_service(db: DbDep) -> CampaignService:
    return factory.create_campaign_service(db)


def _catalog_service(db: DbDep) -> CatalogService:
    return factory.create_catalog_service(db)


def _gang_log_service(db: DbDep) -> GangLogService:
    return factory.create_gang_log_service(db)


def _profile_service(db: DbDep) -> ProfileService:
    return factory.create_profile_service(db)


GangServiceDep = Annotated[GangService, Depends(_gang_service)]
FighterServiceDep = Annotated[FighterService, Depends(_fighter_service)]
EquipmentServiceDep = Annotated[EquipmentService, Depends(_equipment_service)]
AdvancementServiceDep = Annotated[AdvancementService, Depends(_advancement_service)]
InjuryServiceDep = Annotated[InjuryService, Depends(_injury_service)]
VehicleServiceDep = Annotated[VehicleService, Depends(_vehicle_service)]
CampaignServiceDep = Annotated[CampaignService, Depends(_campaign_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(_catalog_service)]
GangLogServiceDep = Annotated[GangLogService, Depends(_gang_log_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(_profile_service)]
