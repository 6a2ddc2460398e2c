"""Profiles behind the X-User-Id header."""

from __future__ import annotations

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from munda.api.deps import ProfileServiceDep, UserDep
from munda.domain.enums import UserRole
from munda.schemas import Envelope, ORMModel, ok

router = APIRouter(prefix="/profiles", tags=["profiles"])


class ProfileCreate(BaseModel):
    username: str = Field(..., min_length=1)
    user_role: UserRole = UserRole.USER


class ProfileRead(ORMModel):
    id: int
    username: str
    user_role: str


@router.post("", response_model=Envelope[ProfileRead], status_code=status.HTTP_201_CREATED)
def create_profile(request: ProfileCreate, profiles: ProfileServiceDep) -> dict[str, object]:
    return ok(profiles.create_profile(request.username, request.user_role))


@router.get("/me", response_model=Envelope[ProfileRead])
def read_current_profile(user: UserDep) -> dict[str, object]:
    return ok(user)
