from datetime import datetime

from pydantic import BaseModel, Field

from munda.domain.enums import BalanceOperation

from .common import ORMModel
from .equipment import FighterEquipmentRead
from .fighter import FighterRead
from .summary import GangSummary
from .vehicle import VehicleRead


class GangCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Gang name")
    gang_type_id: int = Field(..., description="Catalog gang type")
    alignment: str | None = Field(None, description="Defaults to the gang type's alignment")
    gang_colour: str | None = None


class GangUpdate(BaseModel):
    name: str | None = None
    note: str | None = None
    alignment: str | None = None
    gang_colour: str | None = None
    alliance_id: int | None = None
    meat: int | None = Field(None, ge=0)
    scavenging_rolls: int | None = Field(None, ge=0)
    exploration_points: int | None = Field(None, ge=0)
    gang_variants: list[str] | None = None
    credits: int | None = Field(None, ge=0, description="Amount applied with credits_operation")
    credits_operation: BalanceOperation | None = None
    reputation: int | None = Field(
        None, ge=0, description="Amount applied with reputation_operation"
    )
    reputation_operation: BalanceOperation | None = None


class PositionsUpdate(BaseModel):
    positions: dict[int, int] = Field(..., description="Mapping of position to fighter id")


class GangCopy(BaseModel):
    new_name: str | None = None


class GangRead(GangSummary):
    alignment: str
    alliance_id: int | None = None
    meat: int
    scavenging_rolls: int
    exploration_points: int
    gang_colour: str | None = None
    note: str | None = None
    gang_variants: list[str] | None = None
    created_at: datetime | None = None


class GangDetail(GangRead):
    computed_rating: int
    computed_wealth: int
    fighters: list[FighterRead] = []
    stash: list[FighterEquipmentRead] = []
    vehicles: list[VehicleRead] = []


class GangLogRead(ORMModel):
    id: int
    gang_id: int
    user_id: int | None = None
    action_type: str
    description: str
    fighter_id: int | None = None
    vehicle_id: int | None = None
    created_at: datetime


class RecalculateResult(BaseModel):
    old_rating: int
    new_rating: int
    old_wealth: int
    new_wealth: int
