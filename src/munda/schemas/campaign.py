from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from munda.domain.enums import CampaignRole

from .common import ORMModel
from .summary import GangSummary


class CampaignCreate(BaseModel):
    campaign_name: str = Field(..., min_length=1, description="Campaign name")
    campaign_type_id: int | None = Field(None, description="Catalog campaign type")
    description: str | None = None


class CampaignSettingsUpdate(BaseModel):
    campaign_name: str | None = None
    description: str | None = None
    note: str | None = None
    status: str | None = None
    has_meat: bool | None = None
    has_exploration_points: bool | None = None
    has_scavenging_rolls: bool | None = None


class MemberAdd(BaseModel):
    user_id: int
    role: CampaignRole = CampaignRole.MEMBER


class MemberRoleUpdate(BaseModel):
    role: CampaignRole


class CampaignGangAdd(BaseModel):
    gang_id: int


class TerritoryAdd(BaseModel):
    territory_id: int | None = Field(None, description="Catalog territory")
    territory_name: str | None = Field(None, description="Custom name (or override)")
    custom_territory_id: int | None = Field(None, description="User-defined territory")


class TerritoryAssign(BaseModel):
    gang_id: int


class TerritoryStatusUpdate(BaseModel):
    ruined: bool | None = None
    default_gang_territory: bool | None = None


class ResourceName(BaseModel):
    resource_name: str = Field(..., min_length=1)


class GangResourceUpdate(BaseModel):
    resource_id: int
    quantity_delta: int = Field(..., description="Signed change to the gang's stock")


class BattleParticipant(BaseModel):
    gang_id: int
    role: str | None = None


class BattleCreate(BaseModel):
    scenario: str = Field(..., min_length=1)
    attacker_id: int | None = None
    defender_id: int | None = None
    winner_id: int | None = None
    note: str | None = None
    participants: list[BattleParticipant] = Field(default_factory=list)
    claimed_territories: list[int] = Field(
        default_factory=list, description="Campaign territory ids handed to the winner"
    )


class BattleUpdate(BaseModel):
    scenario: str | None = None
    attacker_id: int | None = None
    defender_id: int | None = None
    winner_id: int | None = None
    note: str | None = None
    participants: list[BattleParticipant] | None = None


class CampaignMemberRead(ORMModel):
    id: int
    campaign_id: int
    user_id: int
    role: str
    invited_by: int | None = None
    joined_at: datetime | None = None


class CampaignGangRead(ORMModel):
    id: int
    campaign_id: int
    gang_id: int
    user_id: int
    status: str
    joined_at: datetime | None = None
    gang: GangSummary


class CampaignTerritoryRead(ORMModel):
    id: int
    campaign_id: int
    territory_id: int | None = None
    custom_territory_id: int | None = None
    territory_name: str
    gang_id: int | None = None
    ruined: bool
    default_gang_territory: bool


class CampaignResourceRead(ORMModel):
    id: int
    campaign_id: int
    resource_name: str


class CampaignGangResourceRead(ORMModel):
    id: int
    campaign_gang_id: int
    campaign_resource_id: int
    quantity: int


class CampaignBattleRead(ORMModel):
    id: int
    campaign_id: int
    scenario: str
    attacker_id: int | None = None
    defender_id: int | None = None
    winner_id: int | None = None
    note: str | None = None
    participants: list[dict[str, Any]] | None = None
    created_at: datetime | None = None


class CampaignRead(ORMModel):
    id: int
    campaign_name: str
    campaign_type_id: int | None = None
    status: str
    description: str | None = None
    note: str | None = None
    has_meat: bool
    has_exploration_points: bool
    has_scavenging_rolls: bool


class CampaignDetail(CampaignRead):
    members: list[CampaignMemberRead] = []
    gangs: list[CampaignGangRead] = []
    territories: list[CampaignTerritoryRead] = []
    resources: list[CampaignResourceRead] = []
    battles: list[CampaignBattleRead] = []
