"""Campaign endpoints: settings, members, gangs, territories, resources and battles."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from munda.api.deps import CampaignServiceDep, UserDep
from munda.schemas import Envelope, ok
from munda.schemas.campaign import (
    BattleCreate,
    BattleUpdate,
    CampaignBattleRead,
    CampaignCreate,
    CampaignDetail,
    CampaignGangAdd,
    CampaignGangRead,
    CampaignGangResourceRead,
    CampaignMemberRead,
    CampaignRead,
    CampaignResourceRead,
    CampaignSettingsUpdate,
    CampaignTerritoryRead,
    GangResourceUpdate,
    MemberAdd,
    MemberRoleUpdate,
    ResourceName,
    TerritoryAdd,
    TerritoryAssign,
    TerritoryStatusUpdate,
)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.post("", response_model=Envelope[CampaignRead], status_code=status.HTTP_201_CREATED)
def create_campaign(
    request: CampaignCreate, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaign = campaigns.create_campaign(
        user,
        request.campaign_name,
        campaign_type_id=request.campaign_type_id,
        description=request.description,
    )
    return ok(campaign)


@router.get("", response_model=Envelope[list[CampaignRead]])
def list_campaigns(user: UserDep, campaigns: CampaignServiceDep) -> dict[str, object]:
    return ok(campaigns.list_campaigns(user))


@router.get("/{campaign_id}", response_model=Envelope[CampaignDetail])
def get_campaign(campaign_id: int, campaigns: CampaignServiceDep) -> dict[str, object]:
    return ok(campaigns.get_campaign(campaign_id))


@router.patch("/{campaign_id}", response_model=Envelope[CampaignRead])
def update_campaign_settings(
    campaign_id: int,
    request: CampaignSettingsUpdate,
    user: UserDep,
    campaigns: CampaignServiceDep,
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(campaigns.update_campaign_settings(user, campaign_id, changes))


@router.delete("/{campaign_id}", response_model=Envelope[None])
def delete_campaign(
    campaign_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.delete_campaign(user, campaign_id)
    return ok(None)


@router.get("/{campaign_id}/export", response_model=Envelope[dict[str, Any]])
def export_campaign(campaign_id: int, campaigns: CampaignServiceDep) -> dict[str, object]:
    return ok(campaigns.export_campaign(campaign_id))


# Members


@router.post(
    "/{campaign_id}/members",
    response_model=Envelope[CampaignMemberRead],
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    campaign_id: int, request: MemberAdd, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    return ok(campaigns.add_member(user, campaign_id, request.user_id, request.role))


@router.delete("/{campaign_id}/members/{member_id}", response_model=Envelope[None])
def remove_member(
    campaign_id: int, member_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.remove_member(user, campaign_id, member_id)
    return ok(None)


@router.patch("/{campaign_id}/members/{member_id}", response_model=Envelope[CampaignMemberRead])
def update_member_role(
    campaign_id: int,
    member_id: int,
    request: MemberRoleUpdate,
    user: UserDep,
    campaigns: CampaignServiceDep,
) -> dict[str, object]:
    return ok(campaigns.update_member_role(user, campaign_id, member_id, request.role))


# Gangs


@router.post(
    "/{campaign_id}/gangs",
    response_model=Envelope[CampaignGangRead],
    status_code=status.HTTP_201_CREATED,
)
def add_gang(
    campaign_id: int, request: CampaignGangAdd, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    return ok(campaigns.add_gang(user, campaign_id, request.gang_id))


@router.delete("/{campaign_id}/gangs/{gang_id}", response_model=Envelope[None])
def remove_gang(
    campaign_id: int, gang_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.remove_gang(user, campaign_id, gang_id)
    return ok(None)


@router.post("/invites/{campaign_gang_id}/accept", response_model=Envelope[CampaignGangRead])
def accept_invite(
    campaign_gang_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    return ok(campaigns.accept_invite(user, campaign_gang_id))


@router.post("/invites/{campaign_gang_id}/decline", response_model=Envelope[None])
def decline_invite(
    campaign_gang_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.decline_invite(user, campaign_gang_id)
    return ok(None)


# Territories


@router.post(
    "/{campaign_id}/territories",
    response_model=Envelope[CampaignTerritoryRead],
    status_code=status.HTTP_201_CREATED,
)
def add_territory(
    campaign_id: int, request: TerritoryAdd, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    territory = campaigns.add_territory(
        user,
        campaign_id,
        territory_id=request.territory_id,
        territory_name=request.territory_name,
        custom_territory_id=request.custom_territory_id,
    )
    return ok(territory)


@router.delete("/{campaign_id}/territories/{territory_id}", response_model=Envelope[None])
def remove_territory(
    campaign_id: int, territory_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.remove_territory(user, campaign_id, territory_id)
    return ok(None)


@router.post(
    "/{campaign_id}/territories/{territory_id}/assign",
    response_model=Envelope[CampaignTerritoryRead],
)
def assign_territory(
    campaign_id: int,
    territory_id: int,
    request: TerritoryAssign,
    user: UserDep,
    campaigns: CampaignServiceDep,
) -> dict[str, object]:
    return ok(campaigns.assign_territory(user, campaign_id, territory_id, request.gang_id))


@router.post(
    "/{campaign_id}/territories/{territory_id}/release",
    response_model=Envelope[CampaignTerritoryRead],
)
def release_territory(
    campaign_id: int, territory_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    return ok(campaigns.release_territory(user, campaign_id, territory_id))


@router.patch(
    "/{campaign_id}/territories/{territory_id}",
    response_model=Envelope[CampaignTerritoryRead],
)
def update_territory_status(
    campaign_id: int,
    territory_id: int,
    request: TerritoryStatusUpdate,
    user: UserDep,
    campaigns: CampaignServiceDep,
) -> dict[str, object]:
    territory = campaigns.update_territory_status(
        user,
        campaign_id,
        territory_id,
        ruined=request.ruined,
        default_gang_territory=request.default_gang_territory,
    )
    return ok(territory)


# Resources


@router.post(
    "/{campaign_id}/resources",
    response_model=Envelope[CampaignResourceRead],
    status_code=status.HTTP_201_CREATED,
)
def create_resource(
    campaign_id: int, request: ResourceName, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    return ok(campaigns.create_resource(user, campaign_id, request.resource_name))


@router.patch("/resources/{resource_id}", response_model=Envelope[CampaignResourceRead])
def update_resource(
    resource_id: int, request: ResourceName, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    return ok(campaigns.update_resource(user, resource_id, request.resource_name))


@router.delete("/resources/{resource_id}", response_model=Envelope[None])
def delete_resource(
    resource_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.delete_resource(user, resource_id)
    return ok(None)


@router.post(
    "/campaign-gangs/{campaign_gang_id}/resources",
    response_model=Envelope[CampaignGangResourceRead],
)
def update_gang_resource(
    campaign_gang_id: int,
    request: GangResourceUpdate,
    user: UserDep,
    campaigns: CampaignServiceDep,
) -> dict[str, object]:
    holding = campaigns.update_gang_resource(
        user, campaign_gang_id, request.resource_id, request.quantity_delta
    )
    return ok(holding)


# Battles


@router.post(
    "/{campaign_id}/battles",
    response_model=Envelope[CampaignBattleRead],
    status_code=status.HTTP_201_CREATED,
)
def create_battle_log(
    campaign_id: int, request: BattleCreate, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    battle = campaigns.create_battle_log(
        user,
        campaign_id,
        request.scenario,
        attacker_id=request.attacker_id,
        defender_id=request.defender_id,
        winner_id=request.winner_id,
        note=request.note,
        participants=[participant.model_dump() for participant in request.participants],
        claimed_territories=request.claimed_territories,
    )
    return ok(battle)


@router.patch("/battles/{battle_id}", response_model=Envelope[CampaignBattleRead])
def update_battle_log(
    battle_id: int, request: BattleUpdate, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(campaigns.update_battle_log(user, battle_id, changes))


@router.delete("/battles/{battle_id}", response_model=Envelope[None])
def delete_battle_log(
    battle_id: int, user: UserDep, campaigns: CampaignServiceDep
) -> dict[str, object]:
    campaigns.delete_battle_log(user, battle_id)
    return ok(None)
