"""Campaign Service for Munda Manager.

Campaign management covers membership, participating gangs, territories,
custom resources and the battle log.

Permissions:
- owners and arbitrators (and admins) manage the campaign;
- only owners change roles or delete the campaign;
- gang owners answer invites and adjust their own gang's resources.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from munda.domain.enums import BattleResult, CampaignGangStatus, CampaignRole, GangLogAction
from munda.interfaces import IGangLogService
from munda.models import (
    Campaign,
    CampaignBattle,
    CampaignGang,
    CampaignGangResource,
    CampaignMember,
    CampaignResource,
    CampaignTerritory,
    CampaignType,
    CustomTerritory,
    Gang,
    Profile,
    Territory,
    utc_now,
)
from munda.services.access import (
    campaign_role,
    ensure_campaign_manager,
    ensure_campaign_owner,
    get_or_404,
    is_campaign_manager,
    refresh,
)

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = frozenset(
    {
        "campaign_name",
        "description",
        "note",
        "status",
        "has_meat",
        "has_exploration_points",
        "has_scavenging_rolls",
    }
)

BATTLE_FIELDS = frozenset(
    {"scenario", "attacker_id", "defender_id", "winner_id", "note", "participants"}
)

RESOURCE_PERMISSION_MESSAGE = "Only campaign owners and arbitrators can create resources"


def battle_result_for(gang_id: int, winner_id: int | None) -> BattleResult:
    """Outcome of a battle from one gang's point of view."""
    if winner_id is None:
        return BattleResult.DRAW
    return BattleResult.WON if winner_id == gang_id else BattleResult.LOST


class CampaignService:
    """Service for campaigns and everything attached to them."""

    def __init__(self, session: Session, logs: IGangLogService):
        self.session = session
        self.logs = logs

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def create_campaign(
        self,
        user: Profile,
        campaign_name: str,
        campaign_type_id: int | None = None,
        description: str | None = None,
    ) -> Campaign:
        """Create a campaign with the caller as its owner."""
        try:
            if not campaign_name or not campaign_name.strip():
                raise ValueError("Campaign name is required")
            if campaign_type_id is not None:
                get_or_404(self.session, CampaignType, campaign_type_id, "Campaign type")

            campaign = Campaign(
                campaign_name=campaign_name.strip(),
                campaign_type_id=campaign_type_id,
                description=description,
                status="Active",
            )
            campaign.members.append(
                CampaignMember(
                    user_id=user.id,
                    role=CampaignRole.OWNER,
                    invited_by=user.id,
                    joined_at=utc_now(),
                )
            )
            self.session.add(campaign)
            self.session.commit()
            logger.info("user %s created campaign %s", user.id, campaign.id)
            return campaign
        except Exception:
            self.session.rollback()
            raise

    def get_campaign(self, campaign_id: int) -> Campaign:
        return get_or_404(self.session, Campaign, campaign_id, "Campaign")

    def list_campaigns(self, user: Profile) -> list[Campaign]:
        stmt = (
            select(Campaign)
            .join(CampaignMember, CampaignMember.campaign_id == Campaign.id)
            .where(CampaignMember.user_id == user.id)
            .order_by(Campaign.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def update_campaign_settings(
        self, user: Profile, campaign_id: int, changes: dict[str, Any]
    ) -> Campaign:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            for field, value in changes.items():
                if field not in SETTINGS_FIELDS:
                    raise ValueError(f"Field '{field}' cannot be updated")
                if field == "campaign_name" and not (value or "").strip():
                    raise ValueError("Campaign name is required")
                setattr(campaign, field, value)
            self.session.commit()
            return campaign
        except Exception:
            self.session.rollback()
            raise

    def delete_campaign(self, user: Profile, campaign_id: int) -> None:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_owner(self.session, campaign, user)
            self.session.delete(campaign)
            self.session.commit()
            logger.info("user %s deleted campaign %s", user.id, campaign_id)
        except Exception:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _load_member(self, campaign: Campaign, member_id: int) -> CampaignMember:
        member = self.session.get(CampaignMember, member_id)
        if member is None or member.campaign_id != campaign.id:
            raise LookupError("Campaign member not found")
        return member

    def _owner_count(self, campaign: Campaign) -> int:
        return sum(1 for member in campaign.members if member.role == CampaignRole.OWNER)

    def add_member(
        self, user: Profile, campaign_id: int, user_id: int, role: str = CampaignRole.MEMBER
    ) -> CampaignMember:
        try:
            role = CampaignRole(role)
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            invitee = get_or_404(self.session, Profile, user_id, "User")
            if campaign_role(self.session, campaign, invitee) is not None:
                raise ValueError("User is already a member of this campaign")
            member = CampaignMember(
                campaign=campaign, user_id=invitee.id, role=role, invited_by=user.id
            )
            self.session.add(member)
            self.session.commit()
            return member
        except Exception:
            self.session.rollback()
            raise

    def remove_member(self, user: Profile, campaign_id: int, member_id: int) -> None:
        """Remove a member together with their gangs in the campaign.

        Members may remove themselves; anyone else needs a manager. The last
        owner cannot be removed.
        """
        try:
            campaign = self.get_campaign(campaign_id)
            member = self._load_member(campaign, member_id)
            if member.user_id != user.id:
                ensure_campaign_manager(self.session, campaign, user)
            if member.role == CampaignRole.OWNER and self._owner_count(campaign) <= 1:
                raise ValueError("Cannot remove the last owner of a campaign")

            for campaign_gang in list(campaign.gangs):
                if (
                    campaign_gang.campaign_member_id == member.id
                    or campaign_gang.user_id == member.user_id
                ):
                    self._drop_campaign_gang(campaign, campaign_gang)
            self.session.delete(member)
            refresh(self.session)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def update_member_role(
        self, user: Profile, campaign_id: int, member_id: int, role: str
    ) -> CampaignMember:
        try:
            role = CampaignRole(role)
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_owner(self.session, campaign, user)
            member = self._load_member(campaign, member_id)
            if (
                member.role == CampaignRole.OWNER
                and role != CampaignRole.OWNER
                and self._owner_count(campaign) <= 1
            ):
                raise ValueError("A campaign must keep at least one owner")
            member.role = role
            self.session.commit()
            return member
        except Exception:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Gangs
    # ------------------------------------------------------------------

    def _campaign_gang(self, campaign: Campaign, gang_id: int) -> CampaignGang:
        for campaign_gang in campaign.gangs:
            if campaign_gang.gang_id == gang_id:
                return campaign_gang
        raise ValueError("Gang is not part of this campaign")

    def _drop_campaign_gang(self, campaign: Campaign, campaign_gang: CampaignGang) -> None:
        """Delete a campaign gang and release its territories; callers refresh afterwards."""
        for territory in campaign.territories:
            if territory.gang_id == campaign_gang.gang_id:
                territory.gang = None
        self.session.delete(campaign_gang)

    def add_gang(self, user: Profile, campaign_id: int, gang_id: int) -> CampaignGang:
        """Enter a gang into the campaign.

        The gang's owner joins as a member if needed. A gang added by its own
        owner is accepted straight away; anyone else's is a pending invite.
        """
        try:
            campaign = self.get_campaign(campaign_id)
            gang = get_or_404(self.session, Gang, gang_id, "Gang")
            owns_gang = gang.user_id == user.id
            if not is_campaign_manager(self.session, campaign, user) and not (
                owns_gang and campaign_role(self.session, campaign, user) is not None
            ):
                raise PermissionError("You do not have permission to add gangs to this campaign")
            already_entered = self.session.execute(
                select(CampaignGang.id).where(CampaignGang.gang_id == gang.id)
            ).first()
            if already_entered is not None:
                raise ValueError("Gang is already part of a campaign")

            member = self.session.execute(
                select(CampaignMember).where(
                    CampaignMember.campaign_id == campaign.id,
                    CampaignMember.user_id == gang.user_id,
                )
            ).scalar_one_or_none()
            if member is None:
                member = CampaignMember(
                    campaign=campaign,
                    user_id=gang.user_id,
                    role=CampaignRole.MEMBER,
                    invited_by=user.id,
                )
                self.session.add(member)
                self.session.flush()

            campaign_gang = CampaignGang(
                campaign=campaign,
                gang=gang,
                user_id=gang.user_id,
                member=member,
                invited_by=user.id,
                status=CampaignGangStatus.ACCEPTED if owns_gang else CampaignGangStatus.PENDING,
                joined_at=utc_now() if owns_gang else None,
            )
            self.session.add(campaign_gang)
            self.session.commit()
            return campaign_gang
        except Exception:
            self.session.rollback()
            raise

    def _load_invite(self, user: Profile, campaign_gang_id: int) -> CampaignGang:
        campaign_gang = get_or_404(self.session, CampaignGang, campaign_gang_id, "Campaign gang")
        if campaign_gang.gang.user_id != user.id and not user.is_admin:
            raise PermissionError("Only the gang owner can respond to this invite")
        if campaign_gang.status != CampaignGangStatus.PENDING:
            raise ValueError("Invite has already been accepted")
        return campaign_gang

    def accept_invite(self, user: Profile, campaign_gang_id: int) -> CampaignGang:
        try:
            campaign_gang = self._load_invite(user, campaign_gang_id)
            now = utc_now()
            campaign_gang.status = CampaignGangStatus.ACCEPTED
            campaign_gang.joined_at = now
            if campaign_gang.member is not None and campaign_gang.member.joined_at is None:
                campaign_gang.member.joined_at = now
            self.session.commit()
            return campaign_gang
        except Exception:
            self.session.rollback()
            raise

    def decline_invite(self, user: Profile, campaign_gang_id: int) -> None:
        try:
            campaign_gang = self._load_invite(user, campaign_gang_id)
            self._drop_campaign_gang(campaign_gang.campaign, campaign_gang)
            refresh(self.session)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def remove_gang(self, user: Profile, campaign_id: int, gang_id: int) -> None:
        try:
            campaign = self.get_campaign(campaign_id)
            campaign_gang = self._campaign_gang(campaign, gang_id)
            if campaign_gang.gang.user_id != user.id:
                ensure_campaign_manager(self.session, campaign, user)
            self._drop_campaign_gang(campaign, campaign_gang)
            refresh(self.session)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Territories
    # ------------------------------------------------------------------

    def _load_territory(self, campaign: Campaign, campaign_territory_id: int) -> CampaignTerritory:
        territory = self.session.get(CampaignTerritory, campaign_territory_id)
        if territory is None or territory.campaign_id != campaign.id:
            raise LookupError("Territory not found")
        return territory

    def add_territory(
        self,
        user: Profile,
        campaign_id: int,
        territory_id: int | None = None,
        territory_name: str | None = None,
        custom_territory_id: int | None = None,
    ) -> CampaignTerritory:
        """Put a catalog territory, a custom territory or a named one into play."""
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            if territory_id is not None and custom_territory_id is not None:
                raise ValueError("Specify only one of territory_id or custom_territory_id")
            if territory_id is not None:
                catalog_territory = get_or_404(self.session, Territory, territory_id, "Territory")
                name = territory_name or catalog_territory.territory_name
            elif custom_territory_id is not None:
                custom = get_or_404(
                    self.session, CustomTerritory, custom_territory_id, "Custom territory"
                )
                if custom.user_id != user.id and not user.is_admin:
                    raise PermissionError("You do not have permission to use this custom territory")
                name = territory_name or custom.territory_name
            elif territory_name and territory_name.strip():
                name = territory_name.strip()
            else:
                raise ValueError("Either territory_id or territory_name is required")

            territory = CampaignTerritory(
                campaign=campaign,
                territory_id=territory_id,
                custom_territory_id=custom_territory_id,
                territory_name=name,
            )
            self.session.add(territory)
            self.session.commit()
            return territory
        except Exception:
            self.session.rollback()
            raise

    def remove_territory(self, user: Profile, campaign_id: int, campaign_territory_id: int) -> None:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            territory = self._load_territory(campaign, campaign_territory_id)
            campaign.territories.remove(territory)
            self.session.delete(territory)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def assign_territory(
        self, user: Profile, campaign_id: int, campaign_territory_id: int, gang_id: int
    ) -> CampaignTerritory:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            territory = self._load_territory(campaign, campaign_territory_id)
            self._campaign_gang(campaign, gang_id)
            territory.gang_id = gang_id
            self.session.commit()
            return territory
        except Exception:
            self.session.rollback()
            raise

    def release_territory(
        self, user: Profile, campaign_id: int, campaign_territory_id: int
    ) -> CampaignTerritory:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            territory = self._load_territory(campaign, campaign_territory_id)
            territory.gang = None
            self.session.commit()
            return territory
        except Exception:
            self.session.rollback()
            raise

    def update_territory_status(
        self,
        user: Profile,
        campaign_id: int,
        campaign_territory_id: int,
        ruined: bool | None = None,
        default_gang_territory: bool | None = None,
    ) -> CampaignTerritory:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(self.session, campaign, user)
            territory = self._load_territory(campaign, campaign_territory_id)
            if ruined is not None:
                territory.ruined = ruined
            if default_gang_territory is not None:
                territory.default_gang_territory = default_gang_territory
            self.session.commit()
            return territory
        except Exception:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def _check_resource_name(self, campaign: Campaign, name: str, exclude_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("Resource name is required")
        for resource in campaign.resources:
            if resource.id != exclude_id and resource.resource_name.lower() == name.lower():
                raise ValueError(f"Resource '{name}' already exists in this campaign")
        return name

    def _load_resource(self, user: Profile, resource_id: int) -> CampaignResource:
        resource = get_or_404(self.session, CampaignResource, resource_id, "Resource")
        ensure_campaign_manager(
            self.session, resource.campaign, user, message=RESOURCE_PERMISSION_MESSAGE
        )
        return resource

    def create_resource(self, user: Profile, campaign_id: int, resource_name: str) -> CampaignResource:
        try:
            campaign = self.get_campaign(campaign_id)
            ensure_campaign_manager(
                self.session, campaign, user, message=RESOURCE_PERMISSION_MESSAGE
            )
            resource = CampaignResource(
                campaign=campaign, resource_name=self._check_resource_name(campaign, resource_name)
            )
            self.session.add(resource)
            self.session.commit()
            return resource
        except Exception:
            self.session.rollback()
            raise

    def update_resource(self, user: Profile, resource_id: int, resource_name: str) -> CampaignResource:
        try:
            resource = self._load_resource(user, resource_id)
            resource.resource_name = self._check_resource_name(
                resource.campaign, resource_name, exclude_id=resource.id
            )
            self.session.commit()
            return resource
        except Exception:
            self.session.rollback()
            raise

    def delete_resource(self, user: Profile, resource_id: int) -> None:
        try:
            resource = self._load_resource(user, resource_id)
            resource.campaign.resources.remove(resource)
            self.session.delete(resource)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def update_gang_resource(
        self, user: Profile, campaign_gang_id: int, resource_id: int, quantity_delta: int
    ) -> CampaignGangResource:
        """Change a campaign gang's stock of a resource.

        Raises:
            ValueError: If the quantity would drop below zero
        """
        try:
            campaign_gang = get_or_404(
                self.session, CampaignGang, campaign_gang_id, "Campaign gang"
            )
            if campaign_gang.gang.user_id != user.id:
                ensure_campaign_manager(
                    self.session,
                    campaign_gang.campaign,
                    user,
                    message="You do not have permission to update this gang's resources",
                )
            resource = get_or_404(self.session, CampaignResource, resource_id, "Resource")
            if resource.campaign_id != campaign_gang.campaign_id:
                raise ValueError("Resource does not belong to this campaign")

            holding = next(
                (row for row in campaign_gang.resources if row.campaign_resource_id == resource.id),
                None,
            )
            current = holding.quantity if holding is not None else 0
            new_quantity = current + quantity_delta
            if new_quantity < 0:
                raise ValueError("Resource quantity cannot be negative")
            if holding is None:
                holding = CampaignGangResource(
                    campaign_gang=campaign_gang, resource=resource, quantity=0
                )
                self.session.add(holding)
            holding.quantity = new_quantity
            self.session.commit()
            return holding
        except Exception:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Battles
    # ------------------------------------------------------------------

    def _validate_battle_gangs(self, campaign: Campaign, values: dict[str, Any]) -> None:
        for key in ("attacker_id", "defender_id", "winner_id"):
            if values.get(key) is not None:
                self._campaign_gang(campaign, values[key])
        for participant in values.get("participants") or []:
            self._campaign_gang(campaign, participant["gang_id"])

    def _log_battle_results(self, user: Profile, battle: CampaignBattle) -> None:
        for gang_id in {battle.attacker_id, battle.defender_id} - {None}:
            result = battle_result_for(gang_id, battle.winner_id)
            self.logs.create(
                gang_id,
                user.id,
                GangLogAction.BATTLE_RESULT,
                f"Battle '{battle.scenario}': {result}",
            )

    def create_battle_log(
        self,
        user: Profile,
        campaign_id: int,
        scenario: str,
        attacker_id: int | None = None,
        defender_id: int | None = None,
        winner_id: int | None = None,
        note: str | None = None,
        participants: list[dict[str, Any]] | None = None,
        claimed_territories: list[int] | None = None,
    ) -> CampaignBattle:
        """Record a battle and hand claimed territories to the winner.

        Raises:
            ValueError: If a gang is not in the campaign, or territories are
                claimed without a winner
        """
        try:
            campaign = self.get_campaign(campaign_id)
            if campaign_role(self.session, campaign, user) is None and not user.is_admin:
                raise PermissionError("Only campaign members can log battles")
            if not scenario or not scenario.strip():
                raise ValueError("Scenario is required")
            participants = [dict(participant) for participant in participants or []]
            values = {
                "attacker_id": attacker_id,
                "defender_id": defender_id,
                "winner_id": winner_id,
                "participants": participants,
            }
            self._validate_battle_gangs(campaign, values)
            claimed_territories = list(claimed_territories or [])
            if claimed_territories and winner_id is None:
                raise ValueError("A winner is required to claim territories")

            battle = CampaignBattle(
                campaign=campaign,
                scenario=scenario.strip(),
                note=note,
                **values,
            )
            self.session.add(battle)
            for campaign_territory_id in claimed_territories:
                self._load_territory(campaign, campaign_territory_id).gang_id = winner_id
            self.session.flush()

            self._log_battle_results(user, battle)
            self.session.commit()
            logger.info("campaign %s logged battle %s", campaign.id, battle.id)
            return battle
        except Exception:
            self.session.rollback()
            raise

    def _load_battle(self, user: Profile, battle_id: int) -> CampaignBattle:
        battle = get_or_404(self.session, CampaignBattle, battle_id, "Battle")
        ensure_campaign_manager(self.session, battle.campaign, user)
        return battle

    def update_battle_log(self, user: Profile, battle_id: int, changes: dict[str, Any]) -> CampaignBattle:
        try:
            battle = self._load_battle(user, battle_id)
            unknown = set(changes) - BATTLE_FIELDS
            if unknown:
                raise ValueError(f"Field '{sorted(unknown)[0]}' cannot be updated")
            self._validate_battle_gangs(battle.campaign, changes)
            for field, value in changes.items():
                setattr(battle, field, value)
            self.session.commit()
            return battle
        except Exception:
            self.session.rollback()
            raise

    def delete_battle_log(self, user: Profile, battle_id: int) -> None:
        try:
            battle = self._load_battle(user, battle_id)
            battle.campaign.battles.remove(battle)
            self.session.delete(battle)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_campaign(self, campaign_id: int) -> dict[str, Any]:
        """JSON-friendly snapshot of a campaign."""
        campaign = self.get_campaign(campaign_id)
        return {
            "id": campaign.id,
            "campaign_name": campaign.campaign_name,
            "campaign_type": (
                campaign.campaign_type.campaign_type_name if campaign.campaign_type else None
            ),
            "status": campaign.status,
            "description": campaign.description,
            "members": [
                {
                    "id": member.id,
                    "user_id": member.user_id,
                    "username": member.user.username,
                    "role": member.role,
                }
                for member in campaign.members
            ],
            "gangs": [
                {
                    "id": campaign_gang.id,
                    "gang_id": campaign_gang.gang_id,
                    "gang_name": campaign_gang.gang.name,
                    "status": campaign_gang.status,
                    "rating": campaign_gang.gang.rating,
                    "resources": {
                        holding.resource.resource_name: holding.quantity
                        for holding in campaign_gang.resources
                    },
                }
                for campaign_gang in campaign.gangs
            ],
            "territories": [
                {
                    "id": territory.id,
                    "territory_name": territory.territory_name,
                    "gang_id": territory.gang_id,
                    "ruined": territory.ruined,
                    "default_gang_territory": territory.default_gang_territory,
                }
                for territory in campaign.territories
            ],
            "resources": [resource.resource_name for resource in campaign.resources],
            "battles": [
                {
                    "id": battle.id,
                    "scenario": battle.scenario,
                    "attacker_id": battle.attacker_id,
                    "defender_id": battle.defender_id,
                    "winner_id": battle.winner_id,
                    "note": battle.note,
                    "participants": battle.participants or [],
                    "created_at": battle.created_at.isoformat() if battle.created_at else None,
                }
                for battle in campaign.battles
            ],
        }
