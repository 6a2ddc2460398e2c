"""Row loading and ownership checks shared by the services.

Ownership replaces row-level security: a user may act on a gang (and
everything inside it) when they own it or hold the admin role. Missing rows
raise ``LookupError``; failed checks raise ``PermissionError``.
"""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from munda.models import (
    Base,
    Campaign,
    CampaignMember,
    Fighter,
    FighterEquipment,
    Gang,
    Profile,
    Vehicle,
)

ModelT = TypeVar("ModelT", bound=Base)


def get_or_404(session: Session, model: type[ModelT], row_id: int, label: str) -> ModelT:
    """Load a row by primary key or raise ``LookupError("<label> not found")``."""
    row = session.get(model, row_id)
    if row is None:
        raise LookupError(f"{label} not found")
    return row


def ensure_gang_access(gang: Gang, user: Profile) -> None:
    if user.is_admin or gang.user_id == user.id:
        return
    raise PermissionError("You do not have permission to modify this gang")


def load_gang(session: Session, gang_id: int, user: Profile, *, for_update: bool = False) -> Gang:
    """Load a gang the user may modify."""
    if for_update:
        gang = session.get(Gang, gang_id, with_for_update=True)
    else:
        gang = session.get(Gang, gang_id)
    if gang is None:
        raise LookupError("Gang not found")
    ensure_gang_access(gang, user)
    return gang


def load_fighter(session: Session, fighter_id: int, user: Profile) -> Fighter:
    fighter = get_or_404(session, Fighter, fighter_id, "Fighter")
    ensure_gang_access(fighter.gang, user)
    return fighter


def load_vehicle(session: Session, vehicle_id: int, user: Profile) -> Vehicle:
    vehicle = get_or_404(session, Vehicle, vehicle_id, "Vehicle")
    ensure_gang_access(vehicle.gang, user)
    return vehicle


def load_equipment_item(session: Session, item_id: int, user: Profile) -> FighterEquipment:
    item = get_or_404(session, FighterEquipment, item_id, "Equipment")
    ensure_gang_access(item.gang, user)
    return item


def campaign_role(session: Session, campaign: Campaign, user: Profile) -> str | None:
    member = session.execute(
        select(CampaignMember).where(
            CampaignMember.campaign_id == campaign.id, CampaignMember.user_id == user.id
        )
    ).scalar_one_or_none()
    return member.role if member is not None else None


def is_campaign_manager(session: Session, campaign: Campaign, user: Profile) -> bool:
    """Owners, arbitrators and admins manage a campaign."""
    if user.is_admin:
        return True
    return campaign_role(session, campaign, user) in ("OWNER", "ARBITRATOR")


def ensure_campaign_manager(
    session: Session,
    campaign: Campaign,
    user: Profile,
    message: str = "Only campaign owners and arbitrators can manage this campaign",
) -> None:
    if not is_campaign_manager(session, campaign, user):
        raise PermissionError(message)


def ensure_campaign_owner(session: Session, campaign: Campaign, user: Profile) -> None:
    if user.is_admin or campaign_role(session, campaign, user) == "OWNER":
        return
    raise PermissionError("Only the campaign owner can do this")


def refresh(session: Session) -> None:
    """Flush pending changes and expire loaded state.

    Collections on parents still hold rows deleted in this transaction until
    they are expired; cost aggregation must see the post-delete state.
    """
    session.flush()
    session.expire_all()


def next_position(session: Session, gang_id: int) -> int:
    """Position after the gang's last fighter."""
    current = session.execute(
        select(func.max(Fighter.position)).where(Fighter.gang_id == gang_id)
    ).scalar_one_or_none()
    return 0 if current is None else current + 1
