"""Gang activity log.

Every gang mutation records a ``gang_logs`` row describing what happened.
Entries are written inside the caller's transaction (flush only) and are
read back newest first.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from munda.models import GangLog

logger = logging.getLogger(__name__)


def fighter_added_description(name: str, cost: int, rating: int) -> str:
    return f'Added fighter "{name}" ({cost} credits). New gang rating: {rating}'


def equipment_purchased_description(item: str, cost: int, holder: str | None = None) -> str:
    if holder:
        return f"Purchased {item} for {cost} credits for {holder}"
    return f"Purchased {item} for {cost} credits"


def equipment_sold_description(item: str, value: int) -> str:
    return f"Sold {item} for {value} credits"


def xp_changed_description(name: str, delta: int, old: int, new: int) -> str:
    verb = "gained" if delta >= 0 else "lost"
    return f"{name} {verb} {abs(delta)} XP ({old} -> {new})"


def credits_changed_description(old: int, new: int) -> str:
    return f"Credits changed from {old} to {new}"


def reputation_changed_description(old: int, new: int) -> str:
    return f"Reputation changed from {old} to {new}"


def status_description(name: str, event: str, rating: int | None = None) -> str:
    text = f'Fighter "{name}" {event}'
    if rating is not None:
        text += f". New gang rating: {rating}"
    return text


class GangLogService:
    """Writes and reads gang activity entries."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        gang_id: int,
        user_id: int | None,
        action_type: str,
        description: str,
        fighter_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> GangLog:
        """Record a log entry in the current transaction.

        Args:
            gang_id: Gang the entry belongs to
            user_id: Acting user, if any
            action_type: One of the ``GangLogAction`` values
            description: Human readable summary
            fighter_id: Fighter the entry concerns, if any
            vehicle_id: Vehicle the entry concerns, if any

        Returns:
            The flushed GangLog row
        """
        entry = GangLog(
            gang_id=gang_id,
            user_id=user_id,
            action_type=str(action_type),
            description=description,
            fighter_id=fighter_id,
            vehicle_id=vehicle_id,
        )
        self.session.add(entry)
        self.session.flush()
        logger.debug("gang %s: %s - %s", gang_id, action_type, description)
        return entry

    def list_logs(self, gang_id: int, limit: int = 50, offset: int = 0) -> list[GangLog]:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if offset < 0:
            raise ValueError("offset must be non-negative")
        stmt = (
            select(GangLog)
            .where(GangLog.gang_id == gang_id)
            .order_by(GangLog.created_at.desc(), GangLog.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars())
