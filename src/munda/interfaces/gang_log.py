"""Gang Log Service Protocol Interface."""

from typing import Protocol

from munda.models import GangLog


class IGangLogService(Protocol):
    """Protocol for recording gang activity."""

    def create(
        self,
        gang_id: int,
        user_id: int | None,
        action_type: str,
        description: str,
        fighter_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> GangLog:
        """Record a log entry in the current transaction."""
        ...

    def list_logs(self, gang_id: int, limit: int = 50, offset: int = 0) -> list[GangLog]:
        """Return a page of entries, newest first."""
        ...
