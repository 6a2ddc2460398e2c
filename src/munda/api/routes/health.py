"""Readiness probe."""

from __future__ import annotations

from fastapi import APIRouter

from munda.api.deps import ApiStateDep
from munda.database import check_database_health

router = APIRouter(tags=["health"])


@router.get("/health")
def health(state: ApiStateDep) -> dict[str, object]:
    healthy = check_database_health()
    return {
        "success": healthy,
        "data": {
            "status": "ok" if healthy else "degraded",
            "database": healthy,
            "starting_credits": state.settings.starting_credits,
        },
    }
