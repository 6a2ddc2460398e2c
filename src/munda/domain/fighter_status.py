"""Fighter status rules.

A fighter can be in at most one of the exclusive statuses (killed, retired,
enslaved, captured). Recovery cannot overlap an exclusive status either.
Starvation is independent of everything else.
"""

from __future__ import annotations

from typing import Protocol

from munda.domain.enums import FighterAction

EXCLUSIVE_STATUSES = ("killed", "retired", "enslaved", "captured")

# Which flag each toggling action controls
ACTION_FLAGS: dict[FighterAction, str] = {
    FighterAction.KILL: "killed",
    FighterAction.RETIRE: "retired",
    FighterAction.SELL: "enslaved",
    FighterAction.CAPTURE: "captured",
    FighterAction.RECOVER: "recovery",
}

_ACTION_VERBS: dict[FighterAction, str] = {
    FighterAction.KILL: "kill",
    FighterAction.RETIRE: "retire",
    FighterAction.SELL: "sell",
    FighterAction.CAPTURE: "capture",
    FighterAction.RECOVER: "send to recovery",
}


class HasStatusFlags(Protocol):
    killed: bool
    retired: bool
    enslaved: bool
    captured: bool
    recovery: bool
    starved: bool


def counts_toward_rating(fighter: HasStatusFlags) -> bool:
    """Return True when the fighter's cost belongs in the gang rating.

    Killed, retired, enslaved and captured fighters are excluded; fighters in
    recovery or starved still count.
    """
    return not any(getattr(fighter, status) for status in EXCLUSIVE_STATUSES)


def active_statuses(fighter: HasStatusFlags) -> list[str]:
    """Return the names of every status flag currently set."""
    return [
        status
        for status in (*EXCLUSIVE_STATUSES, "recovery", "starved")
        if getattr(fighter, status)
    ]


def status_conflict(fighter: HasStatusFlags, action: FighterAction) -> str | None:
    """Return the conflicting status blocking ``action``, or None.

    Turning a flag off is never blocked. Kill, retire, sell and capture are
    blocked by any other exclusive status and by recovery; recover is blocked
    by any exclusive status.
    """
    flag = ACTION_FLAGS.get(action)
    if flag is None:
        return None
    if getattr(fighter, flag):
        return None

    blockers: tuple[str, ...]
    if action == FighterAction.RECOVER:
        blockers = EXCLUSIVE_STATUSES
    else:
        blockers = (*EXCLUSIVE_STATUSES, "recovery")

    for status in blockers:
        if status != flag and getattr(fighter, status):
            return status
    return None


def is_status_incompatible(fighter: HasStatusFlags, action: FighterAction) -> bool:
    return status_conflict(fighter, action) is not None


def ensure_status_compatible(fighter: HasStatusFlags, action: FighterAction) -> None:
    """Raise ``ValueError`` when ``action`` conflicts with the fighter's status."""
    status = status_conflict(fighter, action)
    if status is not None:
        verb = _ACTION_VERBS.get(action, str(action))
        raise ValueError(f"Cannot {verb} a fighter who is {_describe(status)}")


def _describe(status: str) -> str:
    if status == "recovery":
        return "in recovery"
    return status
