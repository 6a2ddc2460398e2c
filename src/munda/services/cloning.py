"""Row cloning used when copying gangs and fighters."""

import copy
from typing import Any

from munda.models import Base, FighterEffect, FighterEffectModifier

_ALWAYS_SKIPPED = ("id", "created_at", "updated_at")


def column_values(row: Base, *, exclude: tuple[str, ...] = ()) -> dict[str, Any]:
    """Return a row's column values, deep-copying JSON payloads."""
    skipped = {*_ALWAYS_SKIPPED, *exclude}
    return {
        column.key: copy.deepcopy(getattr(row, column.key))
        for column in row.__table__.columns
        if column.key not in skipped
    }


def clone_effect(effect: FighterEffect, **overrides: Any) -> FighterEffect:
    """Copy an effect and its modifiers; ``overrides`` set the new holder."""
    values = column_values(
        effect, exclude=("fighter_id", "vehicle_id", "fighter_equipment_id", "user_id")
    )
    values.update(overrides)
    clone = FighterEffect(**values)
    clone.modifiers = [
        FighterEffectModifier(
            stat_name=modifier.stat_name,
            numeric_value=modifier.numeric_value,
            operation=modifier.operation,
        )
        for modifier in effect.modifiers
    ]
    return clone
