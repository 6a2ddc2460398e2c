"""Building fighter and vehicle effects from catalog effect types."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from munda.models import (
    FighterEffect,
    FighterEffectCategory,
    FighterEffectModifier,
    FighterEffectType,
    Vehicle,
)
from munda.services.access import get_or_404


def effect_from_type(
    effect_type: FighterEffectType,
    *,
    user_id: int | None,
    data: dict[str, Any] | None = None,
    **holder: Any,
) -> FighterEffect:
    """Instantiate an effect type with its default modifiers.

    Args:
        effect_type: Catalog effect type
        user_id: Profile applying the effect
        data: Extra ``type_specific_data`` merged over the type's own
        **holder: ``fighter``, ``vehicle`` and/or ``fighter_equipment``

    Returns:
        The new (unflushed) FighterEffect
    """
    type_specific_data = dict(effect_type.type_specific_data or {})
    type_specific_data.update(data or {})
    effect = FighterEffect(
        effect_name=effect_type.effect_name,
        effect_type=effect_type,
        type_specific_data=type_specific_data,
        user_id=user_id,
        **holder,
    )
    effect.modifiers = [
        FighterEffectModifier(
            stat_name=modifier.stat_name,
            numeric_value=modifier.default_numeric_value,
            operation=modifier.operation,
        )
        for modifier in effect_type.modifiers
    ]
    return effect


def load_effect_type(session: Session, effect_type_id: int, category: str) -> FighterEffectType:
    """Load an effect type and check it belongs to ``category``."""
    effect_type = get_or_404(session, FighterEffectType, effect_type_id, "Effect type")
    if effect_type.category.category_name != category:
        raise ValueError(f"Effect type '{effect_type.effect_name}' is not a {category} effect")
    return effect_type


def effect_types_in_category(session: Session, category: str) -> list[FighterEffectType]:
    stmt = (
        select(FighterEffectType)
        .join(FighterEffectCategory, FighterEffectType.category_id == FighterEffectCategory.id)
        .where(FighterEffectCategory.category_name == category)
        .order_by(FighterEffectType.id)
    )
    return list(session.execute(stmt).scalars())


def hardpoint_data(template: dict[str, Any]) -> dict[str, Any]:
    """``type_specific_data`` for a new hardpoint built from a vehicle type template.

    The template's arcs are free; ``default_arcs`` keeps them as the pricing baseline.
    """
    arcs = list(template.get("arcs") or [])
    return {
        "operated_by": template.get("operated_by") or "crew",
        "arcs": arcs,
        "default_arcs": list(arcs),
        "location": template.get("location") or "",
        "credits_increase": 0,
        "fighter_equipment_id": None,
    }


def clear_hardpoint_reference(vehicle: Vehicle, fighter_equipment_id: int) -> None:
    """Unfit a weapon from any hardpoint on ``vehicle``; the hardpoints stay."""
    for effect in vehicle.effects:
        data = effect.type_specific_data or {}
        if data.get("fighter_equipment_id") == fighter_equipment_id:
            effect.type_specific_data = {**data, "fighter_equipment_id": None}
