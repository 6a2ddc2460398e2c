from typing import Any

from .common import ORMModel


class EffectModifierRead(ORMModel):
    stat_name: str
    numeric_value: int
    operation: str


class EffectRead(ORMModel):
    id: int
    effect_name: str
    fighter_id: int | None = None
    vehicle_id: int | None = None
    fighter_effect_type_id: int | None = None
    fighter_equipment_id: int | None = None
    category_name: str | None = None
    type_specific_data: dict[str, Any] | None = None
    modifiers: list[EffectModifierRead] = []
