from typing import Any

from pydantic import Field

from .common import ORMModel


class GangTypeRead(ORMModel):
    id: int
    gang_type: str
    alignment: str


class FighterTypeWithCost(ORMModel):
    id: int
    fighter_type: str
    fighter_class: str
    cost: int = Field(..., description="Catalog hire cost")
    adjusted_cost: int = Field(..., description="Hire cost for the requested gang type")
    free_skill: bool
    special_rules: list[str]
    characteristics: dict[str, int]


class WeaponProfileRead(ORMModel):
    profile_name: str | None = None
    range_short: str | None = None
    range_long: str | None = None
    acc_short: str | None = None
    acc_long: str | None = None
    strength: str | None = None
    ap: str | None = None
    damage: str | None = None
    ammo: str | None = None
    traits: str | None = None


class EquipmentWithCost(ORMModel):
    id: int
    equipment_name: str
    equipment_type: str
    equipment_category: str | None = None
    cost: int
    adjusted_cost: int = Field(..., description="Cost after gang/fighter type discounts")
    weapon_profiles: list[WeaponProfileRead] = Field(default_factory=list)


class VehicleTypeRead(ORMModel):
    id: int
    vehicle_type: str
    gang_type_id: int | None = None
    cost: int
    movement: int
    front: int
    side: int
    rear: int
    hull_points: int
    handling: int
    save: int
    body_slots: int
    drive_slots: int
    engine_slots: int
    hardpoints: list[dict[str, Any]] | None = None
    special_rules: list[str] | None = None


class SkillRead(ORMModel):
    id: int
    name: str
    skill_type: str


class EffectTypeModifierRead(ORMModel):
    stat_name: str
    default_numeric_value: int
    operation: str


class EffectTypeRead(ORMModel):
    id: int
    effect_name: str
    equipment_id: int | None = None
    type_specific_data: dict[str, Any] | None = None
    modifiers: list[EffectTypeModifierRead] = Field(default_factory=list)


class AvailableAdvancement(ORMModel):
    id: int
    effect_name: str
    stat_name: str
    xp_cost: int
    credits_increase: int
    times_increased: int
