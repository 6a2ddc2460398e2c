from pydantic import BaseModel, Field

from .catalog import WeaponProfileRead
from .common import ORMModel
from .effect import EffectRead
from .summary import FighterSummary


class EquipmentBuy(BaseModel):
    gang_id: int = Field(..., description="Gang paying for the item")
    fighter_id: int | None = Field(None, description="Fighter receiving the item")
    vehicle_id: int | None = Field(None, description="Vehicle receiving the item")
    equipment_id: int | None = Field(None, description="Catalog equipment")
    custom_equipment_id: int | None = Field(None, description="User-defined equipment")
    manual_cost: int | None = Field(None, ge=0, description="Credits actually paid")
    master_crafted: bool = Field(default=False, description="Master-crafted weapon (+25%)")
    use_base_cost_for_rating: bool = Field(
        default=True, description="Rate the item at catalog cost instead of the amount paid"
    )
    buy_for_gang_stash: bool = Field(default=False, description="Put the item in the stash")
    selected_effect_ids: list[int] = Field(
        default_factory=list, description="Equipment upgrade effect types to apply"
    )


class EquipmentSell(BaseModel):
    manual_cost: int | None = Field(None, ge=0, description="Sale value (default: purchase cost)")


class StashSell(BaseModel):
    manual_cost: float | None = Field(None, ge=0, description="Sale value, floored, minimum 5")


class MoveFromStash(BaseModel):
    fighter_id: int | None = None
    vehicle_id: int | None = None


class FighterEquipmentRead(ORMModel):
    id: int
    gang_id: int
    fighter_id: int | None = None
    vehicle_id: int | None = None
    equipment_id: int | None = None
    custom_equipment_id: int | None = None
    name: str
    equipment_type: str | None = None
    purchase_cost: int
    original_cost: int
    is_master_crafted: bool
    gang_stash: bool
    weapon_profiles: list[WeaponProfileRead] = []


class BuyEquipmentResult(ORMModel):
    equipment: FighterEquipmentRead
    gang_credits: int
    fighter_total_cost: int | None = None
    rating_cost: int
    gang_rating_delta: int
    applied_effects: list[EffectRead]
    created_beasts: list[FighterSummary]


class DeletedEquipment(ORMModel):
    id: int
    name: str
    purchase_cost: int


class RemoveEquipmentResult(ORMModel):
    deleted_equipment: DeletedEquipment
    deleted_effect_ids: list[int]
    fighter_total_cost: int | None = None
    gang_credits: int
    gang_rating: int
    sold_for: int | None = None


class MoveFromStashResult(ORMModel):
    equipment: FighterEquipmentRead
    fighter_total_cost: int | None = None
    gang_rating: int
    created_beasts: list[FighterSummary]


class StashSellResult(ORMModel):
    sold_for: int
    gang_credits: int


class StashDeleteResult(ORMModel):
    deleted_equipment_id: int
    gang_wealth: int


class EquipmentEffectAdd(BaseModel):
    effect_type_id: int = Field(..., description="Equipment upgrade effect type")


class EquipmentEffectResult(ORMModel):
    effect: EffectRead
    fighter_total_cost: int | None = None
    gang_rating: int


class EquipmentEffectDeleteResult(ORMModel):
    deleted_effect_id: int
    fighter_total_cost: int | None = None
    gang_rating: int
