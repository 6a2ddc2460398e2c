from pydantic import BaseModel, Field

from munda.domain.enums import HardpointOperator

from .common import ORMModel
from .effect import EffectRead
from .equipment import FighterEquipmentRead


class VehicleCreate(BaseModel):
    gang_id: int = Field(..., description="Gang buying the vehicle")
    vehicle_type_id: int = Field(..., description="Catalog vehicle type")
    vehicle_name: str | None = Field(None, description="Defaults to the vehicle type name")
    cost: int | None = Field(None, ge=0, description="Credits paid (default: type cost)")


class VehicleAssign(BaseModel):
    fighter_id: int


class VehicleUpdate(BaseModel):
    vehicle_name: str | None = None
    special_rules: list[str] | None = None


class VehicleSell(BaseModel):
    manual_cost: int | None = Field(None, ge=0, description="Sale value (default: base cost)")


class VehicleDamageCreate(BaseModel):
    damage_type_id: int


class HardpointFit(BaseModel):
    fighter_equipment_id: int | None = Field(
        None, description="Weapon on the vehicle; omit to unfit the hardpoint"
    )


class HardpointUpdate(BaseModel):
    operated_by: HardpointOperator
    arcs: list[str] = Field(..., min_length=1, description="Front, Left, Right and/or Rear")


class VehicleRead(ORMModel):
    id: int
    gang_id: int
    fighter_id: int | None = None
    vehicle_type_id: int | None = None
    vehicle_name: str
    vehicle_type: str
    cost: int
    total_cost: int
    body_slots: int
    drive_slots: int
    engine_slots: int
    body_slots_occupied: int
    drive_slots_occupied: int
    engine_slots_occupied: int
    special_rules: list[str] | None = None
    adjusted_characteristics: dict[str, dict[str, int]]
    equipment: list[FighterEquipmentRead] = []
    effects: list[EffectRead] = []


class AddVehicleResult(ORMModel):
    vehicle: VehicleRead
    payment_cost: int
    gang_credits: int


class CrewChangeResult(ORMModel):
    vehicle: VehicleRead
    previous_fighter_id: int | None = None
    unassigned_vehicle_ids: list[int] = []
    gang_rating: int | None = None


class RemoveVehicleResult(ORMModel):
    vehicle_id: int
    vehicle_cost: int
    gang_credits: int
    gang_rating: int
    gang_wealth: int
    sold_for: int | None = None


class VehicleDamageResult(ORMModel):
    damage: EffectRead | None = None
    vehicle: VehicleRead
    gang_rating: int


class HardpointUpdateResult(ORMModel):
    hardpoint: EffectRead
    credits_delta: int
    gang_credits: int
    gang_rating: int
