"""Vehicle Service for Munda Manager.

Vehicles are bought unassigned, so their value starts in the gang's wealth.
Assigning a crew moves that value into the crew's total cost; selling or
deleting a vehicle removes it from wherever it currently counts.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.costs import FinancialDelta
from munda.domain.effects import credits_increase
from munda.domain.enums import EffectCategory, EquipmentType, GangLogAction, HardpointOperator
from munda.domain.rules_config import DEFAULT_RULES
from munda.interfaces import IFinancialsService, IGangLogService
from munda.models import Fighter, FighterEffect, FighterEquipment, Profile, Vehicle, VehicleType
from munda.services.access import get_or_404, load_gang, load_vehicle, refresh
from munda.services.effect_builder import (
    clear_hardpoint_reference,
    effect_from_type,
    effect_types_in_category,
    hardpoint_data,
    load_effect_type,
)

logger = logging.getLogger(__name__)

VEHICLE_PROFILE_COLUMNS = (
    "movement",
    "front",
    "side",
    "rear",
    "hull_points",
    "handling",
    "save",
    "body_slots",
    "drive_slots",
    "engine_slots",
)

UPDATABLE_FIELDS = ("vehicle_name", "special_rules")


class VehicleService:
    """Service for gang vehicles, their crew and their damage."""

    def __init__(self, session: Session, financials: IFinancialsService, logs: IGangLogService):
        self.session = session
        self.financials = financials
        self.logs = logs

    def add_vehicle(
        self,
        user: Profile,
        gang_id: int,
        vehicle_type_id: int,
        vehicle_name: str | None = None,
        cost: int | None = None,
    ) -> dict:
        """Buy a vehicle for the gang.

        The gang pays ``cost`` (default: the type's cost, 0 allowed); the
        vehicle itself is valued at the type's cost.

        Raises:
            ValueError: If the gang cannot afford the payment
        """
        try:
            if cost is not None and cost < 0:
                raise ValueError("Cost cannot be negative")
            gang = load_gang(self.session, gang_id, user, for_update=True)
            vehicle_type = get_or_404(self.session, VehicleType, vehicle_type_id, "Vehicle type")
            payment = cost if cost is not None else vehicle_type.cost
            if gang.credits < payment:
                raise ValueError("Not enough credits")

            vehicle = Vehicle(
                gang_id=gang.id,
                vehicle_type_id=vehicle_type.id,
                vehicle_name=vehicle_name or vehicle_type.vehicle_type,
                vehicle_type=vehicle_type.vehicle_type,
                cost=vehicle_type.cost,
                special_rules=list(vehicle_type.special_rules or []),
                **{column: getattr(vehicle_type, column) for column in VEHICLE_PROFILE_COLUMNS},
            )
            self.session.add(vehicle)
            self.session.flush()
            self._add_hardpoints(vehicle, vehicle_type, user)

            financials = self.financials.apply(
                gang.id,
                FinancialDelta(credits_delta=-payment, stash_value_delta=vehicle_type.cost),
            )
            self.logs.create(
                gang.id,
                user.id,
                GangLogAction.VEHICLE_ADDED,
                f"Added vehicle {vehicle.vehicle_name} for {payment} credits",
                vehicle_id=vehicle.id,
            )
            self.session.commit()
            logger.info("gang %s added vehicle %s", gang.id, vehicle.id)
            return {
                "vehicle": vehicle,
                "payment_cost": payment,
                "gang_credits": financials["new_credits"],
            }
        except Exception:
            self.session.rollback()
            raise

    def _add_hardpoints(self, vehicle: Vehicle, vehicle_type: VehicleType, user: Profile) -> None:
        templates = vehicle_type.hardpoints or []
        if not templates:
            return
        hardpoint_type = effect_types_in_category(self.session, EffectCategory.HARDPOINT)[0]
        for template in templates:
            self.session.add(
                effect_from_type(
                    hardpoint_type,
                    user_id=user.id,
                    data=hardpoint_data(template),
                    vehicle=vehicle,
                )
            )
        self.session.flush()

    def _load_hardpoint(self, vehicle: Vehicle, effect_id: int) -> FighterEffect:
        effect = self.session.get(FighterEffect, effect_id)
        if (
            effect is None
            or effect.vehicle_id != vehicle.id
            or effect.category_name != EffectCategory.HARDPOINT
        ):
            raise LookupError("Hardpoint not found on this vehicle")
        return effect

    def fit_weapon_to_hardpoint(
        self,
        user: Profile,
        vehicle_id: int,
        hardpoint_id: int,
        fighter_equipment_id: int | None,
    ) -> FighterEffect:
        """Fit a vehicle weapon to a hardpoint, or unfit it when no weapon is given.

        A weapon sits on at most one hardpoint; fitting it elsewhere clears the old one.
        """
        try:
            vehicle = load_vehicle(self.session, vehicle_id, user)
            hardpoint = self._load_hardpoint(vehicle, hardpoint_id)
            if fighter_equipment_id is not None:
                weapon = self.session.get(FighterEquipment, fighter_equipment_id)
                if weapon is None or weapon.vehicle_id != vehicle.id:
                    raise LookupError("Weapon not found on this vehicle")
                if weapon.equipment_type != EquipmentType.WEAPON:
                    raise ValueError(f"{weapon.name} is not a weapon")
                clear_hardpoint_reference(vehicle, weapon.id)

            hardpoint.type_specific_data = {
                **(hardpoint.type_specific_data or {}),
                "fighter_equipment_id": fighter_equipment_id,
            }
            self.session.commit()
            logger.info(
                "vehicle %s hardpoint %s fitted with %s", vehicle.id, hardpoint.id, fighter_equipment_id
            )
            return hardpoint
        except Exception:
            self.session.rollback()
            raise

    def update_vehicle_hardpoint(
        self,
        user: Profile,
        vehicle_id: int,
        hardpoint_id: int,
        operated_by: str,
        arcs: list[str],
    ) -> dict:
        """Change who operates a hardpoint and which arcs it covers.

        Arcs beyond the hardpoint's default ones cost a flat price each; the
        difference to what was already paid is charged or refunded and moves
        the vehicle's value wherever it counts.

        Raises:
            ValueError: If no valid arc is given or the gang cannot pay
        """
        try:
            rules = DEFAULT_RULES.vehicles
            operator = HardpointOperator(operated_by)
            unique_arcs = []
            for arc in arcs:
                if arc in rules.hardpoint_arcs and arc not in unique_arcs:
                    unique_arcs.append(arc)
            if not unique_arcs:
                raise ValueError("At least one arc is required")

            vehicle = load_vehicle(self.session, vehicle_id, user)
            hardpoint = self._load_hardpoint(vehicle, hardpoint_id)
            data = dict(hardpoint.type_specific_data or {})
            extra_arcs = max(0, len(unique_arcs) - len(data.get("default_arcs") or []))
            new_increase = extra_arcs * rules.hardpoint_arc_cost
            delta = new_increase - credits_increase(hardpoint)

            gang = load_gang(self.session, vehicle.gang_id, user, for_update=True)
            if delta > 0 and gang.credits < delta:
                raise ValueError(
                    f"Not enough credits. Required: {delta}, Available: {gang.credits}"
                )

            hardpoint.type_specific_data = {
                **data,
                "operated_by": operator.value,
                "arcs": unique_arcs,
                "credits_increase": new_increase,
            }
            financials = self.financials.apply(
                gang.id,
                costs.placement_delta(delta, vehicle=vehicle) + FinancialDelta(credits_delta=-delta),
            )
            self.logs.create(
                gang.id,
                user.id,
                GangLogAction.VEHICLE_HARDPOINT_UPDATED,
                f"Set {vehicle.vehicle_name} hardpoint to {', '.join(unique_arcs)} "
                f"({operator.value} operated)",
                vehicle_id=vehicle.id,
            )
            self.session.commit()
            return {
                "hardpoint": hardpoint,
                "credits_delta": -delta,
                "gang_credits": financials["new_credits"],
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def _move_crew(self, vehicle: Vehicle, fighter: Fighter | None) -> FinancialDelta:
        """Change the crew and return the delta of the vehicle's value moving with it."""
        value = costs.vehicle_total_cost(vehicle)
        before = costs.placement_delta(value, vehicle=vehicle)
        vehicle.fighter = fighter
        self.session.flush()
        return costs.placement_delta(value, vehicle=vehicle) + -before

    def assign_vehicle(self, user: Profile, vehicle_id: int, fighter_id: int) -> dict:
        """Put a fighter in charge of a vehicle.

        A vehicle the fighter already crews is unassigned first.
        """
        try:
            vehicle = load_vehicle(self.session, vehicle_id, user)
            fighter = get_or_404(self.session, Fighter, fighter_id, "Fighter")
            if fighter.gang_id != vehicle.gang_id:
                raise ValueError("Fighter does not belong to the same gang")
            previous_fighter_id = vehicle.fighter_id
            if previous_fighter_id == fighter.id:
                return {"vehicle": vehicle, "previous_fighter_id": previous_fighter_id}

            delta = FinancialDelta()
            released = []
            for other in list(fighter.vehicles):
                if other.id != vehicle.id:
                    delta = delta + self._move_crew(other, None)
                    released.append(other.id)
            delta = delta + self._move_crew(vehicle, fighter)

            financials = self.financials.apply(vehicle.gang_id, delta)
            self.logs.create(
                vehicle.gang_id,
                user.id,
                GangLogAction.VEHICLE_ASSIGNED,
                f"Assigned {vehicle.vehicle_name} to {fighter.fighter_name}",
                fighter_id=fighter.id,
                vehicle_id=vehicle.id,
            )
            self.session.commit()
            return {
                "vehicle": vehicle,
                "previous_fighter_id": previous_fighter_id,
                "unassigned_vehicle_ids": released,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def unassign_vehicle(self, user: Profile, vehicle_id: int) -> dict:
        try:
            vehicle = load_vehicle(self.session, vehicle_id, user)
            previous = vehicle.fighter
            if previous is None:
                return {"vehicle": vehicle, "previous_fighter_id": None}

            delta = self._move_crew(vehicle, None)
            financials = self.financials.apply(vehicle.gang_id, delta)
            self.logs.create(
                vehicle.gang_id,
                user.id,
                GangLogAction.VEHICLE_UNASSIGNED,
                f"Unassigned {vehicle.vehicle_name} from {previous.fighter_name}",
                fighter_id=previous.id,
                vehicle_id=vehicle.id,
            )
            self.session.commit()
            return {
                "vehicle": vehicle,
                "previous_fighter_id": previous.id,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def _remove(self, user: Profile, vehicle_id: int, sell_value: int | None) -> dict:
        vehicle = load_vehicle(self.session, vehicle_id, user)
        gang_id, name, crew_id = vehicle.gang_id, vehicle.vehicle_name, vehicle.fighter_id
        vehicle_cost = costs.vehicle_total_cost(vehicle)
        delta = -costs.placement_delta(vehicle_cost, vehicle=vehicle)
        if sell_value is not None:
            delta = delta + FinancialDelta(credits_delta=sell_value)

        self.session.delete(vehicle)
        refresh(self.session)
        financials = self.financials.apply(gang_id, delta)

        if sell_value is not None:
            action = GangLogAction.VEHICLE_SOLD
            description = f"Sold vehicle {name} for {sell_value} credits"
        else:
            action = GangLogAction.VEHICLE_REMOVED
            description = f"Removed vehicle {name}"
        self.logs.create(gang_id, user.id, action, description, fighter_id=crew_id)
        return {
            "vehicle_id": vehicle_id,
            "vehicle_cost": vehicle_cost,
            "gang_credits": financials["new_credits"],
            "gang_rating": financials["new_rating"],
            "gang_wealth": financials["new_wealth"],
        }

    def sell_vehicle(self, user: Profile, vehicle_id: int, manual_cost: int | None = None) -> dict:
        """Sell a vehicle with its equipment for ``manual_cost`` (default: its base cost)."""
        try:
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Sell value cannot be negative")
            vehicle = load_vehicle(self.session, vehicle_id, user)
            sell_value = manual_cost if manual_cost is not None else vehicle.cost
            result = self._remove(user, vehicle_id, sell_value)
            result["sold_for"] = sell_value
            self.session.commit()
            return result
        except Exception:
            self.session.rollback()
            raise

    def delete_vehicle(self, user: Profile, vehicle_id: int) -> dict:
        try:
            result = self._remove(user, vehicle_id, None)
            self.session.commit()
            return result
        except Exception:
            self.session.rollback()
            raise

    def update_vehicle(self, user: Profile, vehicle_id: int, changes: dict[str, Any]) -> Vehicle:
        try:
            vehicle = load_vehicle(self.session, vehicle_id, user)
            for field, value in changes.items():
                if field not in UPDATABLE_FIELDS:
                    raise ValueError(f"Field '{field}' cannot be updated")
                if field == "vehicle_name" and not (value or "").strip():
                    raise ValueError("Vehicle name cannot be empty")
                setattr(vehicle, field, value)
            self.session.commit()
            return vehicle
        except Exception:
            self.session.rollback()
            raise

    def add_vehicle_damage(self, user: Profile, vehicle_id: int, damage_type_id: int) -> dict:
        try:
            vehicle = load_vehicle(self.session, vehicle_id, user)
            damage_type = load_effect_type(
                self.session, damage_type_id, EffectCategory.VEHICLE_DAMAGE
            )
            effect = effect_from_type(damage_type, user_id=user.id, vehicle=vehicle)
            self.session.add(effect)
            self.session.flush()

            financials = self.financials.apply(
                vehicle.gang_id, costs.placement_delta(credits_increase(effect), vehicle=vehicle)
            )
            self.logs.create(
                vehicle.gang_id,
                user.id,
                GangLogAction.VEHICLE_DAMAGE_ADDED,
                f"{vehicle.vehicle_name} suffered {damage_type.effect_name}",
                vehicle_id=vehicle.id,
            )
            self.session.commit()
            return {"damage": effect, "vehicle": vehicle, "gang_rating": financials["new_rating"]}
        except Exception:
            self.session.rollback()
            raise

    def remove_vehicle_damage(self, user: Profile, vehicle_id: int, effect_id: int) -> dict:
        try:
            vehicle = load_vehicle(self.session, vehicle_id, user)
            effect = self.session.get(FighterEffect, effect_id)
            if (
                effect is None
                or effect.vehicle_id != vehicle.id
                or effect.category_name != EffectCategory.VEHICLE_DAMAGE
            ):
                raise LookupError("Vehicle damage not found")
            placement = costs.placement_delta(credits_increase(effect), vehicle=vehicle)
            name = effect.effect_name

            self.session.delete(effect)
            refresh(self.session)
            financials = self.financials.apply(vehicle.gang_id, -placement)
            self.logs.create(
                vehicle.gang_id,
                user.id,
                GangLogAction.VEHICLE_DAMAGE_REMOVED,
                f"Repaired {name} on {vehicle.vehicle_name}",
                vehicle_id=vehicle.id,
            )
            self.session.commit()
            return {"vehicle": vehicle, "gang_rating": financials["new_rating"]}
        except Exception:
            self.session.rollback()
            raise

    def list_vehicles(self, user: Profile, gang_id: int) -> list[Vehicle]:
        gang = load_gang(self.session, gang_id, user)
        return list(gang.vehicles)
