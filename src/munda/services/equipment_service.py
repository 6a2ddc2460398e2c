"""Equipment Service for Munda Manager.

Buying equipment for fighters, vehicles and the gang stash, and removing it
again by deletion, sale or a move to the stash.

Where an item's value lands depends on its holder
(see :func:`munda.domain.costs.placement_delta`):

- stash items and items on unassigned vehicles count toward wealth only;
- items on fighters (or crewed vehicles) count toward rating while the
  holder's costs apply to the rating;
- anything else is counted nowhere.
"""

import logging
import math

from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.costs import FinancialDelta
from munda.domain.effects import WEAPON_NUMERIC_FIELDS, credits_increase
from munda.domain.enums import EffectCategory, EquipmentType, GangLogAction
from munda.domain.fighter_status import counts_toward_rating
from munda.domain.rules_config import DEFAULT_RULES
from munda.interfaces import IBeastService, IFinancialsService, IGangLogService
from munda.models import (
    CustomEquipment,
    Equipment,
    Fighter,
    FighterEquipment,
    Gang,
    Profile,
    Vehicle,
)
from munda.services.access import get_or_404, load_equipment_item, load_gang, refresh
from munda.services.effect_builder import (
    clear_hardpoint_reference,
    effect_from_type,
    load_effect_type,
)
from munda.services.gang_log_service import (
    equipment_purchased_description,
    equipment_sold_description,
)

logger = logging.getLogger(__name__)


def _holder_name(fighter: Fighter | None, vehicle: Vehicle | None) -> str | None:
    if fighter is not None:
        return fighter.fighter_name
    if vehicle is not None:
        return vehicle.vehicle_name
    return None


class EquipmentService:
    """Service for equipment purchases, sales and the gang stash."""

    def __init__(
        self,
        session: Session,
        financials: IFinancialsService,
        logs: IGangLogService,
        beasts: IBeastService,
    ):
        self.session = session
        self.financials = financials
        self.logs = logs
        self.beasts = beasts

    def buy_equipment(
        self,
        user: Profile,
        gang_id: int,
        fighter_id: int | None = None,
        vehicle_id: int | None = None,
        equipment_id: int | None = None,
        custom_equipment_id: int | None = None,
        manual_cost: int | None = None,
        master_crafted: bool = False,
        use_base_cost_for_rating: bool = True,
        buy_for_gang_stash: bool = False,
        selected_effect_ids: list[int] | None = None,
    ) -> dict:
        """Buy a piece of equipment.

        Args:
            user: Acting user
            gang_id: Gang paying for the item
            fighter_id: Fighter receiving the item
            vehicle_id: Vehicle receiving the item
            equipment_id: Catalog equipment (exclusive with custom_equipment_id)
            custom_equipment_id: User-defined equipment
            manual_cost: Credits actually paid; defaults to the discounted cost
            master_crafted: Apply the master-crafted surcharge (weapons only)
            use_base_cost_for_rating: Rate the item at its discounted cost rather
                than at the amount paid
            buy_for_gang_stash: Put the item in the stash instead of on a holder
            selected_effect_ids: Upgrade effect types applied with the item

        Returns:
            Dictionary with equipment, gang_credits, fighter_total_cost,
            rating_cost, gang_rating_delta, applied_effects and created_beasts

        Raises:
            ValueError: On invalid targets or insufficient credits
        """
        try:
            selected_effect_ids = list(selected_effect_ids or [])
            if not buy_for_gang_stash and fighter_id is None and vehicle_id is None:
                raise ValueError(
                    "Either fighter_id or vehicle_id is required unless buying for the gang stash"
                )
            if not buy_for_gang_stash and fighter_id is not None and vehicle_id is not None:
                raise ValueError("Specify only one of fighter_id or vehicle_id")
            if (equipment_id is None) == (custom_equipment_id is None):
                raise ValueError("Specify exactly one of equipment_id or custom_equipment_id")
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Cost cannot be negative")
            if buy_for_gang_stash and selected_effect_ids:
                raise ValueError("Upgrades cannot be applied to equipment bought for the stash")

            gang = load_gang(self.session, gang_id, user, for_update=True)

            fighter = vehicle = None
            if not buy_for_gang_stash:
                if fighter_id is not None:
                    fighter = get_or_404(self.session, Fighter, fighter_id, "Fighter")
                    if fighter.gang_id != gang.id:
                        raise ValueError("Fighter does not belong to the same gang")
                else:
                    vehicle = get_or_404(self.session, Vehicle, vehicle_id, "Vehicle")
                    if vehicle.gang_id != gang.id:
                        raise ValueError("Vehicle does not belong to the same gang")

            if equipment_id is not None:
                equipment = get_or_404(self.session, Equipment, equipment_id, "Equipment")
                base_cost = equipment.cost
                adjusted = costs.equipment_adjusted_cost(
                    equipment, gang.gang_type_id, fighter.fighter_type_id if fighter else None
                )
                item_name, item_type = equipment.equipment_name, equipment.equipment_type
            else:
                custom = get_or_404(
                    self.session, CustomEquipment, custom_equipment_id, "Custom equipment"
                )
                if custom.user_id != user.id and not user.is_admin:
                    raise PermissionError("You do not have permission to use this custom equipment")
                base_cost = adjusted = custom.cost
                item_name, item_type = custom.equipment_name, custom.equipment_type

            final_cost = manual_cost if manual_cost is not None else adjusted
            rating_cost = adjusted if use_base_cost_for_rating else final_cost
            is_master_crafted = master_crafted and item_type == EquipmentType.WEAPON
            if is_master_crafted:
                rating_cost = costs.master_crafted_cost(rating_cost)

            if gang.credits < final_cost:
                raise ValueError(
                    f"Gang has insufficient credits. Required: {final_cost}, "
                    f"Available: {gang.credits}"
                )

            item = FighterEquipment(
                gang_id=gang.id,
                fighter=fighter,
                vehicle=vehicle,
                equipment_id=equipment_id,
                custom_equipment_id=custom_equipment_id,
                purchase_cost=rating_cost,
                original_cost=base_cost,
                is_master_crafted=is_master_crafted,
                gang_stash=buy_for_gang_stash,
                user_id=user.id,
            )
            self.session.add(item)
            self.session.flush()

            applied_effects = []
            for effect_type_id in selected_effect_ids:
                effect_type = load_effect_type(
                    self.session, effect_type_id, EffectCategory.EQUIPMENT
                )
                if effect_type.equipment_id not in (None, equipment_id):
                    raise ValueError(
                        f"Upgrade '{effect_type.effect_name}' does not apply to {item_name}"
                    )
                effect = effect_from_type(
                    effect_type,
                    user_id=user.id,
                    fighter=fighter,
                    vehicle=vehicle,
                    fighter_equipment=item,
                )
                self.session.add(effect)
                applied_effects.append(effect)
            self.session.flush()
            effect_credits = sum(credits_increase(effect) for effect in applied_effects)

            created_beasts = []
            beast_cost = 0
            if fighter is not None:
                for created in self.beasts.create_beasts_for_equipment(fighter, item):
                    created_beasts.append(created["beast"])
                    beast_cost += created["cost"]

            placement = costs.placement_delta(
                rating_cost + effect_credits + beast_cost,
                fighter=fighter,
                vehicle=vehicle,
                stash=buy_for_gang_stash,
            )
            financials = self.financials.apply(
                gang.id, placement + FinancialDelta(credits_delta=-final_cost)
            )
            self.logs.create(
                gang.id,
                user.id,
                GangLogAction.EQUIPMENT_PURCHASED,
                equipment_purchased_description(
                    item_name, final_cost, _holder_name(fighter, vehicle) or "the gang stash"
                ),
                fighter_id=fighter.id if fighter else None,
                vehicle_id=vehicle.id if vehicle else None,
            )
            self.session.commit()
            logger.info("gang %s bought %s for %s credits", gang.id, item_name, final_cost)
            return {
                "equipment": item,
                "gang_credits": financials["new_credits"],
                "fighter_total_cost": fighter.total_cost if fighter else None,
                "rating_cost": rating_cost,
                "gang_rating_delta": placement.rating_delta,
                "applied_effects": applied_effects,
                "created_beasts": created_beasts,
            }
        except Exception:
            self.session.rollback()
            raise

    def _strip(self, item: FighterEquipment) -> tuple[FinancialDelta, list[int]]:
        """Delete an item's upgrade effects and granted beasts, and unfit it from hardpoints.

        Returns:
            The placement delta of the item's full value at its current holder
            (computed before anything is removed) and the deleted effect ids
        """
        beast_value = sum(
            costs.fighter_own_cost(link.pet)
            for link in item.beast_links
            if link.pet is not None and counts_toward_rating(link.pet)
        )
        effect_value = sum(credits_increase(effect) for effect in item.effects)
        placement = costs.item_placement_delta(
            item, (item.purchase_cost or 0) + effect_value + beast_value
        )

        if item.vehicle is not None:
            clear_hardpoint_reference(item.vehicle, item.id)
        effect_ids = [effect.id for effect in item.effects]
        for effect in list(item.effects):
            self.session.delete(effect)
        self.beasts.delete_beasts_for_equipment(item)
        return placement, effect_ids

    def _remove(
        self, user: Profile, fighter_equipment_id: int, sell_value: int | None
    ) -> dict:
        item = load_equipment_item(self.session, fighter_equipment_id, user)
        gang_id, fighter, vehicle = item.gang_id, item.fighter, item.vehicle
        removed = {"id": item.id, "name": item.name, "purchase_cost": item.purchase_cost}

        placement, effect_ids = self._strip(item)
        self.session.delete(item)
        refresh(self.session)

        delta = -placement
        if sell_value is not None:
            delta = delta + FinancialDelta(credits_delta=sell_value)
        financials = self.financials.apply(gang_id, delta)

        if sell_value is not None:
            action = GangLogAction.EQUIPMENT_SOLD
            description = equipment_sold_description(removed["name"], sell_value)
        else:
            action = GangLogAction.EQUIPMENT_DELETED
            description = f"Removed {removed['name']}"
        self.logs.create(
            gang_id,
            user.id,
            action,
            description,
            fighter_id=fighter.id if fighter else None,
            vehicle_id=vehicle.id if vehicle else None,
        )
        return {
            "deleted_equipment": removed,
            "deleted_effect_ids": effect_ids,
            "fighter_total_cost": fighter.total_cost if fighter else None,
            "gang_credits": financials["new_credits"],
            "gang_rating": financials["new_rating"],
        }

    def delete_equipment(self, user: Profile, fighter_equipment_id: int) -> dict:
        """Delete an item without refund, with its upgrades and granted beasts."""
        try:
            result = self._remove(user, fighter_equipment_id, None)
            self.session.commit()
            return result
        except Exception:
            self.session.rollback()
            raise

    def sell_equipment(
        self, user: Profile, fighter_equipment_id: int, manual_cost: int | None = None
    ) -> dict:
        """Sell an item for ``manual_cost`` (default: its purchase cost)."""
        try:
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Sell value cannot be negative")
            item = load_equipment_item(self.session, fighter_equipment_id, user)
            sell_value = manual_cost if manual_cost is not None else item.purchase_cost
            result = self._remove(user, fighter_equipment_id, sell_value)
            result["sold_for"] = sell_value
            self.session.commit()
            return result
        except Exception:
            self.session.rollback()
            raise

    def apply_equipment_effect(
        self, user: Profile, fighter_equipment_id: int, effect_type_id: int
    ) -> dict:
        """Add an upgrade to an item already held by a fighter or vehicle.

        The upgrade's credits increase lands wherever the item's own value does.
        """
        try:
            item = load_equipment_item(self.session, fighter_equipment_id, user)
            if item.gang_stash:
                raise ValueError("Upgrades cannot be applied to equipment in the stash")

            effect_type = load_effect_type(self.session, effect_type_id, EffectCategory.EQUIPMENT)
            if effect_type.equipment_id not in (None, item.equipment_id):
                raise ValueError(
                    f"Upgrade '{effect_type.effect_name}' does not apply to {item.name}"
                )
            weapon_fields = {
                modifier.stat_name
                for modifier in effect_type.modifiers
                if modifier.stat_name in WEAPON_NUMERIC_FIELDS
            }
            if weapon_fields and item.equipment_type != EquipmentType.WEAPON:
                raise ValueError(f"Upgrade '{effect_type.effect_name}' needs a weapon")
            if any(e.fighter_effect_type_id == effect_type.id for e in item.effects):
                raise ValueError(f"{item.name} already has '{effect_type.effect_name}'")

            effect = effect_from_type(
                effect_type,
                user_id=user.id,
                fighter=item.fighter,
                vehicle=item.vehicle,
                fighter_equipment=item,
            )
            self.session.add(effect)
            self.session.flush()

            placement = costs.item_placement_delta(item, credits_increase(effect))
            financials = self.financials.apply(item.gang_id, placement)
            self.logs.create(
                item.gang_id,
                user.id,
                GangLogAction.EQUIPMENT_UPGRADE_ADDED,
                f"Added {effect.effect_name} to {item.name}",
                fighter_id=item.fighter_id,
                vehicle_id=item.vehicle_id,
            )
            self.session.commit()
            logger.info("added upgrade %s to equipment %s", effect.effect_name, item.id)
            return {
                "effect": effect,
                "fighter_total_cost": item.fighter.total_cost if item.fighter else None,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def delete_equipment_effect(
        self, user: Profile, fighter_equipment_id: int, effect_id: int
    ) -> dict:
        try:
            item = load_equipment_item(self.session, fighter_equipment_id, user)
            effect = next((e for e in item.effects if e.id == effect_id), None)
            if effect is None:
                raise LookupError("Equipment effect not found")

            placement = costs.item_placement_delta(item, credits_increase(effect))
            effect_name = effect.effect_name
            item.effects.remove(effect)
            self.session.delete(effect)
            refresh(self.session)

            financials = self.financials.apply(item.gang_id, -placement)
            self.logs.create(
                item.gang_id,
                user.id,
                GangLogAction.EQUIPMENT_UPGRADE_REMOVED,
                f"Removed {effect_name} from {item.name}",
                fighter_id=item.fighter_id,
                vehicle_id=item.vehicle_id,
            )
            self.session.commit()
            return {
                "deleted_effect_id": effect_id,
                "fighter_total_cost": item.fighter.total_cost if item.fighter else None,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def move_to_stash(self, user: Profile, fighter_equipment_id: int) -> FighterEquipment:
        """Move an item from its holder into the gang stash.

        Upgrade effects and granted beasts are deleted; the beasts come back
        when the item leaves the stash for a fighter.
        """
        try:
            item = load_equipment_item(self.session, fighter_equipment_id, user)
            if item.gang_stash:
                raise ValueError("Item is already in the gang stash")
            holder = _holder_name(item.fighter, item.vehicle)
            fighter_id, vehicle_id = item.fighter_id, item.vehicle_id

            placement, _ = self._strip(item)
            item.fighter = None
            item.vehicle = None
            item.gang_stash = True
            refresh(self.session)

            self.financials.apply(
                item.gang_id, -placement + FinancialDelta(stash_value_delta=item.purchase_cost)
            )
            self.logs.create(
                item.gang_id,
                user.id,
                GangLogAction.EQUIPMENT_MOVED_TO_STASH,
                f"Moved {item.name} from {holder} to the gang stash",
                fighter_id=fighter_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
            return item
        except Exception:
            self.session.rollback()
            raise

    def move_from_stash(
        self,
        user: Profile,
        fighter_equipment_id: int,
        fighter_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> dict:
        """Give a stash item to a fighter or vehicle of the same gang."""
        try:
            if (fighter_id is None) == (vehicle_id is None):
                raise ValueError("Specify exactly one of fighter_id or vehicle_id")
            item = load_equipment_item(self.session, fighter_equipment_id, user)
            if not item.gang_stash:
                raise ValueError("Item is not in gang stash")

            fighter = vehicle = None
            if fighter_id is not None:
                fighter = get_or_404(self.session, Fighter, fighter_id, "Fighter")
                if fighter.gang_id != item.gang_id:
                    raise ValueError("Fighter does not belong to the same gang")
            else:
                vehicle = get_or_404(self.session, Vehicle, vehicle_id, "Vehicle")
                if vehicle.gang_id != item.gang_id:
                    raise ValueError("Vehicle does not belong to the same gang")

            item.gang_stash = False
            item.fighter = fighter
            item.vehicle = vehicle
            self.session.flush()

            created_beasts = []
            beast_cost = 0
            if fighter is not None:
                for created in self.beasts.create_beasts_for_equipment(fighter, item):
                    created_beasts.append(created["beast"])
                    beast_cost += created["cost"]

            placement = costs.placement_delta(
                item.purchase_cost + beast_cost, fighter=fighter, vehicle=vehicle
            )
            financials = self.financials.apply(
                item.gang_id, placement + FinancialDelta(stash_value_delta=-item.purchase_cost)
            )
            self.logs.create(
                item.gang_id,
                user.id,
                GangLogAction.EQUIPMENT_MOVED_FROM_STASH,
                f"Moved {item.name} from the gang stash to {_holder_name(fighter, vehicle)}",
                fighter_id=fighter_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
            return {
                "equipment": item,
                "fighter_total_cost": fighter.total_cost if fighter else None,
                "gang_rating": financials["new_rating"],
                "created_beasts": created_beasts,
            }
        except Exception:
            self.session.rollback()
            raise

    def _load_stash_item(self, user: Profile, fighter_equipment_id: int) -> FighterEquipment:
        item = load_equipment_item(self.session, fighter_equipment_id, user)
        if not item.gang_stash:
            raise ValueError("Item is not in gang stash")
        return item

    def sell_from_stash(
        self, user: Profile, fighter_equipment_id: int, manual_cost: float | None = None
    ) -> dict:
        """Sell a stash item; the sale never yields less than 5 credits."""
        try:
            item = self._load_stash_item(user, fighter_equipment_id)
            raw = manual_cost if manual_cost is not None else item.purchase_cost
            sell_value = max(DEFAULT_RULES.economy.stash_minimum_sell_value, math.floor(raw))
            gang_id, name, purchase_cost = item.gang_id, item.name, item.purchase_cost

            self.session.delete(item)
            refresh(self.session)
            financials = self.financials.apply(
                gang_id,
                FinancialDelta(credits_delta=sell_value, stash_value_delta=-purchase_cost),
            )
            self.logs.create(
                gang_id,
                user.id,
                GangLogAction.EQUIPMENT_SOLD,
                equipment_sold_description(name, sell_value),
            )
            self.session.commit()
            return {"sold_for": sell_value, "gang_credits": financials["new_credits"]}
        except Exception:
            self.session.rollback()
            raise

    def delete_from_stash(self, user: Profile, fighter_equipment_id: int) -> dict:
        try:
            item = self._load_stash_item(user, fighter_equipment_id)
            gang_id, name, purchase_cost = item.gang_id, item.name, item.purchase_cost

            self.session.delete(item)
            refresh(self.session)
            financials = self.financials.apply(
                gang_id, FinancialDelta(stash_value_delta=-purchase_cost)
            )
            self.logs.create(
                gang_id,
                user.id,
                GangLogAction.EQUIPMENT_DELETED,
                f"Removed {name} from the gang stash",
            )
            self.session.commit()
            return {
                "deleted_equipment_id": fighter_equipment_id,
                "gang_wealth": financials["new_wealth"],
            }
        except Exception:
            self.session.rollback()
            raise

    def list_stash(self, gang_id: int) -> list[FighterEquipment]:
        gang = get_or_404(self.session, Gang, gang_id, "Gang")
        return gang.stash
