"""Fighter cost and gang rating aggregation.

All functions here are pure reads over loaded ORM rows; none of them touch
the session. Services use them both to compute signed rating deltas and to
recompute rating and wealth from scratch.

Definitions:
    own cost      base + cost_adjustment + equipment + skills + effects
                  + crewed vehicles. The base of an owned beast is its
                  fighter type's cost (beasts are stored with credits 0).
    total cost    own cost plus the own cost of every owned beast that
                  counts toward rating; 0 for an owned beast itself.
    rating        sum of total cost over non-beast fighters that count.
    wealth        rating + credits + stash value + unassigned vehicle value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from munda.domain.effects import credits_increase
from munda.domain.fighter_status import counts_toward_rating
from munda.domain.rules_config import DEFAULT_RULES, EconomyRules

if TYPE_CHECKING:
    from munda.models import Equipment, Fighter, FighterEquipment, FighterType, Gang, Vehicle


@dataclass(frozen=True, slots=True)
class FinancialDelta:
    """Signed change to a gang's rating, credits and off-rating value."""

    rating_delta: int = 0
    credits_delta: int = 0
    stash_value_delta: int = 0

    def __add__(self, other: FinancialDelta) -> FinancialDelta:
        return FinancialDelta(
            rating_delta=self.rating_delta + other.rating_delta,
            credits_delta=self.credits_delta + other.credits_delta,
            stash_value_delta=self.stash_value_delta + other.stash_value_delta,
        )

    def __neg__(self) -> FinancialDelta:
        return FinancialDelta(
            rating_delta=-self.rating_delta,
            credits_delta=-self.credits_delta,
            stash_value_delta=-self.stash_value_delta,
        )

    @property
    def is_zero(self) -> bool:
        return not (self.rating_delta or self.credits_delta or self.stash_value_delta)


def master_crafted_cost(cost: int, rules: EconomyRules = DEFAULT_RULES.economy) -> int:
    """Apply the master-crafted surcharge: +25%, rounded up to the next 5."""
    step = rules.master_crafted_rounding
    return int(math.ceil(cost * rules.master_crafted_multiplier / step) * step)


def equipment_adjusted_cost(
    equipment: Equipment, gang_type_id: int | None, fighter_type_id: int | None = None
) -> int:
    """Catalog price after discounts.

    A discount for the fighter's type beats one for the gang's type; without
    either the base cost applies.
    """
    gang_discount = None
    for discount in equipment.discounts:
        if fighter_type_id is not None and discount.fighter_type_id == fighter_type_id:
            return discount.adjusted_cost
        if (
            discount.fighter_type_id is None
            and gang_type_id is not None
            and discount.gang_type_id == gang_type_id
        ):
            gang_discount = discount.adjusted_cost
    return equipment.cost if gang_discount is None else gang_discount


def fighter_type_adjusted_cost(fighter_type: FighterType, gang_type_id: int | None) -> int:
    """Hire cost of a fighter type for a gang type, falling back to the base cost."""
    for gang_cost in fighter_type.gang_costs:
        if gang_cost.gang_type_id == gang_type_id:
            return gang_cost.adjusted_cost
    return fighter_type.cost


def vehicle_total_cost(vehicle: Vehicle) -> int:
    """Vehicle base cost plus mounted equipment and vehicle effects."""
    total = vehicle.cost or 0
    total += sum(item.purchase_cost or 0 for item in vehicle.equipment)
    total += sum(credits_increase(effect) for effect in vehicle.effects)
    return total


def owner_of(fighter: Fighter) -> Fighter | None:
    link = fighter.beast_ownership
    return link.owner if link is not None else None


def fighter_base_cost(fighter: Fighter) -> int:
    if fighter.is_owned_beast:
        if fighter.fighter_type_ref is not None:
            return fighter.fighter_type_ref.cost
        if fighter.custom_fighter_type is not None:
            return fighter.custom_fighter_type.cost
        return 0
    return fighter.credits or 0


def fighter_own_cost(fighter: Fighter) -> int:
    """Cost of a fighter excluding any beasts it owns."""
    total = fighter_base_cost(fighter) + (fighter.cost_adjustment or 0)
    total += sum(item.purchase_cost or 0 for item in fighter.equipment if not item.gang_stash)
    total += sum(skill.credits_increase or 0 for skill in fighter.skills)
    total += sum(credits_increase(effect) for effect in fighter.effects)
    total += sum(vehicle_total_cost(vehicle) for vehicle in fighter.vehicles)
    return total


def owned_beasts(fighter: Fighter) -> list[Fighter]:
    return [link.pet for link in fighter.owned_beasts if link.pet is not None]


def fighter_total_cost(fighter: Fighter) -> int:
    """Cost shown on the fighter card and summed into the gang rating."""
    if fighter.is_owned_beast:
        return 0
    total = fighter_own_cost(fighter)
    total += sum(
        fighter_own_cost(beast) for beast in owned_beasts(fighter) if counts_toward_rating(beast)
    )
    return total


def rating_applies(fighter: Fighter) -> bool:
    """Whether changes to this fighter's items move the gang rating."""
    if not counts_toward_rating(fighter):
        return False
    owner = owner_of(fighter)
    if owner is not None:
        return counts_toward_rating(owner)
    return True


def status_contribution(fighter: Fighter) -> int:
    """Rating carried by a fighter that a status change adds or removes.

    For an owned beast this is its own cost, and only while its owner counts;
    for everyone else it is the total cost including active beasts.
    """
    owner = owner_of(fighter)
    if owner is not None:
        return fighter_own_cost(fighter) if counts_toward_rating(owner) else 0
    return fighter_total_cost(fighter)


def rating_share(fighter: Fighter) -> int:
    """Rating the fighter carries right now; 0 while it does not count.

    Services take this before and after a change to a fighter and apply the
    difference.
    """
    if not counts_toward_rating(fighter):
        return 0
    return status_contribution(fighter)


def placement_delta(
    amount: int,
    *,
    fighter: Fighter | None = None,
    vehicle: Vehicle | None = None,
    stash: bool = False,
) -> FinancialDelta:
    """Where ``amount`` of item value lands for the given holder.

    Stash items and items on unassigned vehicles are held outside the rating
    (wealth only); items on fighters, or on vehicles crewed by fighters, move
    the rating when ``rating_applies``; anything else is counted nowhere.
    """
    if stash:
        return FinancialDelta(stash_value_delta=amount)
    if vehicle is not None:
        if vehicle.fighter is None:
            return FinancialDelta(stash_value_delta=amount)
        fighter = vehicle.fighter
    if fighter is not None and rating_applies(fighter):
        return FinancialDelta(rating_delta=amount)
    return FinancialDelta()


def item_placement_delta(item: FighterEquipment, amount: int) -> FinancialDelta:
    """Placement rule for an owned equipment row in its current location."""
    return placement_delta(
        amount, fighter=item.fighter, vehicle=item.vehicle, stash=item.gang_stash
    )


def stash_value(gang: Gang) -> int:
    return sum(item.purchase_cost or 0 for item in gang.equipment if item.gang_stash)


def unassigned_vehicle_value(gang: Gang) -> int:
    return sum(vehicle_total_cost(v) for v in gang.vehicles if v.fighter is None)


def gang_rating(gang: Gang) -> int:
    return sum(
        fighter_total_cost(fighter)
        for fighter in gang.fighters
        if not fighter.is_owned_beast and counts_toward_rating(fighter)
    )


def gang_wealth(gang: Gang, rating: int | None = None) -> int:
    if rating is None:
        rating = gang_rating(gang)
    return rating + (gang.credits or 0) + stash_value(gang) + unassigned_vehicle_value(gang)
