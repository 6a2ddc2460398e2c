"""Fighter Service for Munda Manager.

Hiring fighters, status changes (kill, retire, sell, rescue, starve, recover,
capture, delete), XP, detail edits, manual stat tweaks and copying. Each
public method is a single transaction; rating changes are applied as deltas
through the financials helper.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.effects import STAT_NAMES
from munda.domain.enums import EffectCategory, FighterAction, GangLogAction
from munda.domain.fighter_status import ensure_status_compatible
from munda.domain.rules_config import DEFAULT_RULES
from munda.interfaces import IBeastService, IFinancialsService, IGangLogService
from munda.models import (
    CustomFighterType,
    Equipment,
    Fighter,
    FighterEffect,
    FighterEffectModifier,
    FighterEquipment,
    FighterSkill,
    FighterType,
    Gang,
    Profile,
)
from munda.services.access import (
    ensure_gang_access,
    get_or_404,
    load_fighter,
    load_gang,
    next_position,
    refresh,
)
from munda.services.cloning import clone_effect, column_values
from munda.services.gang_log_service import (
    fighter_added_description,
    status_description,
    xp_changed_description,
)

logger = logging.getLogger(__name__)

DETAIL_FIELDS = frozenset(
    {
        "fighter_name",
        "label",
        "note",
        "note_backstory",
        "kills",
        "special_rules",
        "fighter_class",
        "cost_adjustment",
    }
)

_STATUS_FLAGS = ("killed", "retired", "enslaved", "starved", "recovery", "captured")

# (flag, log action when set, log action when cleared, event text when set, when cleared)
_TOGGLES = {
    FighterAction.KILL: (
        "killed",
        GangLogAction.FIGHTER_KILLED,
        GangLogAction.FIGHTER_RESURRECTED,
        "was killed",
        "was resurrected",
    ),
    FighterAction.RETIRE: (
        "retired",
        GangLogAction.FIGHTER_RETIRED,
        GangLogAction.FIGHTER_UNRETIRED,
        "retired",
        "returned from retirement",
    ),
    FighterAction.RECOVER: (
        "recovery",
        GangLogAction.FIGHTER_RECOVERY_STARTED,
        GangLogAction.FIGHTER_RECOVERED,
        "went into recovery",
        "recovered",
    ),
    FighterAction.CAPTURE: (
        "captured",
        GangLogAction.FIGHTER_CAPTURED,
        GangLogAction.FIGHTER_RELEASED,
        "was captured",
        "was released",
    ),
}


class FighterService:
    """Service for fighter-level operations."""

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

    def _resolve_type(
        self,
        user: Profile,
        gang: Gang,
        fighter_type_id: int | None,
        custom_fighter_type_id: int | None,
    ) -> tuple[FighterType | CustomFighterType, int]:
        if (fighter_type_id is None) == (custom_fighter_type_id is None):
            raise ValueError("Specify exactly one of fighter_type_id or custom_fighter_type_id")

        if fighter_type_id is not None:
            fighter_type = get_or_404(self.session, FighterType, fighter_type_id, "Fighter type")
            return fighter_type, costs.fighter_type_adjusted_cost(fighter_type, gang.gang_type_id)

        custom = get_or_404(
            self.session, CustomFighterType, custom_fighter_type_id, "Custom fighter type"
        )
        if custom.user_id != user.id and not user.is_admin:
            raise PermissionError("You do not have permission to use this custom fighter type")
        return custom, custom.cost

    def add_fighter(
        self,
        user: Profile,
        gang_id: int,
        fighter_name: str,
        fighter_type_id: int | None = None,
        custom_fighter_type_id: int | None = None,
        cost: int | None = None,
        selected_equipment_ids: list[int] | None = None,
        use_base_cost_for_rating: bool = True,
    ) -> dict:
        """Hire a fighter with its default loadout and any selected equipment.

        The fighter's ``credits`` hold its rating cost; default and selected
        equipment rows are stored at a purchase cost of 0.

        Args:
            user: Acting user
            gang_id: Gang hiring the fighter
            fighter_name: Name of the new fighter
            fighter_type_id: Catalog fighter type (exclusive with custom_fighter_type_id)
            custom_fighter_type_id: User-defined fighter type
            cost: Credits actually paid; defaults to the gang-adjusted type cost
            selected_equipment_ids: Extra catalog equipment bought with the fighter
            use_base_cost_for_rating: Rate the fighter at catalog cost rather than
                at the amount paid

        Returns:
            Dictionary with fighter, gang_credits, gang_rating, rating_cost and created_beasts

        Raises:
            ValueError: If the name is blank or the gang cannot afford the fighter
            LookupError: If the gang, type or equipment does not exist
        """
        try:
            name = (fighter_name or "").strip()
            if not name:
                raise ValueError("Fighter name is required")
            if cost is not None and cost < 0:
                raise ValueError("Cost cannot be negative")

            gang = load_gang(self.session, gang_id, user, for_update=True)
            fighter_type, adjusted = self._resolve_type(
                user, gang, fighter_type_id, custom_fighter_type_id
            )
            selected = [
                get_or_404(self.session, Equipment, equipment_id, "Equipment")
                for equipment_id in (selected_equipment_ids or [])
            ]

            fighter_cost = cost if cost is not None else adjusted
            if use_base_cost_for_rating:
                rating_cost = adjusted + sum(item.cost for item in selected)
            else:
                rating_cost = fighter_cost

            if gang.credits < fighter_cost:
                raise ValueError("Not enough credits to add this fighter with equipment")

            fighter = Fighter(
                gang_id=gang.id,
                user_id=user.id,
                fighter_name=name,
                fighter_type=fighter_type.fighter_type,
                fighter_type_id=fighter_type_id,
                custom_fighter_type_id=custom_fighter_type_id,
                fighter_class=fighter_type.fighter_class,
                credits=rating_cost,
                special_rules=list(fighter_type.special_rules or []),
                free_skill=fighter_type.free_skill,
                position=next_position(self.session, gang.id),
                **{stat: getattr(fighter_type, stat) for stat in STAT_NAMES},
            )
            self.session.add(fighter)
            self.session.flush()

            loadout = []
            for default in fighter_type.defaults:
                if default.equipment is not None:
                    loadout.append(default.equipment)
                if default.skill is not None:
                    self.session.add(FighterSkill(fighter=fighter, skill_id=default.skill.id))
            loadout.extend(selected)

            created_beasts = []
            beast_cost = 0
            for equipment in loadout:
                item = FighterEquipment(
                    gang_id=gang.id,
                    fighter=fighter,
                    equipment_id=equipment.id,
                    purchase_cost=0,
                    original_cost=equipment.cost,
                    user_id=user.id,
                )
                self.session.add(item)
                self.session.flush()
                for created in self.beasts.create_beasts_for_equipment(fighter, item):
                    created_beasts.append(created["beast"])
                    beast_cost += created["cost"]

            financials = self.financials.update_gang_financials(
                gang.id, rating_delta=rating_cost + beast_cost, credits_delta=-fighter_cost
            )
            self.logs.create(
                gang.id,
                user.id,
                GangLogAction.FIGHTER_ADDED,
                fighter_added_description(name, fighter_cost, financials["new_rating"]),
                fighter_id=fighter.id,
            )
            self.session.commit()
            logger.info("gang %s hired fighter %s (%s)", gang.id, fighter.id, name)
            return {
                "fighter": fighter,
                "gang_credits": financials["new_credits"],
                "gang_rating": financials["new_rating"],
                "rating_cost": rating_cost,
                "created_beasts": created_beasts,
            }
        except Exception:
            self.session.rollback()
            raise

    def get_fighter(self, fighter_id: int) -> Fighter:
        return get_or_404(self.session, Fighter, fighter_id, "Fighter")

    def update_status(
        self,
        user: Profile,
        fighter_id: int,
        action: str,
        sell_value: int | None = None,
    ) -> dict:
        """Apply a status action to a fighter.

        Args:
            user: Acting user
            fighter_id: Fighter to update
            action: kill | retire | sell | rescue | starve | recover | capture | delete
            sell_value: Credits received when selling (enslaving) the fighter

        Returns:
            Dictionary with fighter (None after delete), gang_credits, gang_rating
            and gang_wealth

        Raises:
            ValueError: If the action is unknown or conflicts with the fighter's status
        """
        try:
            action = FighterAction(action)
            fighter = load_fighter(self.session, fighter_id, user)
            gang = fighter.gang
            ensure_status_compatible(fighter, action)

            if action == FighterAction.DELETE:
                financials = self._delete_fighter(user, fighter)
                self.session.commit()
                return {
                    "fighter": None,
                    "gang_credits": financials["new_credits"],
                    "gang_rating": financials["new_rating"],
                    "gang_wealth": financials["new_wealth"],
                }

            before = costs.rating_share(fighter)
            credits_delta = 0

            if action in _TOGGLES:
                flag, on_action, off_action, on_text, off_text = _TOGGLES[action]
                value = not getattr(fighter, flag)
                setattr(fighter, flag, value)
                log_action, event = (on_action, on_text) if value else (off_action, off_text)
            elif action == FighterAction.SELL:
                if fighter.enslaved:
                    raise ValueError("Fighter is already enslaved")
                sell_value = sell_value or 0
                if sell_value < 0:
                    raise ValueError("Sell value cannot be negative")
                fighter.enslaved = True
                credits_delta = sell_value
                log_action = GangLogAction.FIGHTER_ENSLAVED
                event = f"was sold to the guilders for {sell_value} credits"
            elif action == FighterAction.RESCUE:
                if not fighter.enslaved:
                    raise ValueError("Fighter is not enslaved")
                fighter.enslaved = False
                log_action, event = GangLogAction.FIGHTER_RESCUED, "was rescued"
            else:
                # starve toggles: feeding a starved fighter costs meat
                if fighter.starved:
                    meat_cost = DEFAULT_RULES.fighters.meat_per_feeding
                    if gang.meat < meat_cost:
                        raise ValueError("Not enough meat to feed fighter")
                    gang.meat -= meat_cost
                    fighter.starved = False
                    log_action, event = GangLogAction.FIGHTER_FED, "was fed"
                else:
                    fighter.starved = True
                    log_action, event = GangLogAction.FIGHTER_STARVED, "is starving"

            rating_delta = costs.rating_share(fighter) - before
            financials = self.financials.update_gang_financials(
                gang.id, rating_delta=rating_delta, credits_delta=credits_delta
            )
            self.logs.create(
                gang.id,
                user.id,
                log_action,
                status_description(
                    fighter.fighter_name,
                    event,
                    financials["new_rating"] if rating_delta else None,
                ),
                fighter_id=fighter.id,
            )
            self.session.commit()
            logger.info("fighter %s: %s", fighter.id, log_action)
            return {
                "fighter": fighter,
                "gang_credits": financials["new_credits"],
                "gang_rating": financials["new_rating"],
                "gang_wealth": financials["new_wealth"],
            }
        except Exception:
            self.session.rollback()
            raise

    def _delete_fighter(self, user: Profile, fighter: Fighter) -> dict:
        """Remove a fighter, unassigning its vehicles and deleting its beasts."""
        fighter_id, gang_id = fighter.id, fighter.gang_id
        name = fighter.fighter_name
        contribution = costs.rating_share(fighter)

        vehicle_value = 0
        for vehicle in list(fighter.vehicles):
            vehicle_value += costs.vehicle_total_cost(vehicle)
            vehicle.fighter = None

        self.beasts.delete_beasts_for_owner(fighter)
        self.session.delete(fighter)
        refresh(self.session)

        financials = self.financials.update_gang_financials(
            gang_id, rating_delta=-contribution, stash_value_delta=vehicle_value
        )
        self.logs.create(
            gang_id,
            user.id,
            GangLogAction.FIGHTER_REMOVED,
            status_description(name, "was removed", financials["new_rating"]),
        )
        logger.info("removed fighter %s from gang %s", fighter_id, gang_id)
        return financials

    def update_xp(
        self, user: Profile, fighter_id: int, xp_delta: int, ooa_count: int = 0
    ) -> Fighter:
        """Add (or remove) experience and record out-of-action kills."""
        try:
            if ooa_count < 0:
                raise ValueError("Out of action count cannot be negative")
            fighter = load_fighter(self.session, fighter_id, user)
            old_xp = fighter.xp
            new_xp = old_xp + xp_delta
            if new_xp < 0:
                raise ValueError("XP cannot be negative")

            fighter.xp = new_xp
            fighter.kills += ooa_count
            self.logs.create(
                fighter.gang_id,
                user.id,
                GangLogAction.FIGHTER_XP_CHANGED,
                xp_changed_description(fighter.fighter_name, xp_delta, old_xp, new_xp),
                fighter_id=fighter.id,
            )
            self.session.commit()
            return fighter
        except Exception:
            self.session.rollback()
            raise

    def update_details(self, user: Profile, fighter_id: int, changes: dict[str, Any]) -> Fighter:
        """Apply a partial update to a fighter's descriptive fields.

        A ``cost_adjustment`` change moves the gang rating by its delta while
        the fighter's costs apply to the rating.
        """
        try:
            unknown = set(changes) - DETAIL_FIELDS
            if unknown:
                raise ValueError(f"Unknown fighter fields: {', '.join(sorted(unknown))}")
            fighter = load_fighter(self.session, fighter_id, user)

            if "fighter_name" in changes:
                name = (changes["fighter_name"] or "").strip()
                if not name:
                    raise ValueError("Fighter name is required")
                fighter.fighter_name = name
            if changes.get("kills") is not None:
                if changes["kills"] < 0:
                    raise ValueError("Kills cannot be negative")
                fighter.kills = changes["kills"]
            if changes.get("fighter_class"):
                fighter.fighter_class = changes["fighter_class"]
            for field in ("label", "note", "note_backstory", "special_rules"):
                if field in changes:
                    setattr(fighter, field, changes[field])

            if changes.get("cost_adjustment") is not None:
                old_adjustment = fighter.cost_adjustment or 0
                delta = changes["cost_adjustment"] - old_adjustment
                if delta:
                    fighter.cost_adjustment = changes["cost_adjustment"]
                    if costs.rating_applies(fighter):
                        self.financials.update_gang_financials(
                            fighter.gang_id, rating_delta=delta
                        )
                    self.logs.create(
                        fighter.gang_id,
                        user.id,
                        GangLogAction.FIGHTER_COST_ADJUSTED,
                        f"{fighter.fighter_name} cost adjustment changed from "
                        f"{old_adjustment} to {fighter.cost_adjustment}",
                        fighter_id=fighter.id,
                    )

            self.session.commit()
            return fighter
        except Exception:
            self.session.rollback()
            raise

    def update_stat_effects(
        self, user: Profile, fighter_id: int, stats: dict[str, int]
    ) -> FighterEffect:
        """Record manual characteristic changes as a "user" effect."""
        try:
            unknown = [stat for stat in stats if stat not in STAT_NAMES]
            if unknown:
                raise ValueError(f"Unknown characteristics: {', '.join(unknown)}")
            changes = {stat: delta for stat, delta in stats.items() if delta}
            if not changes:
                raise ValueError("No characteristic changes provided")

            fighter = load_fighter(self.session, fighter_id, user)
            effect = FighterEffect(
                fighter=fighter,
                effect_name="User adjustment",
                type_specific_data={"category": str(EffectCategory.USER)},
                user_id=user.id,
            )
            effect.modifiers = [
                FighterEffectModifier(stat_name=stat, numeric_value=delta)
                for stat, delta in changes.items()
            ]
            self.session.add(effect)
            self.session.commit()
            return effect
        except Exception:
            self.session.rollback()
            raise

    def copy_fighter(
        self,
        user: Profile,
        fighter_id: int,
        target_gang_id: int,
        new_name: str | None = None,
    ) -> dict:
        """Copy a fighter, with its equipment, skills and effects, to a gang.

        Vehicle-mounted equipment, vehicles and beasts are not copied and all
        statuses are reset. Only admins may copy between gangs, and never
        between gangs playing in different campaigns.
        """
        try:
            source = get_or_404(self.session, Fighter, fighter_id, "Fighter")
            target = get_or_404(self.session, Gang, target_gang_id, "Gang")
            ensure_gang_access(source.gang, user)
            if source.gang_id != target.id:
                if not user.is_admin:
                    raise PermissionError("Only admins can copy fighters between gangs")
                source_campaigns = {cg.campaign_id for cg in source.gang.campaign_gangs}
                target_campaigns = {cg.campaign_id for cg in target.campaign_gangs}
                if source_campaigns != target_campaigns:
                    raise ValueError("Cannot copy fighters between gangs in different campaigns")

            name = (new_name or "").strip() or (
                f"{source.fighter_name}{DEFAULT_RULES.fighters.copy_suffix}"
            )
            clone = Fighter(
                **column_values(
                    source,
                    exclude=("gang_id", "user_id", "fighter_name", "position", *_STATUS_FLAGS),
                ),
                gang_id=target.id,
                user_id=target.user_id,
                fighter_name=name,
                position=next_position(self.session, target.id),
            )
            self.session.add(clone)
            self.session.flush()

            equipment_map = {}
            for item in source.equipment:
                if item.vehicle_id is not None or item.gang_stash:
                    continue
                copied = FighterEquipment(
                    **column_values(
                        item, exclude=("gang_id", "fighter_id", "vehicle_id", "user_id")
                    ),
                    gang_id=target.id,
                    fighter=clone,
                    user_id=user.id,
                )
                self.session.add(copied)
                equipment_map[item.id] = copied
            self.session.flush()

            for effect in source.effects:
                self.session.add(
                    clone_effect(
                        effect,
                        fighter=clone,
                        fighter_equipment=equipment_map.get(effect.fighter_equipment_id),
                        user_id=user.id,
                    )
                )
            for skill in source.skills:
                self.session.add(
                    FighterSkill(
                        **column_values(skill, exclude=("fighter_id", "fighter_effect_id")),
                        fighter=clone,
                    )
                )
            self.session.flush()

            cost = costs.fighter_total_cost(clone)
            financials = self.financials.update_gang_financials(target.id, rating_delta=cost)
            self.logs.create(
                target.id,
                user.id,
                GangLogAction.FIGHTER_COPIED,
                f'Copied fighter "{source.fighter_name}" as "{name}" ({cost} credits)',
                fighter_id=clone.id,
            )
            self.session.commit()
            return {
                "fighter": clone,
                "gang_rating": financials["new_rating"],
                "fighter_total_cost": cost,
            }
        except Exception:
            self.session.rollback()
            raise
