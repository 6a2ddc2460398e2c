"""Advancement Service for Munda Manager.

Fighters spend XP on characteristic increases (stored as "advancements"
effects) and on skills. Each advancement may raise the fighter's cost; the
gang rating follows while the fighter counts toward it.
"""

import logging

from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.effects import credits_increase, stat_name_for_effect
from munda.domain.enums import AdvancementType, EffectCategory, GangLogAction
from munda.interfaces import IFinancialsService, IGangLogService
from munda.models import (
    CustomFighterType,
    Fighter,
    FighterEffect,
    FighterEffectModifier,
    FighterSkill,
    FighterType,
    Profile,
    Skill,
)
from munda.services.access import get_or_404, load_fighter, refresh
from munda.services.effect_builder import (
    effect_from_type,
    effect_types_in_category,
    load_effect_type,
)

logger = logging.getLogger(__name__)


def _hired_type(fighter: Fighter) -> FighterType | CustomFighterType | None:
    return fighter.fighter_type_ref or fighter.custom_fighter_type


def _has_free_skill(fighter: Fighter) -> bool:
    """A free skill remains until a non-advance skill beyond the type defaults is taken."""
    fighter_type = _hired_type(fighter)
    if fighter_type is None or not fighter_type.free_skill:
        return False
    default_skill_ids = {
        default.skill_id for default in fighter_type.defaults if default.skill_id is not None
    }
    return all(
        skill.is_advance or skill.skill_id in default_skill_ids for skill in fighter.skills
    )


class AdvancementService:
    """Service for spending and refunding fighter experience."""

    def __init__(self, session: Session, financials: IFinancialsService, logs: IGangLogService):
        self.session = session
        self.financials = financials
        self.logs = logs

    def _apply_rating_change(self, fighter: Fighter, before: int) -> dict:
        return self.financials.update_gang_financials(
            fighter.gang_id, rating_delta=costs.rating_share(fighter) - before
        )

    @staticmethod
    def _validate_costs(xp_cost: int, credits_increase: int) -> None:
        if xp_cost < 0:
            raise ValueError("XP cost cannot be negative")
        if credits_increase < 0:
            raise ValueError("Credits increase cannot be negative")

    def add_characteristic_advancement(
        self,
        user: Profile,
        fighter_id: int,
        fighter_effect_type_id: int,
        xp_cost: int,
        credits_increase: int,
    ) -> dict:
        """Buy a characteristic increase with XP.

        Args:
            user: Acting user
            fighter_id: Fighter advancing
            fighter_effect_type_id: An "advancements" effect type
            xp_cost: XP spent
            credits_increase: Credits added to the fighter's cost

        Returns:
            Dictionary with effect, remaining_xp, fighter_total_cost and gang_rating

        Raises:
            ValueError: If the fighter lacks the XP ("Insufficient XP")
        """
        try:
            self._validate_costs(xp_cost, credits_increase)
            fighter = load_fighter(self.session, fighter_id, user)
            effect_type = load_effect_type(
                self.session, fighter_effect_type_id, EffectCategory.ADVANCEMENTS
            )
            if fighter.xp < xp_cost:
                raise ValueError("Insufficient XP")

            before = costs.rating_share(fighter)
            times_increased = 1 + sum(
                1 for effect in fighter.effects if effect.fighter_effect_type_id == effect_type.id
            )
            effect = effect_from_type(
                effect_type,
                user_id=user.id,
                data={
                    "times_increased": times_increased,
                    "xp_cost": xp_cost,
                    "credits_increase": credits_increase,
                },
                fighter=fighter,
            )
            if not effect.modifiers:
                effect.modifiers = [
                    FighterEffectModifier(
                        stat_name=stat_name_for_effect(effect_type.effect_name), numeric_value=1
                    )
                ]
            fighter.xp -= xp_cost
            self.session.add(effect)
            self.session.flush()

            financials = self._apply_rating_change(fighter, before)
            self.logs.create(
                fighter.gang_id,
                user.id,
                GangLogAction.FIGHTER_ADVANCEMENT_ADDED,
                f"{fighter.fighter_name} advanced {effect_type.effect_name} "
                f"for {xp_cost} XP (+{credits_increase} credits)",
                fighter_id=fighter.id,
            )
            self.session.commit()
            return {
                "effect": effect,
                "remaining_xp": fighter.xp,
                "fighter_total_cost": fighter.total_cost,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def add_skill_advancement(
        self,
        user: Profile,
        fighter_id: int,
        skill_id: int,
        xp_cost: int,
        credits_increase: int,
        is_advance: bool = True,
    ) -> dict:
        """Buy a skill with XP; a non-advance pick uses up the free skill."""
        try:
            self._validate_costs(xp_cost, credits_increase)
            fighter = load_fighter(self.session, fighter_id, user)
            skill = get_or_404(self.session, Skill, skill_id, "Skill")
            if any(owned.skill_id == skill.id for owned in fighter.skills):
                raise ValueError("Fighter already has this skill")
            if fighter.xp < xp_cost:
                raise ValueError("Insufficient XP")

            before = costs.rating_share(fighter)
            fighter_skill = FighterSkill(
                fighter=fighter,
                skill=skill,
                credits_increase=credits_increase,
                xp_cost=xp_cost,
                is_advance=is_advance,
            )
            self.session.add(fighter_skill)
            fighter.xp -= xp_cost
            if not is_advance:
                fighter.free_skill = False
            self.session.flush()

            financials = self._apply_rating_change(fighter, before)
            self.logs.create(
                fighter.gang_id,
                user.id,
                GangLogAction.FIGHTER_ADVANCEMENT_ADDED,
                f"{fighter.fighter_name} learnt {skill.name} for {xp_cost} XP "
                f"(+{credits_increase} credits)",
                fighter_id=fighter.id,
            )
            self.session.commit()
            return {
                "skill": fighter_skill,
                "remaining_xp": fighter.xp,
                "fighter_total_cost": fighter.total_cost,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def delete_advancement(
        self,
        user: Profile,
        fighter_id: int,
        advancement_id: int,
        advancement_type: str = AdvancementType.CHARACTERISTIC,
    ) -> dict:
        """Undo an advancement, refunding its XP and reversing its cost."""
        try:
            advancement_type = AdvancementType(advancement_type)
            fighter = load_fighter(self.session, fighter_id, user)
            before = costs.rating_share(fighter)

            if advancement_type == AdvancementType.CHARACTERISTIC:
                effect = self.session.get(FighterEffect, advancement_id)
                if (
                    effect is None
                    or effect.fighter_id != fighter.id
                    or effect.category_name != EffectCategory.ADVANCEMENTS
                ):
                    raise LookupError("Advancement not found")
                data = effect.type_specific_data or {}
                xp_refund = int(data.get("xp_cost", 0) or 0)
                credits = credits_increase(effect)
                label = effect.effect_name
                self.session.delete(effect)
            else:
                fighter_skill = self.session.get(FighterSkill, advancement_id)
                if fighter_skill is None or fighter_skill.fighter_id != fighter.id:
                    raise LookupError("Advancement not found")
                xp_refund = fighter_skill.xp_cost
                credits = fighter_skill.credits_increase
                label = fighter_skill.skill.name
                self.session.delete(fighter_skill)

            fighter.xp += xp_refund
            refresh(self.session)
            if advancement_type == AdvancementType.SKILL:
                fighter.free_skill = _has_free_skill(fighter)

            financials = self._apply_rating_change(fighter, before)
            self.logs.create(
                fighter.gang_id,
                user.id,
                GangLogAction.FIGHTER_ADVANCEMENT_REMOVED,
                f"Removed {label} from {fighter.fighter_name} "
                f"(refunded {xp_refund} XP, -{credits} credits)",
                fighter_id=fighter.id,
            )
            self.session.commit()
            return {
                "fighter": fighter,
                "xp_refunded": xp_refund,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def add_skill(self, user: Profile, fighter_id: int, skill_id: int) -> FighterSkill:
        """Give a fighter a skill without spending XP."""
        try:
            fighter = load_fighter(self.session, fighter_id, user)
            skill = get_or_404(self.session, Skill, skill_id, "Skill")
            if any(owned.skill_id == skill.id for owned in fighter.skills):
                raise ValueError("Fighter already has this skill")
            fighter_skill = FighterSkill(fighter=fighter, skill=skill)
            self.session.add(fighter_skill)
            self.session.commit()
            return fighter_skill
        except Exception:
            self.session.rollback()
            raise

    def delete_skill(self, user: Profile, fighter_id: int, fighter_skill_id: int) -> None:
        try:
            fighter = load_fighter(self.session, fighter_id, user)
            fighter_skill = self.session.get(FighterSkill, fighter_skill_id)
            if fighter_skill is None or fighter_skill.fighter_id != fighter.id:
                raise LookupError("Skill not found")
            before = costs.rating_share(fighter)
            self.session.delete(fighter_skill)
            refresh(self.session)
            self._apply_rating_change(fighter, before)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def list_available_advancements(self, fighter_id: int) -> list[dict]:
        """Characteristic advancements with how often the fighter has taken each."""
        fighter = get_or_404(self.session, Fighter, fighter_id, "Fighter")
        taken: dict[int, int] = {}
        for effect in fighter.effects:
            if effect.fighter_effect_type_id is not None:
                taken[effect.fighter_effect_type_id] = taken.get(effect.fighter_effect_type_id, 0) + 1

        available = []
        for effect_type in effect_types_in_category(self.session, EffectCategory.ADVANCEMENTS):
            data = effect_type.type_specific_data or {}
            stats = [modifier.stat_name for modifier in effect_type.modifiers]
            available.append(
                {
                    "id": effect_type.id,
                    "effect_name": effect_type.effect_name,
                    "stat_name": stats[0] if stats else stat_name_for_effect(effect_type.effect_name),
                    "xp_cost": int(data.get("xp_cost", 0) or 0),
                    "credits_increase": int(data.get("credits_increase", 0) or 0),
                    "times_increased": taken.get(effect_type.id, 0),
                }
            )
        return available
