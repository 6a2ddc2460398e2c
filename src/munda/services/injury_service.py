"""Lasting injuries on fighters."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.enums import EffectCategory, FighterAction, GangLogAction
from munda.domain.fighter_status import ensure_status_compatible
from munda.interfaces import IFinancialsService, IGangLogService
from munda.models import FighterEffect, FighterEffectCategory, FighterEffectType, Profile
from munda.services.access import load_fighter, refresh
from munda.services.effect_builder import effect_from_type, load_effect_type
from munda.utils import dice

logger = logging.getLogger(__name__)


class InjuryService:
    """Service for adding, removing and rolling lasting injuries."""

    def __init__(self, session: Session, financials: IFinancialsService, logs: IGangLogService):
        self.session = session
        self.financials = financials
        self.logs = logs

    def add_injury(
        self,
        user: Profile,
        fighter_id: int,
        injury_type_id: int,
        send_to_recovery: bool = False,
        set_captured: bool = False,
    ) -> dict:
        """Apply a lasting injury, optionally sending the fighter to recovery or captivity.

        Raises:
            ValueError: If both flags are set or the status change conflicts
        """
        if send_to_recovery and set_captured:
            raise ValueError("A fighter cannot be sent to recovery and captured at once")
        try:
            fighter = load_fighter(self.session, fighter_id, user)
            injury_type = load_effect_type(self.session, injury_type_id, EffectCategory.INJURIES)
            if send_to_recovery:
                ensure_status_compatible(fighter, FighterAction.RECOVER)
            if set_captured:
                ensure_status_compatible(fighter, FighterAction.CAPTURE)

            before = costs.rating_share(fighter)
            effect = effect_from_type(injury_type, user_id=user.id, fighter=fighter)
            self.session.add(effect)
            if send_to_recovery:
                fighter.recovery = True
            if set_captured:
                fighter.captured = True
            self.session.flush()

            financials = self.financials.update_gang_financials(
                fighter.gang_id, rating_delta=costs.rating_share(fighter) - before
            )
            description = f"{fighter.fighter_name} suffered {injury_type.effect_name}"
            if send_to_recovery:
                description += " and went into recovery"
            elif set_captured:
                description += " and was captured"
            self.logs.create(
                fighter.gang_id,
                user.id,
                GangLogAction.FIGHTER_INJURED,
                description,
                fighter_id=fighter.id,
            )
            self.session.commit()
            logger.info("Fighter %s injured: %s", fighter.id, injury_type.effect_name)
            return {
                "injury": effect,
                "fighter": fighter,
                "gang_rating": financials["new_rating"],
            }
        except Exception:
            self.session.rollback()
            raise

    def delete_injury(self, user: Profile, fighter_id: int, effect_id: int) -> dict:
        try:
            fighter = load_fighter(self.session, fighter_id, user)
            effect = self.session.get(FighterEffect, effect_id)
            if (
                effect is None
                or effect.fighter_id != fighter.id
                or effect.category_name != EffectCategory.INJURIES
            ):
                raise LookupError("Injury not found")

            before = costs.rating_share(fighter)
            name = effect.effect_name
            self.session.delete(effect)
            refresh(self.session)

            financials = self.financials.update_gang_financials(
                fighter.gang_id, rating_delta=costs.rating_share(fighter) - before
            )
            self.logs.create(
                fighter.gang_id,
                user.id,
                GangLogAction.FIGHTER_INJURY_REMOVED,
                f"Removed {name} from {fighter.fighter_name}",
                fighter_id=fighter.id,
            )
            self.session.commit()
            return {"fighter": fighter, "gang_rating": financials["new_rating"]}
        except Exception:
            self.session.rollback()
            raise

    def roll_lasting_injury(self, gang_id: int, fighter_id: int | None, context: str) -> dict:
        """Roll on the lasting injury table and resolve the matching injury type.

        The roll is seeded from (gang_id, fighter_id, context), so repeating a
        call with the same arguments returns the same injury.
        """
        seed = dice.generate_seed(gang_id, fighter_id, context)
        result = dice.roll_lasting_injury(seed)
        injury_type = self.session.execute(
            select(FighterEffectType)
            .join(FighterEffectCategory, FighterEffectType.category_id == FighterEffectCategory.id)
            .where(
                FighterEffectCategory.category_name == EffectCategory.INJURIES,
                FighterEffectType.effect_name == result["injury"],
            )
        ).scalar_one_or_none()
        result["injury_type_id"] = injury_type.id if injury_type is not None else None
        return result
