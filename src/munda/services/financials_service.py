"""Gang rating, credits and wealth bookkeeping.

Stored rating and wealth are maintained incrementally: each operation works
out a signed :class:`~munda.domain.costs.FinancialDelta` and applies it here.
``recalculate`` rebuilds both values from the gang's rows.
"""

import logging

from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.costs import FinancialDelta
from munda.models import Gang

logger = logging.getLogger(__name__)


class FinancialsService:
    """Applies financial deltas to gangs inside the caller's transaction."""

    def __init__(self, session: Session):
        self.session = session

    def update_gang_financials(
        self,
        gang_id: int,
        rating_delta: int = 0,
        credits_delta: int = 0,
        stash_value_delta: int = 0,
        apply_to_rating: bool = True,
    ) -> dict:
        """Apply signed deltas to a gang's rating, credits and wealth.

        Args:
            gang_id: Gang to update
            rating_delta: Change to rating (ignored when apply_to_rating is False)
            credits_delta: Change to credits
            stash_value_delta: Change to value held outside the rating
            apply_to_rating: Whether rating_delta moves the rating at all

        Returns:
            Dictionary with old/new rating, credits and wealth

        Raises:
            LookupError: If the gang does not exist
        """
        gang = self.session.get(Gang, gang_id, with_for_update=True)
        if gang is None:
            raise LookupError("Gang not found")

        result = {
            "old_rating": gang.rating,
            "new_rating": gang.rating,
            "old_credits": gang.credits,
            "new_credits": gang.credits,
            "old_wealth": gang.wealth,
            "new_wealth": gang.wealth,
        }

        effective = rating_delta if apply_to_rating else 0
        if not (effective or credits_delta or stash_value_delta):
            return result

        gang.rating = max(0, gang.rating + effective)
        gang.credits = gang.credits + credits_delta
        gang.wealth = max(0, gang.wealth + effective + credits_delta + stash_value_delta)
        self.session.flush()

        result["new_rating"] = gang.rating
        result["new_credits"] = gang.credits
        result["new_wealth"] = gang.wealth
        logger.debug(
            "gang %s financials: rating %+d credits %+d stash %+d",
            gang_id,
            effective,
            credits_delta,
            stash_value_delta,
        )
        return result

    def apply(self, gang_id: int, delta: FinancialDelta) -> dict:
        """Apply a precomputed :class:`FinancialDelta`."""
        return self.update_gang_financials(
            gang_id,
            rating_delta=delta.rating_delta,
            credits_delta=delta.credits_delta,
            stash_value_delta=delta.stash_value_delta,
        )

    def recalculate(self, gang_id: int) -> dict:
        """Recompute rating and wealth from the gang's fighters, stash and vehicles."""
        gang = self.session.get(Gang, gang_id, with_for_update=True)
        if gang is None:
            raise LookupError("Gang not found")

        old_rating, old_wealth = gang.rating, gang.wealth
        gang.rating = costs.gang_rating(gang)
        gang.wealth = costs.gang_wealth(gang, gang.rating)
        self.session.flush()

        if (old_rating, old_wealth) != (gang.rating, gang.wealth):
            logger.info(
                "gang %s recalculated: rating %s -> %s, wealth %s -> %s",
                gang_id,
                old_rating,
                gang.rating,
                old_wealth,
                gang.wealth,
            )
        return {
            "old_rating": old_rating,
            "new_rating": gang.rating,
            "old_wealth": old_wealth,
            "new_wealth": gang.wealth,
        }
