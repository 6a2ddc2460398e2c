"""Financials Service Protocol Interface."""

from typing import Protocol

from munda.domain.costs import FinancialDelta


class IFinancialsService(Protocol):
    """Protocol for services that keep gang rating, credits and wealth in step."""

    def update_gang_financials(
        self,
        gang_id: int,
        rating_delta: int = 0,
        credits_delta: int = 0,
        stash_value_delta: int = 0,
        apply_to_rating: bool = True,
    ) -> dict:
        """Apply signed deltas to a gang.

        Args:
            gang_id: Gang to update
            rating_delta: Change to rating
            credits_delta: Change to credits
            stash_value_delta: Change to value held outside the rating
            apply_to_rating: Whether rating_delta is applied

        Returns:
            Dictionary with old_/new_ rating, credits and wealth
        """
        ...

    def apply(self, gang_id: int, delta: FinancialDelta) -> dict:
        """Apply a precomputed delta."""
        ...

    def recalculate(self, gang_id: int) -> dict:
        """Recompute rating and wealth from scratch.

        Returns:
            Dictionary with old_/new_ rating and wealth
        """
        ...
