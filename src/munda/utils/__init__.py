"""Utility functions for Munda Manager."""

from munda.utils.dice import (
    LASTING_INJURY_TABLE,
    generate_seed,
    lasting_injury_by_name,
    resolve_lasting_injury,
    roll_d3,
    roll_d6,
    roll_d66,
    roll_dice,
    roll_lasting_injury,
)

__all__ = [
    "LASTING_INJURY_TABLE",
    "generate_seed",
    "lasting_injury_by_name",
    "resolve_lasting_injury",
    "roll_d3",
    "roll_d6",
    "roll_d66",
    "roll_dice",
    "roll_lasting_injury",
]
