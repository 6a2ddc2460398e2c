"""Deterministic dice for Munda Manager.

All randomness is seeded from gang state (gang_id, fighter_id, context) so a
roll can be replayed exactly: the same seed always produces the same result,
which keeps lasting-injury and vehicle-damage rolls auditable.

Examples:
    >>> seed = generate_seed(gang_id=3, fighter_id=12, context="lasting_injury:0")
    >>> roll_d66(seed)["total"] in range(11, 67)
    True
    >>> resolve_lasting_injury(42)
    'Partially Deafened'
"""

import hashlib
import random
import re
from typing import Any

LASTING_INJURY_TABLE: tuple[tuple[int, int, str], ...] = (
    (11, 11, "Lesson Learned"),
    (12, 12, "Impressive Scars"),
    (13, 13, "Horrid Scars"),
    (14, 14, "Bitter Enmity"),
    (15, 26, "Out Cold"),
    (31, 36, "Convalescence"),
    (41, 41, "Old Battle Wound"),
    (42, 42, "Partially Deafened"),
    (43, 43, "Humiliated"),
    (44, 44, "Eye Injury"),
    (45, 45, "Hand Injury"),
    (46, 46, "Hobbled"),
    (51, 51, "Spinal Injury"),
    (52, 52, "Enfeebled"),
    (53, 53, "Head Injury"),
    (54, 54, "Multiple Injuries"),
    (55, 56, "Captured"),
    (61, 65, "Critical Injury"),
    (66, 66, "Memorable Death"),
)


def generate_seed(gang_id: int, fighter_id: int | None, context: str) -> str:
    """Generate a deterministic seed from gang state.

    Format: "gang_id:fighter_id:context" (fighter_id is 0 for gang-level rolls)

    Args:
        gang_id: Gang the roll is for
        fighter_id: Fighter the roll is for, if any
        context: What the roll is for (e.g. 'lasting_injury:2')

    Returns:
        Seed string

    Raises:
        ValueError: If gang_id or fighter_id is negative
    """
    if gang_id < 0:
        raise ValueError(f"gang_id must be non-negative, got {gang_id}")
    if fighter_id is not None and fighter_id < 0:
        raise ValueError(f"fighter_id must be non-negative, got {fighter_id}")

    return f"{gang_id}:{fighter_id or 0}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random()."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def _parse_dice_notation(notation: str) -> tuple[int, int]:
    """Parse dice notation like '2d6' into (num_dice, num_sides).

    Raises:
        ValueError: If notation is invalid or values are non-positive
    """
    match = re.match(r"^(\d+)d(\d+)$", notation.lower())
    if not match:
        raise ValueError(
            f"Invalid dice notation: '{notation}'. Expected format: NdM (e.g., '2d6', '1d3')"
        )

    num_dice = int(match.group(1))
    num_sides = int(match.group(2))
    if num_dice <= 0:
        raise ValueError(f"Number of dice must be positive, got {num_dice}")
    if num_sides <= 0:
        raise ValueError(f"Number of sides must be positive, got {num_sides}")
    return num_dice, num_sides


def roll_dice(seed: str, notation: str = "1d6") -> dict[str, Any]:
    """Roll dice with a deterministic seed.

    Returns:
        Dictionary containing notation, rolls, total and seed

    Raises:
        ValueError: If dice notation is invalid
    """
    num_dice, num_sides = _parse_dice_notation(notation)

    rng = random.Random(_seed_to_int(seed))
    rolls = [rng.randint(1, num_sides) for _ in range(num_dice)]

    return {
        "notation": notation,
        "rolls": rolls,
        "total": sum(rolls),
        "seed": seed,
    }


def roll_d6(seed: str) -> dict[str, Any]:
    return roll_dice(seed, "1d6")


def roll_d3(seed: str) -> dict[str, Any]:
    return roll_dice(seed, "1d3")


def roll_d66(seed: str) -> dict[str, Any]:
    """Roll a D66: the first d6 is the tens digit, the second the units.

    Returns:
        Dictionary containing notation ("d66"), rolls (two d6), total (11-66) and seed
    """
    rolls = roll_dice(seed, "2d6")["rolls"]
    return {
        "notation": "d66",
        "rolls": rolls,
        "total": rolls[0] * 10 + rolls[1],
        "seed": seed,
    }


def _validate_d66(roll: int) -> None:
    tens, units = divmod(roll, 10)
    if not (1 <= tens <= 6 and 1 <= units <= 6):
        raise ValueError(f"Invalid D66 roll: {roll}")


def resolve_lasting_injury(roll: int) -> str:
    """Look up the lasting injury for a D66 result.

    Raises:
        ValueError: If the roll is not a valid D66 result
    """
    _validate_d66(roll)
    for low, high, name in LASTING_INJURY_TABLE:
        if low <= roll <= high:
            return name
    raise ValueError(f"No lasting injury for roll {roll}")


def lasting_injury_by_name(name: str) -> dict[str, Any]:
    """Return the D66 range for a lasting injury name (case-insensitive).

    Raises:
        ValueError: If the name is not in the table
    """
    wanted = name.strip().lower()
    for low, high, injury in LASTING_INJURY_TABLE:
        if injury.lower() == wanted:
            return {"name": injury, "min_roll": low, "max_roll": high}
    raise ValueError(f"Unknown lasting injury: '{name}'")


def roll_lasting_injury(seed: str) -> dict[str, Any]:
    """Roll on the lasting injury table."""
    result = roll_d66(seed)
    return {**result, "injury": resolve_lasting_injury(result["total"])}
