"""Stat and weapon profile modifiers.

Effects carry modifiers with an ``add`` or ``set`` operation. Fighter stats
are plain integers; weapon profile fields are the strings printed on the
card ("4+", "-1", "12\"") and keep their formatting after modification.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from munda.domain.enums import ModifierOperation

STAT_NAMES = (
    "movement",
    "weapon_skill",
    "ballistic_skill",
    "strength",
    "toughness",
    "wounds",
    "initiative",
    "attacks",
    "leadership",
    "cool",
    "willpower",
    "intelligence",
)

VEHICLE_STAT_NAMES = ("movement", "front", "side", "rear", "hull_points", "handling", "save")

WEAPON_NUMERIC_FIELDS = (
    "range_short",
    "range_long",
    "acc_short",
    "acc_long",
    "strength",
    "ap",
    "damage",
    "ammo",
)

_PROFILE_VALUE = re.compile(r'^(?P<sign>[+-]?)(?P<number>\d+)(?P<suffix>\+|")?$')


class ModifierLike(Protocol):
    stat_name: str
    numeric_value: int
    operation: str


class EffectLike(Protocol):
    effect_name: str
    type_specific_data: dict[str, Any] | None
    modifiers: list[Any]


def credits_increase(effect: EffectLike) -> int:
    """Credits an effect adds to the cost of whatever carries it."""
    data = effect.type_specific_data or {}
    try:
        return int(data.get("credits_increase", 0) or 0)
    except (TypeError, ValueError):
        return 0


def stat_name_for_effect(effect_name: str) -> str:
    """Derive a stat column from an advancement name ("Weapon Skill" -> "weapon_skill")."""
    return effect_name.strip().lower().replace(" ", "_")


def apply_numeric_modifiers(base: int | None, modifiers: Iterable[ModifierLike]) -> int | None:
    """Fold modifiers onto ``base``.

    The last ``set`` wins outright; otherwise every ``add`` is summed onto the
    base. An unparseable (None) base with additions is treated as zero.
    """
    addition = 0
    final_set: int | None = None
    for modifier in modifiers:
        operation = modifier.operation or ModifierOperation.ADD
        value = int(modifier.numeric_value)
        if operation == ModifierOperation.SET:
            final_set = value
        else:
            addition += value

    if final_set is not None:
        return final_set
    if base is not None:
        return base + addition
    if addition:
        return addition
    return None


def adjusted_stats(
    base_stats: Mapping[str, int],
    effects: Iterable[EffectLike],
    stat_names: tuple[str, ...] = STAT_NAMES,
) -> dict[str, dict[str, int]]:
    """Apply every effect modifier to the base characteristics.

    Modifiers are applied in effect order, one at a time, so a later ``set``
    overrides earlier additions on the same stat.

    Returns:
        ``{stat: {"base": int, "adjusted": int, "delta": int}}``
    """
    current = {stat: int(base_stats.get(stat, 0)) for stat in stat_names}
    for effect in effects:
        for modifier in effect.modifiers:
            stat = modifier.stat_name.lower()
            if stat not in current:
                continue
            result = apply_numeric_modifiers(current[stat], [modifier])
            if result is not None:
                current[stat] = result

    return {
        stat: {
            "base": int(base_stats.get(stat, 0)),
            "adjusted": current[stat],
            "delta": current[stat] - int(base_stats.get(stat, 0)),
        }
        for stat in stat_names
    }


def parse_profile_value(raw: str | None) -> tuple[int | None, str, str]:
    """Split a profile string into (number, sign prefix, suffix).

    Examples:
        >>> parse_profile_value("4+")
        (4, '', '+')
        >>> parse_profile_value("-1")
        (-1, '-', '')
        >>> parse_profile_value("S")
        (None, '', '')
    """
    if raw is None:
        return None, "", ""
    match = _PROFILE_VALUE.match(raw.strip())
    if match is None:
        return None, "", ""
    number = int(match.group("number"))
    sign = match.group("sign")
    if sign == "-":
        number = -number
    return number, sign, match.group("suffix") or ""


def format_profile_value(value: int, *, sign: str = "", suffix: str = "") -> str:
    if sign == "+" and value >= 0:
        return f"+{value}{suffix}"
    return f"{value}{suffix}"


def apply_trait_modifiers(traits: str | None, effects: Iterable[EffectLike]) -> str:
    """Add and remove weapon traits, keeping the original order stable."""
    current = [t.strip() for t in (traits or "").split(",") if t.strip()]
    for effect in effects:
        data = effect.type_specific_data or {}
        to_remove = data.get("traits_to_remove") or []
        to_add = data.get("traits_to_add") or []
        if to_remove:
            current = [trait for trait in current if trait not in to_remove]
        for trait in to_add:
            if trait not in current:
                current.append(trait)
    return ", ".join(current)


def apply_weapon_modifiers(
    profile: Mapping[str, Any], effects: list[EffectLike]
) -> dict[str, Any]:
    """Return a modified copy of a weapon profile dict."""
    modified = dict(profile)
    if not effects:
        return modified

    for field in WEAPON_NUMERIC_FIELDS:
        raw = modified.get(field)
        if raw is None:
            continue
        field_modifiers = [
            modifier
            for effect in effects
            for modifier in effect.modifiers
            if modifier.stat_name == field
        ]
        if not field_modifiers:
            continue
        number, sign, suffix = parse_profile_value(str(raw))
        result = apply_numeric_modifiers(number, field_modifiers)
        if result is None:
            continue
        if field == "ammo":
            suffix = "+"
        modified[field] = format_profile_value(result, sign=sign, suffix=suffix)

    modified["traits"] = apply_trait_modifiers(modified.get("traits"), effects)
    return modified
