"""Declarative rule constants for gang economics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EconomyRules:
    """Credits and pricing constants."""

    starting_credits: int = 1000
    starting_reputation: int = 1
    master_crafted_multiplier: float = 1.25
    master_crafted_rounding: int = 5
    stash_minimum_sell_value: int = 5


@dataclass(frozen=True, slots=True)
class FighterRules:
    """Fighter bookkeeping constants."""

    exotic_beast_class: str = "exotic beast"
    meat_per_feeding: int = 1
    copy_suffix: str = " (Copy)"


@dataclass(frozen=True, slots=True)
class VehicleRules:
    """Hardpoint arcs and their pricing."""

    hardpoint_arcs: tuple[str, ...] = ("Front", "Left", "Right", "Rear")
    hardpoint_arc_cost: int = 15


@dataclass(frozen=True, slots=True)
class RulesConfig:
    economy: EconomyRules = EconomyRules()
    fighters: FighterRules = FighterRules()
    vehicles: VehicleRules = VehicleRules()


DEFAULT_RULES = RulesConfig()
