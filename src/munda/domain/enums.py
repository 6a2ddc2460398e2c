"""Enumerations used across the Munda Manager domain."""

from __future__ import annotations

from enum import StrEnum


class Alignment(StrEnum):
    """Gang alignment."""

    LAW_ABIDING = "Law Abiding"
    OUTLAW = "Outlaw"


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class FighterAction(StrEnum):
    """Status actions that can be applied to a fighter."""

    KILL = "kill"
    RETIRE = "retire"
    SELL = "sell"
    RESCUE = "rescue"
    STARVE = "starve"
    RECOVER = "recover"
    CAPTURE = "capture"
    DELETE = "delete"


class BalanceOperation(StrEnum):
    """How a manual credits/reputation edit is applied."""

    ADD = "add"
    SUBTRACT = "subtract"


class ModifierOperation(StrEnum):
    ADD = "add"
    SET = "set"


class EffectCategory(StrEnum):
    """Effect categories seeded into ``fighter_effect_categories``."""

    INJURIES = "injuries"
    ADVANCEMENTS = "advancements"
    USER = "user"
    EQUIPMENT = "equipment"
    VEHICLE_DAMAGE = "vehicle_damage"
    HARDPOINT = "hardpoint"


class HardpointOperator(StrEnum):
    CREW = "crew"
    PASSENGER = "passenger"


class AdvancementType(StrEnum):
    CHARACTERISTIC = "characteristic"
    SKILL = "skill"


class EquipmentType(StrEnum):
    WEAPON = "weapon"
    WARGEAR = "wargear"
    VEHICLE_UPGRADE = "vehicle_upgrade"


class CampaignRole(StrEnum):
    """Roles a user can hold inside a campaign."""

    OWNER = "OWNER"
    ARBITRATOR = "ARBITRATOR"
    MEMBER = "MEMBER"


class CampaignGangStatus(StrEnum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"


class BattleResult(StrEnum):
    WON = "won"
    LOST = "lost"
    DRAW = "draw"


class GangLogAction(StrEnum):
    """Action types recorded in ``gang_logs``."""

    GANG_CREATED = "gang_created"
    GANG_COPIED = "gang_copied"
    CREDITS_CHANGED = "credits_changed"
    REPUTATION_CHANGED = "reputation_changed"
    ALIGNMENT_CHANGED = "alignment_changed"
    RATING_RECALCULATED = "rating_recalculated"
    FIGHTER_ADDED = "fighter_added"
    FIGHTER_COPIED = "fighter_copied"
    FIGHTER_REMOVED = "fighter_removed"
    FIGHTER_KILLED = "fighter_killed"
    FIGHTER_RESURRECTED = "fighter_resurrected"
    FIGHTER_RETIRED = "fighter_retired"
    FIGHTER_UNRETIRED = "fighter_unretired"
    FIGHTER_ENSLAVED = "fighter_enslaved"
    FIGHTER_RESCUED = "fighter_rescued"
    FIGHTER_STARVED = "fighter_starved"
    FIGHTER_FED = "fighter_fed"
    FIGHTER_RECOVERY_STARTED = "fighter_recovery_started"
    FIGHTER_RECOVERED = "fighter_recovered"
    FIGHTER_CAPTURED = "fighter_captured"
    FIGHTER_RELEASED = "fighter_released"
    FIGHTER_XP_CHANGED = "fighter_xp_changed"
    FIGHTER_COST_ADJUSTED = "fighter_cost_adjusted"
    FIGHTER_ADVANCEMENT_ADDED = "fighter_advancement_added"
    FIGHTER_ADVANCEMENT_REMOVED = "fighter_advancement_removed"
    FIGHTER_INJURED = "fighter_injured"
    FIGHTER_INJURY_REMOVED = "fighter_injury_removed"
    EQUIPMENT_PURCHASED = "equipment_purchased"
    EQUIPMENT_SOLD = "equipment_sold"
    EQUIPMENT_DELETED = "equipment_deleted"
    EQUIPMENT_MOVED_TO_STASH = "equipment_moved_to_stash"
    EQUIPMENT_MOVED_FROM_STASH = "equipment_moved_from_stash"
    EQUIPMENT_UPGRADE_ADDED = "equipment_upgrade_added"
    EQUIPMENT_UPGRADE_REMOVED = "equipment_upgrade_removed"
    VEHICLE_ADDED = "vehicle_added"
    VEHICLE_ASSIGNED = "vehicle_assigned"
    VEHICLE_UNASSIGNED = "vehicle_unassigned"
    VEHICLE_SOLD = "vehicle_sold"
    VEHICLE_REMOVED = "vehicle_removed"
    VEHICLE_DAMAGE_ADDED = "vehicle_damage_added"
    VEHICLE_DAMAGE_REMOVED = "vehicle_damage_removed"
    VEHICLE_HARDPOINT_UPDATED = "vehicle_hardpoint_updated"
    BATTLE_RESULT = "battle_result"
