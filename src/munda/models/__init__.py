"""SQLAlchemy models for Munda Manager.

This module exports all database models and provides access to the
declarative base and seed data functions.
"""

# Base classes
from .base import Base, TimestampCreatedMixin, TimestampMixin, utc_now

# Campaign models
from .campaign import (
    Campaign,
    CampaignBattle,
    CampaignGang,
    CampaignGangResource,
    CampaignMember,
    CampaignResource,
    CampaignTerritory,
)

# Catalog models
from .catalog import (
    CampaignType,
    Equipment,
    EquipmentDiscount,
    ExoticBeastGrant,
    FighterDefault,
    FighterEffectCategory,
    FighterEffectType,
    FighterEffectTypeModifier,
    FighterType,
    FighterTypeGangCost,
    GangType,
    Skill,
    Territory,
    VehicleType,
    WeaponProfile,
)

# Custom catalog models
from .custom import CustomEquipment, CustomFighterType, CustomSkill, CustomTerritory

# Effect models
from .effect import FighterEffect, FighterEffectModifier

# Owned equipment
from .equipment import FighterEquipment

# Fighter models
from .fighter import Fighter, FighterExoticBeast, FighterSkill

# Gang models
from .gang import Gang, GangLog

# Seed data functions
from .seed_data import seed_all_catalog_data

# Identity
from .user import Profile

# Vehicles
from .vehicle import Vehicle

__all__ = [
    "Base",
    "Campaign",
    "CampaignBattle",
    "CampaignGang",
    "CampaignGangResource",
    "CampaignMember",
    "CampaignResource",
    "CampaignTerritory",
    "CampaignType",
    "CustomEquipment",
    "CustomFighterType",
    "CustomSkill",
    "CustomTerritory",
    "Equipment",
    "EquipmentDiscount",
    "ExoticBeastGrant",
    "Fighter",
    "FighterDefault",
    "FighterEffect",
    "FighterEffectCategory",
    "FighterEffectModifier",
    "FighterEffectType",
    "FighterEffectTypeModifier",
    "FighterEquipment",
    "FighterExoticBeast",
    "FighterSkill",
    "FighterType",
    "FighterTypeGangCost",
    "Gang",
    "GangLog",
    "GangType",
    "Profile",
    "Skill",
    "Territory",
    "TimestampCreatedMixin",
    "TimestampMixin",
    "Vehicle",
    "VehicleType",
    "WeaponProfile",
    "seed_all_catalog_data",
    "utc_now",
]
