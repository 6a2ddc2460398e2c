"""Reference catalog models.

This module contains the read-mostly tables that describe what can exist in
a gang:
- GangTypes and FighterTypes (with per-gang-type price overrides and defaults)
- Skills
- Equipment, WeaponProfiles, discounts and exotic beast grants
- Effect categories, effect types and their modifiers
- VehicleTypes
- CampaignTypes and Territories
"""

from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CharacteristicsMixin, VehicleStatsMixin

EQUIPMENT_TYPES = ("weapon", "wargear", "vehicle_upgrade")


class GangType(Base):
    """A playable gang type (House Goliath, Ash Wastes Nomads, ...).

    Attributes:
        id: Primary key
        gang_type: Display name
        alignment: Default alignment for new gangs of this type
    """

    __tablename__ = "gang_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_type: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    alignment: Mapped[str] = mapped_column(String, nullable=False, default="Law Abiding")

    def __repr__(self) -> str:
        return f"<GangType(id={self.id}, gang_type='{self.gang_type}')>"


class FighterType(Base, CharacteristicsMixin):
    """A catalog fighter type with its base cost and characteristics.

    Attributes:
        id: Primary key
        fighter_type: Display name
        gang_type_id: Gang type that may hire this fighter (None for generic types)
        fighter_class: Leader, Champion, Ganger, Juve, Exotic Beast, ...
        cost: Base hiring cost in credits
        special_rules: List of special rule names
        free_skill: Whether the fighter starts with a free skill pick
    """

    __tablename__ = "fighter_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_type: Mapped[str] = mapped_column(String, nullable=False)
    gang_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gang_types.id"), nullable=True
    )
    fighter_class: Mapped[str] = mapped_column(String, nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_rules: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    free_skill: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    gang_type: Mapped[Optional["GangType"]] = relationship("GangType")
    gang_costs: Mapped[list["FighterTypeGangCost"]] = relationship(
        "FighterTypeGangCost", back_populates="fighter_type", cascade="all, delete-orphan"
    )
    defaults: Mapped[list["FighterDefault"]] = relationship(
        "FighterDefault",
        back_populates="fighter_type",
        cascade="all, delete-orphan",
        foreign_keys="FighterDefault.fighter_type_id",
    )

    __table_args__ = (
        CheckConstraint("cost >= 0", name="check_fighter_type_cost"),
        Index("idx_fighter_types_gang_type", "gang_type_id"),
    )

    def __repr__(self) -> str:
        return f"<FighterType(id={self.id}, fighter_type='{self.fighter_type}', cost={self.cost})>"


class FighterTypeGangCost(Base):
    """Per-gang-type price override for a fighter type."""

    __tablename__ = "fighter_type_gang_costs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_types.id", ondelete="CASCADE"), nullable=False
    )
    gang_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gang_types.id", ondelete="CASCADE"), nullable=False
    )
    adjusted_cost: Mapped[int] = mapped_column(Integer, nullable=False)

    fighter_type: Mapped["FighterType"] = relationship("FighterType", back_populates="gang_costs")

    __table_args__ = (
        UniqueConstraint("fighter_type_id", "gang_type_id", name="uq_fighter_type_gang_cost"),
    )


class FighterDefault(Base):
    """Default equipment or skill granted to a fighter type on hire.

    Exactly one of equipment_id / skill_id is set, and exactly one of
    fighter_type_id / custom_fighter_type_id.
    """

    __tablename__ = "fighter_defaults"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_types.id", ondelete="CASCADE"), nullable=True
    )
    custom_fighter_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("custom_fighter_types.id", ondelete="CASCADE"), nullable=True
    )
    equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=True
    )
    skill_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=True
    )

    fighter_type: Mapped[Optional["FighterType"]] = relationship(
        "FighterType", back_populates="defaults", foreign_keys=[fighter_type_id]
    )
    equipment: Mapped[Optional["Equipment"]] = relationship("Equipment")
    skill: Mapped[Optional["Skill"]] = relationship("Skill")

    __table_args__ = (
        CheckConstraint(
            "(equipment_id IS NULL) != (skill_id IS NULL)", name="check_default_target"
        ),
        CheckConstraint(
            "(fighter_type_id IS NULL) != (custom_fighter_type_id IS NULL)",
            name="check_default_owner",
        ),
    )


class Skill(Base):
    """A skill that fighters can learn."""

    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    skill_type: Mapped[str] = mapped_column(String, nullable=False)

    def __repr__(self) -> str:
        return f"<Skill(id={self.id}, name='{self.name}')>"


class Equipment(Base):
    """A catalog item: weapon, wargear or vehicle upgrade.

    Attributes:
        id: Primary key
        equipment_name: Display name
        equipment_type: weapon / wargear / vehicle_upgrade
        equipment_category: Grouping used by the trading post (Basic Weapons, Armour, ...)
        cost: Base trading post cost
    """

    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    equipment_name: Mapped[str] = mapped_column(String, nullable=False)
    equipment_type: Mapped[str] = mapped_column(String, nullable=False)
    equipment_category: Mapped[str | None] = mapped_column(String, nullable=True)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    weapon_profiles: Mapped[list["WeaponProfile"]] = relationship(
        "WeaponProfile",
        back_populates="weapon",
        cascade="all, delete-orphan",
        order_by="WeaponProfile.sort_order",
    )
    discounts: Mapped[list["EquipmentDiscount"]] = relationship(
        "EquipmentDiscount", back_populates="equipment", cascade="all, delete-orphan"
    )
    beast_grants: Mapped[list["ExoticBeastGrant"]] = relationship(
        "ExoticBeastGrant", back_populates="equipment", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "equipment_type IN ('weapon', 'wargear', 'vehicle_upgrade')",
            name="check_equipment_type",
        ),
        CheckConstraint("cost >= 0", name="check_equipment_cost"),
    )

    def __repr__(self) -> str:
        return f"<Equipment(id={self.id}, name='{self.equipment_name}', cost={self.cost})>"


WEAPON_PROFILE_FIELDS = (
    "profile_name",
    "range_short",
    "range_long",
    "acc_short",
    "acc_long",
    "strength",
    "ap",
    "damage",
    "ammo",
    "traits",
)


def profile_fields(profile: "WeaponProfile") -> dict[str, Any]:
    return {field: getattr(profile, field) for field in WEAPON_PROFILE_FIELDS}


class WeaponProfile(Base):
    """One firing/fighting profile of a weapon.

    Range and accuracy are stored as the strings printed on the card
    ("12\"", "+1", "-") so suffixes survive modification.
    """

    __tablename__ = "weapon_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    weapon_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False
    )
    profile_name: Mapped[str | None] = mapped_column(String, nullable=True)
    range_short: Mapped[str | None] = mapped_column(String, nullable=True)
    range_long: Mapped[str | None] = mapped_column(String, nullable=True)
    acc_short: Mapped[str | None] = mapped_column(String, nullable=True)
    acc_long: Mapped[str | None] = mapped_column(String, nullable=True)
    strength: Mapped[str | None] = mapped_column(String, nullable=True)
    ap: Mapped[str | None] = mapped_column(String, nullable=True)
    damage: Mapped[str | None] = mapped_column(String, nullable=True)
    ammo: Mapped[str | None] = mapped_column(String, nullable=True)
    traits: Mapped[str | None] = mapped_column(String, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    weapon: Mapped["Equipment"] = relationship("Equipment", back_populates="weapon_profiles")


class EquipmentDiscount(Base):
    """Trading post price override for a gang type or a fighter type."""

    __tablename__ = "equipment_discounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    equipment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False
    )
    gang_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gang_types.id", ondelete="CASCADE"), nullable=True
    )
    fighter_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_types.id", ondelete="CASCADE"), nullable=True
    )
    adjusted_cost: Mapped[int] = mapped_column(Integer, nullable=False)

    equipment: Mapped["Equipment"] = relationship("Equipment", back_populates="discounts")

    __table_args__ = (
        CheckConstraint(
            "gang_type_id IS NOT NULL OR fighter_type_id IS NOT NULL",
            name="check_discount_scope",
        ),
        Index("idx_equipment_discounts_equipment", "equipment_id"),
    )


class ExoticBeastGrant(Base):
    """Equipment that grants an exotic beast fighter when purchased."""

    __tablename__ = "exotic_beast_grants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    equipment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False
    )
    fighter_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_types.id", ondelete="CASCADE"), nullable=False
    )

    equipment: Mapped["Equipment"] = relationship("Equipment", back_populates="beast_grants")
    fighter_type: Mapped["FighterType"] = relationship("FighterType")


class FighterEffectCategory(Base):
    """Grouping of effect types (injuries, advancements, user, ...)."""

    __tablename__ = "fighter_effect_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_name: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    effect_types: Mapped[list["FighterEffectType"]] = relationship(
        "FighterEffectType", back_populates="category"
    )


class FighterEffectType(Base):
    """Template for a fighter or vehicle effect.

    Attributes:
        id: Primary key
        effect_name: Display name ("Eye Injury", "Weapon Skill", ...)
        category_id: Foreign key to the effect category
        equipment_id: Equipment this upgrade applies to (equipment effects only)
        type_specific_data: Free-form JSON, e.g. credits_increase, xp_cost,
            recovery, traits_to_add, traits_to_remove
    """

    __tablename__ = "fighter_effect_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    effect_name: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_effect_categories.id"), nullable=False
    )
    equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=True
    )
    type_specific_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    category: Mapped["FighterEffectCategory"] = relationship(
        "FighterEffectCategory", back_populates="effect_types"
    )
    modifiers: Mapped[list["FighterEffectTypeModifier"]] = relationship(
        "FighterEffectTypeModifier", back_populates="effect_type", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_effect_types_category", "category_id"),)

    def __repr__(self) -> str:
        return f"<FighterEffectType(id={self.id}, effect_name='{self.effect_name}')>"


class FighterEffectTypeModifier(Base):
    """Default stat modifier carried by an effect type."""

    __tablename__ = "fighter_effect_type_modifiers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_effect_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_effect_types.id", ondelete="CASCADE"), nullable=False
    )
    stat_name: Mapped[str] = mapped_column(String, nullable=False)
    default_numeric_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    operation: Mapped[str] = mapped_column(String, nullable=False, default="add")

    effect_type: Mapped["FighterEffectType"] = relationship(
        "FighterEffectType", back_populates="modifiers"
    )

    __table_args__ = (
        CheckConstraint("operation IN ('add', 'set')", name="check_type_modifier_operation"),
    )


class VehicleType(Base, VehicleStatsMixin):
    """A catalog vehicle type."""

    __tablename__ = "vehicle_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False)
    gang_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gang_types.id"), nullable=True
    )
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_rules: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    # [{"operated_by": "crew" | "passenger", "arcs": [...], "location": str}]
    hardpoints: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (CheckConstraint("cost >= 0", name="check_vehicle_type_cost"),)

    def __repr__(self) -> str:
        return f"<VehicleType(id={self.id}, vehicle_type='{self.vehicle_type}')>"


class CampaignType(Base):
    """A campaign ruleset (Dominion, Uprising, ...)."""

    __tablename__ = "campaign_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_type_name: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    territories: Mapped[list["Territory"]] = relationship(
        "Territory", back_populates="campaign_type"
    )


class Territory(Base):
    """A territory that campaigns can put into play."""

    __tablename__ = "territories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    territory_name: Mapped[str] = mapped_column(String, nullable=False)
    campaign_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("campaign_types.id"), nullable=True
    )

    campaign_type: Mapped[Optional["CampaignType"]] = relationship(
        "CampaignType", back_populates="territories"
    )
