"""Fighter models for Munda Manager.

This module contains models for:
- Fighters (individual gang members, including exotic beasts)
- FighterSkills (skills a fighter has learnt, advanced or granted)
- FighterExoticBeasts (ownership links between a fighter and its beasts)
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from munda.domain import costs, effects

from .base import Base, CharacteristicsMixin, TimestampCreatedMixin, TimestampMixin

if TYPE_CHECKING:
    from .catalog import FighterType, Skill
    from .custom import CustomFighterType
    from .effect import FighterEffect
    from .equipment import FighterEquipment
    from .gang import Gang
    from .vehicle import Vehicle


class Fighter(Base, TimestampMixin, CharacteristicsMixin):
    """Represents a fighter in a gang.

    Characteristic columns hold the base profile copied from the fighter type;
    injuries, advancements and user tweaks are stored as effects and applied
    on read.

    Attributes:
        id: Primary key
        gang_id: Foreign key to the gang
        user_id: Owning profile
        fighter_name: Fighter name
        label: Short label shown on the card
        fighter_type: Fighter type name copied at hire
        fighter_type_id: Catalog fighter type (if hired from the catalog)
        custom_fighter_type_id: Custom fighter type (if hired from a custom type)
        fighter_class: Leader, Champion, Ganger, exotic beast, ...
        credits: Base value of the fighter (hire cost used for rating)
        cost_adjustment: Manual adjustment added to the total cost
        xp: Unspent experience
        kills: Enemy fighters taken out of action
        special_rules: List of special rule names
        free_skill: Whether the fighter still has a free skill pick
        killed / retired / enslaved / captured: Exclusive statuses that remove
            the fighter from the gang rating
        starved / recovery: Statuses that keep the fighter in the rating
        position: Display order within the gang
    """

    __tablename__ = "fighters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False)
    fighter_name: Mapped[str] = mapped_column(String, nullable=False)
    label: Mapped[str | None] = mapped_column(String, nullable=True)
    fighter_type: Mapped[str] = mapped_column(String, nullable=False)
    fighter_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_types.id"), nullable=True
    )
    custom_fighter_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("custom_fighter_types.id", ondelete="SET NULL"), nullable=True
    )
    fighter_class: Mapped[str] = mapped_column(String, nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_adjustment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_rules: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    free_skill: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Status flags
    killed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    retired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    enslaved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    starved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recovery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    captured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    note_backstory: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    gang: Mapped["Gang"] = relationship("Gang", back_populates="fighters")
    fighter_type_ref: Mapped[Optional["FighterType"]] = relationship("FighterType")
    custom_fighter_type: Mapped[Optional["CustomFighterType"]] = relationship(
        "CustomFighterType"
    )
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment",
        back_populates="fighter",
        cascade="all",
        foreign_keys="FighterEquipment.fighter_id",
    )
    skills: Mapped[list["FighterSkill"]] = relationship(
        "FighterSkill", back_populates="fighter", cascade="all, delete-orphan"
    )
    effects: Mapped[list["FighterEffect"]] = relationship(
        "FighterEffect",
        back_populates="fighter",
        cascade="all, delete-orphan",
        foreign_keys="FighterEffect.fighter_id",
    )
    vehicles: Mapped[list["Vehicle"]] = relationship("Vehicle", back_populates="fighter")
    owned_beasts: Mapped[list["FighterExoticBeast"]] = relationship(
        "FighterExoticBeast",
        back_populates="owner",
        cascade="all, delete-orphan",
        foreign_keys="FighterExoticBeast.fighter_owner_id",
        passive_deletes=True,
    )
    beast_ownership: Mapped[Optional["FighterExoticBeast"]] = relationship(
        "FighterExoticBeast",
        back_populates="pet",
        cascade="all, delete-orphan",
        foreign_keys="FighterExoticBeast.fighter_pet_id",
        passive_deletes=True,
        uselist=False,
    )

    __table_args__ = (
        CheckConstraint("xp >= 0", name="check_fighter_xp"),
        CheckConstraint("kills >= 0", name="check_fighter_kills"),
        CheckConstraint("credits >= 0", name="check_fighter_credits"),
        Index("idx_fighters_gang", "gang_id"),
    )

    @property
    def is_owned_beast(self) -> bool:
        return self.beast_ownership is not None

    @property
    def owner_id(self) -> int | None:
        return self.beast_ownership.fighter_owner_id if self.beast_ownership else None

    @property
    def total_cost(self) -> int:
        return costs.fighter_total_cost(self)

    @property
    def adjusted_characteristics(self) -> dict[str, dict[str, int]]:
        base = {stat: getattr(self, stat) for stat in effects.STAT_NAMES}
        own = [effect for effect in self.effects if effect.fighter_equipment_id is None]
        return effects.adjusted_stats(base, own)

    def __repr__(self) -> str:
        return f"<Fighter(id={self.id}, name='{self.fighter_name}', gang_id={self.gang_id})>"


class FighterSkill(Base, TimestampCreatedMixin):
    """A skill held by a fighter.

    Attributes:
        id: Primary key
        fighter_id: Fighter holding the skill
        skill_id: Catalog skill
        credits_increase: Credits added to the fighter's cost
        xp_cost: XP spent acquiring the skill (refunded when removed)
        is_advance: True when bought with XP rather than granted
        fighter_effect_id: Effect (e.g. an injury) that granted the skill
    """

    __tablename__ = "fighter_skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False
    )
    skill_id: Mapped[int] = mapped_column(Integer, ForeignKey("skills.id"), nullable=False)
    credits_increase: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_advance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fighter_effect_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_effects.id", ondelete="SET NULL"), nullable=True
    )

    fighter: Mapped["Fighter"] = relationship("Fighter", back_populates="skills")
    skill: Mapped["Skill"] = relationship("Skill")

    __table_args__ = (
        UniqueConstraint("fighter_id", "skill_id", name="uq_fighter_skill"),
        CheckConstraint("xp_cost >= 0", name="check_fighter_skill_xp_cost"),
    )

    def __repr__(self) -> str:
        return f"<FighterSkill(id={self.id}, fighter_id={self.fighter_id}, skill_id={self.skill_id})>"


class FighterExoticBeast(Base, TimestampCreatedMixin):
    """Ownership link between a fighter and an exotic beast fighter.

    Deleting the owner or the granting equipment removes the link; the
    service layer removes the beast fighter alongside it.
    """

    __tablename__ = "fighter_exotic_beasts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False
    )
    fighter_pet_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    fighter_equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_equipment.id", ondelete="CASCADE"), nullable=True
    )

    owner: Mapped["Fighter"] = relationship(
        "Fighter", back_populates="owned_beasts", foreign_keys=[fighter_owner_id]
    )
    pet: Mapped["Fighter"] = relationship(
        "Fighter", back_populates="beast_ownership", foreign_keys=[fighter_pet_id]
    )
    fighter_equipment: Mapped[Optional["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="beast_links"
    )

    __table_args__ = (
        CheckConstraint("fighter_owner_id != fighter_pet_id", name="check_beast_not_self"),
    )
