"""User-authored catalog entries.

Custom equipment, fighter types, skills and territories behave like their
catalog counterparts but are owned by (and only visible to) a single profile.
"""

from typing import Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CharacteristicsMixin, TimestampMixin
from .catalog import FighterDefault, GangType


class CustomEquipment(Base, TimestampMixin):
    """Equipment defined by a user.

    Attributes:
        id: Primary key
        user_id: Owning profile
        equipment_name: Display name
        equipment_type: weapon / wargear / vehicle_upgrade
        equipment_category: Free-form grouping
        cost: Trading post cost
    """

    __tablename__ = "custom_equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    equipment_name: Mapped[str] = mapped_column(String, nullable=False)
    equipment_type: Mapped[str] = mapped_column(String, nullable=False, default="wargear")
    equipment_category: Mapped[str | None] = mapped_column(String, nullable=True)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "equipment_type IN ('weapon', 'wargear', 'vehicle_upgrade')",
            name="check_custom_equipment_type",
        ),
        CheckConstraint("cost >= 0", name="check_custom_equipment_cost"),
        Index("idx_custom_equipment_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<CustomEquipment(id={self.id}, name='{self.equipment_name}')>"


class CustomFighterType(Base, TimestampMixin, CharacteristicsMixin):
    """Fighter type defined by a user."""

    __tablename__ = "custom_fighter_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    fighter_type: Mapped[str] = mapped_column(String, nullable=False)
    fighter_class: Mapped[str] = mapped_column(String, nullable=False, default="Ganger")
    gang_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gang_types.id"), nullable=True
    )
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_rules: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    free_skill: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    gang_type: Mapped[Optional["GangType"]] = relationship(GangType)
    defaults: Mapped[list["FighterDefault"]] = relationship(
        FighterDefault,
        cascade="all, delete-orphan",
        foreign_keys=[FighterDefault.custom_fighter_type_id],
    )

    __table_args__ = (
        CheckConstraint("cost >= 0", name="check_custom_fighter_type_cost"),
        Index("idx_custom_fighter_types_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<CustomFighterType(id={self.id}, fighter_type='{self.fighter_type}')>"


class CustomSkill(Base, TimestampMixin):
    """Skill defined by a user, filed under one of the skill sets."""

    __tablename__ = "custom_skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    skill_name: Mapped[str] = mapped_column(String, nullable=False)
    skill_type: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (Index("idx_custom_skills_user", "user_id"),)

    def __repr__(self) -> str:
        return f"<CustomSkill(id={self.id}, skill_name='{self.skill_name}')>"


class CustomTerritory(Base, TimestampMixin):
    """Territory defined by a user; custom territories have no campaign type."""

    __tablename__ = "custom_territories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    territory_name: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (Index("idx_custom_territories_user", "user_id"),)

    def __repr__(self) -> str:
        return f"<CustomTerritory(id={self.id}, territory_name='{self.territory_name}')>"
