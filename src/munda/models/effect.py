"""Fighter and vehicle effect models.

Effects are how injuries, characteristic advancements, user tweaks,
equipment upgrades and vehicle damage modify a profile. Each effect carries
zero or more stat modifiers and an optional ``credits_increase`` inside
``type_specific_data``.
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .catalog import FighterEffectType
    from .equipment import FighterEquipment
    from .fighter import Fighter
    from .vehicle import Vehicle


class FighterEffect(Base, TimestampMixin):
    """An effect applied to a fighter or a vehicle.

    Attributes:
        id: Primary key
        fighter_id: Affected fighter (exclusive with vehicle_id)
        vehicle_id: Affected vehicle
        fighter_effect_type_id: Template the effect was created from
        fighter_equipment_id: Equipment that carries this effect (upgrades);
            deleting the equipment deletes the effect
        effect_name: Display name
        type_specific_data: JSON payload (credits_increase, xp_cost,
            times_increased, traits_to_add, traits_to_remove, ...)
        user_id: Profile that applied the effect
    """

    __tablename__ = "fighter_effects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=True
    )
    vehicle_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=True
    )
    fighter_effect_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_effect_types.id", ondelete="SET NULL"), nullable=True
    )
    fighter_equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_equipment.id", ondelete="CASCADE"), nullable=True
    )
    effect_name: Mapped[str] = mapped_column(String, nullable=False)
    type_specific_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    user_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=True)

    # Relationships
    fighter: Mapped[Optional["Fighter"]] = relationship(
        "Fighter", back_populates="effects", foreign_keys=[fighter_id]
    )
    vehicle: Mapped[Optional["Vehicle"]] = relationship("Vehicle", back_populates="effects")
    effect_type: Mapped[Optional["FighterEffectType"]] = relationship("FighterEffectType")
    fighter_equipment: Mapped[Optional["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="effects"
    )
    modifiers: Mapped[list["FighterEffectModifier"]] = relationship(
        "FighterEffectModifier", back_populates="effect", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "fighter_id IS NOT NULL OR vehicle_id IS NOT NULL", name="check_effect_target"
        ),
        Index("idx_fighter_effects_fighter", "fighter_id"),
        Index("idx_fighter_effects_vehicle", "vehicle_id"),
    )

    @property
    def category_name(self) -> str | None:
        if self.effect_type is not None and self.effect_type.category is not None:
            return self.effect_type.category.category_name
        return (self.type_specific_data or {}).get("category")

    def __repr__(self) -> str:
        return f"<FighterEffect(id={self.id}, effect_name='{self.effect_name}')>"


class FighterEffectModifier(Base):
    """A single stat modifier carried by an effect."""

    __tablename__ = "fighter_effect_modifiers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_effect_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_effects.id", ondelete="CASCADE"), nullable=False
    )
    stat_name: Mapped[str] = mapped_column(String, nullable=False)
    numeric_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    operation: Mapped[str] = mapped_column(String, nullable=False, default="add")

    effect: Mapped["FighterEffect"] = relationship("FighterEffect", back_populates="modifiers")

    __table_args__ = (
        CheckConstraint("operation IN ('add', 'set')", name="check_modifier_operation"),
    )
