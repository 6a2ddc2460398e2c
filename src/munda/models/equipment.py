"""Owned equipment model.

A FighterEquipment row is one item owned by a gang. It is carried by a
fighter, mounted on a vehicle, or held in the gang stash.
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from munda.domain import effects

from .base import Base, TimestampCreatedMixin
from .catalog import profile_fields

if TYPE_CHECKING:
    from .catalog import Equipment
    from .custom import CustomEquipment
    from .effect import FighterEffect
    from .fighter import Fighter, FighterExoticBeast
    from .gang import Gang
    from .vehicle import Vehicle


class FighterEquipment(Base, TimestampCreatedMixin):
    """An equipment item owned by a gang.

    Attributes:
        id: Primary key
        gang_id: Owning gang
        fighter_id: Carrying fighter (None when stashed or vehicle-mounted)
        vehicle_id: Vehicle the item is mounted on
        equipment_id: Catalog equipment (exclusive with custom_equipment_id)
        custom_equipment_id: Custom equipment
        purchase_cost: Value counted toward rating/wealth
        original_cost: Catalog cost at the time of purchase
        is_master_crafted: Master-crafted weapons cost 25% more (rounded up to 5)
        gang_stash: True while the item sits in the gang stash
        user_id: Profile that bought the item
    """

    __tablename__ = "fighter_equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False
    )
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=True
    )
    vehicle_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=True
    )
    equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("equipment.id"), nullable=True
    )
    custom_equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("custom_equipment.id", ondelete="CASCADE"), nullable=True
    )
    purchase_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    original_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_master_crafted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gang_stash: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=True)

    # Relationships
    gang: Mapped["Gang"] = relationship("Gang", back_populates="equipment")
    fighter: Mapped[Optional["Fighter"]] = relationship(
        "Fighter", back_populates="equipment", foreign_keys=[fighter_id]
    )
    vehicle: Mapped[Optional["Vehicle"]] = relationship("Vehicle", back_populates="equipment")
    equipment: Mapped[Optional["Equipment"]] = relationship("Equipment")
    custom_equipment: Mapped[Optional["CustomEquipment"]] = relationship("CustomEquipment")
    effects: Mapped[list["FighterEffect"]] = relationship(
        "FighterEffect", back_populates="fighter_equipment", cascade="all, delete-orphan"
    )
    beast_links: Mapped[list["FighterExoticBeast"]] = relationship(
        "FighterExoticBeast",
        back_populates="fighter_equipment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "(equipment_id IS NULL) != (custom_equipment_id IS NULL)",
            name="check_fighter_equipment_source",
        ),
        CheckConstraint("purchase_cost >= 0", name="check_fighter_equipment_purchase_cost"),
        Index("idx_fighter_equipment_fighter", "fighter_id"),
        Index("idx_fighter_equipment_vehicle", "vehicle_id"),
        Index("idx_fighter_equipment_gang_stash", "gang_id", "gang_stash"),
    )

    @property
    def name(self) -> str:
        if self.equipment is not None:
            return self.equipment.equipment_name
        if self.custom_equipment is not None:
            return self.custom_equipment.equipment_name
        return "Unknown equipment"

    @property
    def equipment_type(self) -> str | None:
        if self.equipment is not None:
            return self.equipment.equipment_type
        if self.custom_equipment is not None:
            return self.custom_equipment.equipment_type
        return None

    @property
    def weapon_profiles(self) -> list[dict[str, Any]]:
        """Catalog weapon profiles with this item's upgrade effects applied."""
        if self.equipment is None:
            return []
        return [
            effects.apply_weapon_modifiers(profile_fields(profile), list(self.effects))
            for profile in self.equipment.weapon_profiles
        ]

    def __repr__(self) -> str:
        return (
            f"<FighterEquipment(id={self.id}, gang_id={self.gang_id}, "
            f"fighter_id={self.fighter_id}, vehicle_id={self.vehicle_id})>"
        )
