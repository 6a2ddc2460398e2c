"""Gang vehicle model."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from munda.domain import costs, effects

from .base import Base, TimestampMixin, VehicleStatsMixin

if TYPE_CHECKING:
    from .catalog import VehicleType
    from .effect import FighterEffect
    from .equipment import FighterEquipment
    from .fighter import Fighter
    from .gang import Gang


class Vehicle(Base, TimestampMixin, VehicleStatsMixin):
    """A vehicle owned by a gang, optionally crewed by one fighter.

    An unassigned vehicle contributes its value to gang wealth; a crewed one
    rolls into the crew's total cost.

    Attributes:
        id: Primary key
        gang_id: Owning gang
        fighter_id: Crew (None while unassigned)
        vehicle_type_id: Catalog vehicle type
        vehicle_name: Display name
        vehicle_type: Vehicle type name copied at purchase
        cost: Base value of the vehicle
        body_slots_occupied / drive_slots_occupied / engine_slots_occupied:
            Upgrade slots in use
        special_rules: List of special rule names
    """

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False
    )
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="SET NULL"), nullable=True
    )
    vehicle_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicle_types.id"), nullable=True
    )
    vehicle_name: Mapped[str] = mapped_column(String, nullable=False)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    body_slots_occupied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    drive_slots_occupied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    engine_slots_occupied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_rules: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    gang: Mapped["Gang"] = relationship("Gang", back_populates="vehicles")
    fighter: Mapped[Optional["Fighter"]] = relationship("Fighter", back_populates="vehicles")
    vehicle_type_ref: Mapped[Optional["VehicleType"]] = relationship("VehicleType")
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="vehicle", cascade="all"
    )
    effects: Mapped[list["FighterEffect"]] = relationship(
        "FighterEffect", back_populates="vehicle", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("cost >= 0", name="check_vehicle_cost"),
        Index("idx_vehicles_gang", "gang_id"),
        Index("idx_vehicles_fighter", "fighter_id"),
    )

    @property
    def total_cost(self) -> int:
        return costs.vehicle_total_cost(self)

    @property
    def adjusted_characteristics(self) -> dict[str, dict[str, int]]:
        base = {stat: getattr(self, stat) for stat in effects.VEHICLE_STAT_NAMES}
        return effects.adjusted_stats(base, self.effects, effects.VEHICLE_STAT_NAMES)

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, name='{self.vehicle_name}', fighter_id={self.fighter_id})>"
