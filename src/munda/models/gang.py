"""Gang and gang log models.

This module contains models for:
- Gangs (a player's collection of fighters, with credits, rating and wealth)
- GangLogs (the audit trail of every mutation applied to a gang)
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from munda.domain import costs

from .base import Base, TimestampCreatedMixin, TimestampMixin

if TYPE_CHECKING:
    from .campaign import CampaignGang, CampaignTerritory
    from .catalog import GangType
    from .equipment import FighterEquipment
    from .fighter import Fighter
    from .user import Profile
    from .vehicle import Vehicle

ALIGNMENTS = ("Law Abiding", "Outlaw")


class Gang(Base, TimestampMixin):
    """Represents a gang owned by a user.

    Rating and wealth are stored denormalised and maintained by signed deltas
    on every mutation; ``munda.domain.costs`` can recompute both from scratch.

    Attributes:
        id: Primary key
        user_id: Owning profile
        name: Gang name
        gang_type_id: Foreign key to the gang type
        gang_type: Gang type name copied at creation
        alignment: "Law Abiding" or "Outlaw"
        alliance_id: Optional alliance identifier
        credits: Unspent credits
        reputation: Gang reputation
        rating: Sum of the total cost of fighters that count toward rating
        wealth: rating + credits + stash value + unassigned vehicle value
        meat: Meat stockpile (campaign resource used to feed fighters)
        scavenging_rolls: Scavenging rolls banked
        exploration_points: Exploration points banked
        gang_colour: Display colour
        note: Free text
        gang_variants: List of gang variant names
    """

    __tablename__ = "gangs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    gang_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("gang_types.id"), nullable=False)
    gang_type: Mapped[str] = mapped_column(String, nullable=False)
    alignment: Mapped[str] = mapped_column(String, nullable=False, default="Law Abiding")
    alliance_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    reputation: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wealth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    meat: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    scavenging_rolls: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exploration_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gang_colour: Mapped[str | None] = mapped_column(String, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    gang_variants: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    owner: Mapped["Profile"] = relationship("Profile")
    gang_type_ref: Mapped["GangType"] = relationship("GangType")
    fighters: Mapped[list["Fighter"]] = relationship(
        "Fighter",
        back_populates="gang",
        cascade="all, delete-orphan",
        order_by="Fighter.position",
    )
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="gang", cascade="all, delete-orphan"
    )
    vehicles: Mapped[list["Vehicle"]] = relationship(
        "Vehicle", back_populates="gang", cascade="all, delete-orphan"
    )
    logs: Mapped[list["GangLog"]] = relationship(
        "GangLog", back_populates="gang", cascade="all, delete-orphan", passive_deletes=True
    )
    campaign_gangs: Mapped[list["CampaignGang"]] = relationship(
        "CampaignGang", back_populates="gang", cascade="all, delete-orphan"
    )
    held_territories: Mapped[list["CampaignTerritory"]] = relationship(
        "CampaignTerritory", back_populates="gang"
    )

    __table_args__ = (
        CheckConstraint("alignment IN ('Law Abiding', 'Outlaw')", name="check_gang_alignment"),
        CheckConstraint("rating >= 0", name="check_gang_rating"),
        CheckConstraint("meat >= 0", name="check_gang_meat"),
        Index("idx_gangs_user", "user_id"),
    )

    @property
    def stash(self) -> list["FighterEquipment"]:
        """Equipment rows held in the gang stash."""
        return [item for item in self.equipment if item.gang_stash]

    @property
    def computed_rating(self) -> int:
        return costs.gang_rating(self)

    @property
    def computed_wealth(self) -> int:
        return costs.gang_wealth(self)

    def __repr__(self) -> str:
        return f"<Gang(id={self.id}, name='{self.name}', rating={self.rating})>"


class GangLog(Base, TimestampCreatedMixin):
    """Audit entry describing a change to a gang.

    Attributes:
        id: Primary key
        gang_id: Gang the entry belongs to
        user_id: Profile that performed the action
        action_type: Machine-readable action ("fighter_added", "equipment_sold", ...)
        description: Human-readable summary
        fighter_id: Fighter involved (nulled if the fighter is deleted)
        vehicle_id: Vehicle involved (nulled if the vehicle is deleted)
    """

    __tablename__ = "gang_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    action_type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="SET NULL"), nullable=True
    )
    vehicle_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True
    )

    gang: Mapped["Gang"] = relationship("Gang", back_populates="logs")
    user: Mapped[Optional["Profile"]] = relationship("Profile")

    __table_args__ = (
        Index("idx_gang_logs_gang_created", "gang_id", "created_at"),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "gang_id": self.gang_id,
            "user_id": self.user_id,
            "action_type": self.action_type,
            "description": self.description,
            "fighter_id": self.fighter_id,
            "vehicle_id": self.vehicle_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<GangLog(id={self.id}, gang_id={self.gang_id}, action='{self.action_type}')>"
