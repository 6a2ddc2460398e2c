"""Campaign models for Munda Manager.

This module contains models for:
- Campaigns and their settings
- CampaignMembers (users taking part, with OWNER/ARBITRATOR/MEMBER roles)
- CampaignGangs (gangs entered into a campaign, pending or accepted)
- CampaignTerritories (territories in play and who holds them)
- CampaignResources and CampaignGangResources (custom resources and stockpiles)
- CampaignBattles (battle log entries)
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin, TimestampMixin, utc_now

if TYPE_CHECKING:
    from .catalog import CampaignType, Territory
    from .gang import Gang
    from .user import Profile

CAMPAIGN_ROLES = ("OWNER", "ARBITRATOR", "MEMBER")
CAMPAIGN_GANG_STATUSES = ("PENDING", "ACCEPTED")


class Campaign(Base, TimestampMixin):
    """A campaign that gangs play through together.

    Attributes:
        id: Primary key
        campaign_name: Display name
        campaign_type_id: Ruleset the campaign follows
        status: Free-form status, "Active" on creation
        description: Public description
        note: Arbitrator notes
        has_meat / has_exploration_points / has_scavenging_rolls: Which gang
            resources the campaign tracks
    """

    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_name: Mapped[str] = mapped_column(String, nullable=False)
    campaign_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("campaign_types.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="Active")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    has_meat: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_exploration_points: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_scavenging_rolls: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    campaign_type: Mapped[Optional["CampaignType"]] = relationship("CampaignType")
    members: Mapped[list["CampaignMember"]] = relationship(
        "CampaignMember", back_populates="campaign", cascade="all, delete-orphan"
    )
    gangs: Mapped[list["CampaignGang"]] = relationship(
        "CampaignGang", back_populates="campaign", cascade="all, delete-orphan"
    )
    territories: Mapped[list["CampaignTerritory"]] = relationship(
        "CampaignTerritory", back_populates="campaign", cascade="all, delete-orphan"
    )
    resources: Mapped[list["CampaignResource"]] = relationship(
        "CampaignResource", back_populates="campaign", cascade="all, delete-orphan"
    )
    battles: Mapped[list["CampaignBattle"]] = relationship(
        "CampaignBattle",
        back_populates="campaign",
        cascade="all, delete-orphan",
        order_by="CampaignBattle.created_at",
    )

    def __repr__(self) -> str:
        return f"<Campaign(id={self.id}, name='{self.campaign_name}', status='{self.status}')>"


class CampaignMember(Base):
    """A user taking part in a campaign."""

    __tablename__ = "campaign_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String, nullable=False, default="MEMBER")
    invited_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    invited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="members")
    user: Mapped["Profile"] = relationship("Profile", foreign_keys=[user_id])
    gangs: Mapped[list["CampaignGang"]] = relationship(
        "CampaignGang", back_populates="member", passive_deletes=True
    )

    __table_args__ = (
        UniqueConstraint("campaign_id", "user_id", name="uq_campaign_member"),
        CheckConstraint("role IN ('OWNER', 'ARBITRATOR', 'MEMBER')", name="check_member_role"),
    )


class CampaignGang(Base):
    """A gang entered into a campaign."""

    __tablename__ = "campaign_gangs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False)
    campaign_member_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("campaign_members.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")
    invited_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    invited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="gangs")
    gang: Mapped["Gang"] = relationship("Gang", back_populates="campaign_gangs")
    member: Mapped[Optional["CampaignMember"]] = relationship(
        "CampaignMember", back_populates="gangs"
    )
    resources: Mapped[list["CampaignGangResource"]] = relationship(
        "CampaignGangResource", back_populates="campaign_gang", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("status IN ('PENDING', 'ACCEPTED')", name="check_campaign_gang_status"),
        Index("idx_campaign_gangs_campaign", "campaign_id"),
    )


class CampaignTerritory(Base, TimestampCreatedMixin):
    """A territory in play within a campaign."""

    __tablename__ = "campaign_territories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    territory_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("territories.id"), nullable=True
    )
    custom_territory_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("custom_territories.id", ondelete="SET NULL"), nullable=True
    )
    territory_name: Mapped[str] = mapped_column(String, nullable=False)
    gang_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    ruined: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    default_gang_territory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="territories")
    territory: Mapped[Optional["Territory"]] = relationship("Territory")
    gang: Mapped[Optional["Gang"]] = relationship("Gang", back_populates="held_territories")

    __table_args__ = (Index("idx_campaign_territories_campaign", "campaign_id"),)


class CampaignResource(Base):
    """A custom resource tracked by a campaign."""

    __tablename__ = "campaign_resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    resource_name: Mapped[str] = mapped_column(String, nullable=False)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="resources")
    gang_quantities: Mapped[list["CampaignGangResource"]] = relationship(
        "CampaignGangResource", back_populates="resource", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("campaign_id", "resource_name", name="uq_campaign_resource_name"),
    )


class CampaignGangResource(Base):
    """Quantity of a campaign resource held by a campaign gang."""

    __tablename__ = "campaign_gang_resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaign_gangs.id", ondelete="CASCADE"), nullable=False
    )
    campaign_resource_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaign_resources.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    campaign_gang: Mapped["CampaignGang"] = relationship(
        "CampaignGang", back_populates="resources"
    )
    resource: Mapped["CampaignResource"] = relationship(
        "CampaignResource", back_populates="gang_quantities"
    )

    __table_args__ = (
        UniqueConstraint("campaign_gang_id", "campaign_resource_id", name="uq_gang_resource"),
        CheckConstraint("quantity >= 0", name="check_gang_resource_quantity"),
    )


class CampaignBattle(Base, TimestampCreatedMixin):
    """A battle log entry.

    Attributes:
        scenario: Scenario played
        attacker_id / defender_id / winner_id: Gangs involved (nulled if deleted)
        note: Free text
        participants: JSON list of {"gang_id", "role"} entries
    """

    __tablename__ = "campaign_battles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    scenario: Mapped[str] = mapped_column(String, nullable=False)
    attacker_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    defender_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    winner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    participants: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="battles")

    def __repr__(self) -> str:
        return f"<CampaignBattle(id={self.id}, scenario='{self.scenario}')>"
