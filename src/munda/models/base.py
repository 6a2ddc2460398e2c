"""Base model class and common mixins for SQLAlchemy models.

This module provides the declarative base for all models and the column
groups shared by fighters, fighter types and vehicles.
"""

from datetime import UTC, datetime
from typing import Any, ClassVar

from sqlalchemy import JSON, DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides type_annotation_map for automatic type inference from Python types.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        dict[str, Any]: JSON,
        list[str]: JSON,
    }


class TimestampMixin:
    """Mixin for models that need created_at and updated_at timestamps.

    Automatically sets created_at on insert and updated_at on update.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class TimestampCreatedMixin:
    """Mixin for models that only need created_at timestamp.

    Use this for immutable records that don't need updated_at.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class CharacteristicsMixin:
    """The twelve fighter characteristics shared by fighters and their types."""

    movement: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    weapon_skill: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ballistic_skill: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    strength: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    toughness: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wounds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    initiative: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attacks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leadership: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cool: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    willpower: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    intelligence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class VehicleStatsMixin:
    """Vehicle profile columns shared by vehicle types and gang vehicles."""

    movement: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    front: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    side: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rear: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hull_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    handling: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    save: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    body_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    drive_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    engine_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


def utc_now() -> datetime:
    """Get current UTC time with timezone awareness.

    Returns:
        datetime: Current time in UTC with timezone info
    """
    return datetime.now(UTC)
