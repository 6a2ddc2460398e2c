"""User profile model.

Profiles stand in for authenticated accounts. Every gang, custom catalog
entry and campaign membership hangs off a profile.
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

USER_ROLES = ("user", "admin")


class Profile(Base, TimestampMixin):
    """An application user.

    Attributes:
        id: Primary key
        username: Unique display name
        user_role: "user" or "admin"; admins bypass ownership checks
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    user_role: Mapped[str] = mapped_column(String, nullable=False, default="user")

    __table_args__ = (CheckConstraint("user_role IN ('user', 'admin')", name="check_user_role"),)

    @property
    def is_admin(self) -> bool:
        return self.user_role == "admin"

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username='{self.username}', role='{self.user_role}')>"
