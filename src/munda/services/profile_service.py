"""User profiles."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from munda.domain.enums import UserRole
from munda.models import Profile
from munda.services.access import get_or_404

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, session: Session):
        self.session = session

    def create_profile(self, username: str, user_role: str = UserRole.USER) -> Profile:
        """Register a profile.

        Raises:
            ValueError: If the username is blank or taken
        """
        try:
            username = (username or "").strip()
            if not username:
                raise ValueError("Username is required")
            role = UserRole(user_role)
            taken = self.session.execute(
                select(Profile.id).where(Profile.username == username)
            ).first()
            if taken is not None:
                raise ValueError(f"Username '{username}' is already taken")
            profile = Profile(username=username, user_role=role)
            self.session.add(profile)
            self.session.commit()
            logger.info("created profile %s (%s)", profile.id, role)
            return profile
        except Exception:
            self.session.rollback()
            raise

    def get_profile(self, profile_id: int) -> Profile:
        return get_or_404(self.session, Profile, profile_id, "User")
