"""Unit tests for user profiles."""

import pytest

from munda.domain.enums import UserRole
from munda.services.profile_service import ProfileService


def test_create_profile(session):
    profile = ProfileService(session).create_profile("  juve  ")
    assert profile.username == "juve"
    assert profile.user_role == UserRole.USER
    assert profile.is_admin is False


def test_admin_profile(admin):
    assert admin.is_admin is True


def test_username_required(session):
    with pytest.raises(ValueError, match="Username is required"):
        ProfileService(session).create_profile("   ")


def test_username_unique(session, user):
    with pytest.raises(ValueError, match="Username 'scummer' is already taken"):
        ProfileService(session).create_profile("scummer")


def test_unknown_role(session):
    with pytest.raises(ValueError):
        ProfileService(session).create_profile("boss", "overlord")


def test_get_profile(session, user):
    service = ProfileService(session)
    assert service.get_profile(user.id) is user
    with pytest.raises(LookupError, match="User not found"):
        service.get_profile(9999)
