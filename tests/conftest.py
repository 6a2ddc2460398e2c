"""Pytest configuration for the Munda Manager test suite.

This adds the `src/` directory to `sys.path` so tests can import the
`munda` package without requiring an editable install in CI, and provides
an in-memory database seeded with the reference catalog.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sqlalchemy import select  # noqa: E402

from munda import database  # noqa: E402
from munda.config import Settings  # noqa: E402
from munda.domain import costs  # noqa: E402
from munda.factory import create_fighter_service, create_gang_service  # noqa: E402
from munda.models import FighterType, Gang, GangType  # noqa: E402
from munda.services.profile_service import ProfileService  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine with the catalog seeded."""
    engine = database.create_db_engine(Settings(DATABASE_URL="sqlite://"))
    database.configure_engine(engine)
    database.init_db(seed=True)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = database.get_session_factory()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(session):
    return ProfileService(session).create_profile("scummer")


@pytest.fixture
def other_user(session):
    return ProfileService(session).create_profile("rival")


@pytest.fixture
def admin(session):
    return ProfileService(session).create_profile("arbitrator", "admin")


@pytest.fixture
def find(session):
    """Look up a catalog row by a column value, e.g. ``find(Equipment, equipment_name="Lasgun")``."""

    def _find(model, **filters):
        stmt = select(model).filter_by(**filters)
        return session.execute(stmt).scalars().one()

    return _find


@pytest.fixture
def assert_consistent(session):
    """Assert a gang's stored rating and wealth match a full recomputation."""

    def _check(gang_id: int) -> Gang:
        session.expire_all()
        gang = session.get(Gang, gang_id)
        assert gang.rating == costs.gang_rating(gang)
        assert gang.wealth == costs.gang_wealth(gang)
        return gang

    return _check


@pytest.fixture
def goliath(find):
    return find(GangType, gang_type="Goliath")


@pytest.fixture
def gang(session, user, goliath):
    return create_gang_service(session).create_gang(user, "Iron Fists", goliath.id)


@pytest.fixture
def hire(session, user, find):
    """Hire a catalog fighter type into a gang by type name."""

    def _hire(gang_id: int, name: str, fighter_type: str = "Bully", **kwargs):
        fighter_type_id = find(FighterType, fighter_type=fighter_type).id
        return create_fighter_service(session).add_fighter(
            kwargs.pop("as_user", user), gang_id, name, fighter_type_id=fighter_type_id, **kwargs
        )

    return _hire
