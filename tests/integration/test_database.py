"""Integration tests for database functionality.

Tests schema creation, session management, seed data and the SQLite pragmas.
Each test runs against a fresh in-memory database bound as the global engine.
"""

import pytest
from sqlalchemy import select, text

from munda.config import Settings
from munda.database import (
    check_database_health,
    configure_engine,
    count_rows,
    create_db_engine,
    get_db,
    get_session_factory,
    get_table_names,
    init_db,
)
from munda.models import Equipment, FighterEffectType, FighterType, GangType


@pytest.fixture
def seeded_db():
    """Bind a fresh, seeded in-memory database as the global engine."""
    engine = create_db_engine(Settings(DATABASE_URL="sqlite://"))
    configure_engine(engine)
    init_db(seed=True)
    yield engine
    engine.dispose()


@pytest.fixture
def test_session(seeded_db):  # noqa: ARG001
    """Create a test database session."""
    SessionLocal = get_session_factory()  # noqa: N806
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def test_database_health(seeded_db):  # noqa: ARG001
    assert check_database_health() is True


def test_all_tables_exist(seeded_db):  # noqa: ARG001
    tables = set(get_table_names())
    expected = {
        "profiles",
        "gang_types",
        "fighter_types",
        "equipment",
        "weapon_profiles",
        "fighter_effect_types",
        "vehicle_types",
        "gangs",
        "gang_logs",
        "fighters",
        "fighter_equipment",
        "fighter_effects",
        "fighter_skills",
        "vehicles",
        "campaigns",
        "campaign_gangs",
        "campaign_battles",
        "custom_equipment",
        "custom_fighter_types",
        "custom_skills",
        "custom_territories",
    }
    missing = expected - tables
    assert not missing, f"Missing tables: {missing}"


def test_foreign_keys_enabled(test_session):
    assert test_session.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_seeded_gang_types(test_session):
    names = set(test_session.scalars(select(GangType.gang_type)))
    assert names == {"Goliath", "Escher", "Orlock", "Outcast"}


def test_seeded_fighter_types(test_session):
    bully = test_session.scalars(select(FighterType).where(FighterType.fighter_type == "Bully")).one()
    assert bully.cost == 60
    assert bully.gang_type.gang_type == "Goliath"


def test_weapons_have_profiles(test_session):
    lasgun = test_session.scalars(
        select(Equipment).where(Equipment.equipment_name == "Lasgun")
    ).one()
    assert lasgun.weapon_profiles
    assert count_rows(test_session, "weapon_profiles") >= 1


def test_seeded_effect_types(test_session):
    names = set(test_session.scalars(select(FighterEffectType.effect_name)))
    assert {"Hobbled", "Captured", "Weapon Skill", "Loss of Power", "Hotshot las pack"} <= names


def test_runtime_tables_start_empty(test_session):
    for table in ("gangs", "fighters", "fighter_equipment", "campaigns"):
        assert count_rows(test_session, table) == 0


def test_count_rows_rejects_unknown_table(test_session):
    with pytest.raises(ValueError, match="Invalid table name"):
        count_rows(test_session, "armies")


def test_get_db_yields_and_closes(seeded_db):  # noqa: ARG001
    generator = get_db()
    session = next(generator)
    assert session.execute(text("SELECT 1")).scalar() == 1
    with pytest.raises(StopIteration):
        next(generator)


def test_init_db_is_repeatable(seeded_db):  # noqa: ARG001
    init_db()
    with get_session_factory()() as session:
        assert count_rows(session, "gang_types") == 4
