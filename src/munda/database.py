"""Database connection and session management.

This module provides database connection management, session factories,
and utility functions for database operations.
"""

import logging
from collections.abc import Generator
from contextlib import suppress
from typing import Any

from sqlalchemy import create_engine, event, func, inspect, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from munda.config import Settings, get_settings
from munda.models import Base

logger = logging.getLogger(__name__)


def _configure_sqlite(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Enable foreign keys (and WAL for file databases) on each SQLite connection.

    Args:
        dbapi_connection: The DBAPI connection
        connection_record: Connection record (required by SQLAlchemy event API)

    Note:
        Cascading deletes between gangs, fighters, equipment and effects rely
        on ``PRAGMA foreign_keys=ON``.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def _configure_sqlite_memory(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Create and configure the database engine.

    Args:
        settings: Optional settings override (defaults to ``get_settings()``)

    Returns:
        Engine: Configured SQLAlchemy engine

    Note:
        For SQLite databases, automatically configures pragmas. In-memory
        SQLite shares one connection so every session sees the same schema.
    """
    settings = settings or get_settings()
    url = settings.DATABASE_URL

    if url.startswith("sqlite"):
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            engine = create_engine(
                url,
                echo=settings.DATABASE_ECHO,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(engine, "connect", _configure_sqlite_memory)
        else:
            engine = create_engine(
                url,
                echo=settings.DATABASE_ECHO,
                pool_pre_ping=True,
                connect_args={"check_same_thread": False},
            )
            event.listen(engine, "connect", _configure_sqlite)
    else:
        # PostgreSQL in production: honor pool settings
        engine = create_engine(
            url,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=settings.DATABASE_POOL_RECYCLE,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        )

    return engine


# Global engine and session factory
_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Get or create the global database engine.

    Returns:
        Engine: The SQLAlchemy engine instance
    """
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def configure_engine(engine: Engine) -> None:
    """Replace the global engine (used by the app factory and tests)."""

    global _engine, _SessionLocal  # noqa: PLW0603
    if _engine is not None and _engine is not engine:
        with suppress(SQLAlchemyError):
            _engine.dispose()
    _engine = engine
    _SessionLocal = None


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the global session factory.

    Returns:
        sessionmaker: Session factory for creating database sessions
    """
    global _SessionLocal  # noqa: PLW0603
    if _SessionLocal is None:
        engine = get_engine()
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=engine,
        )
    return _SessionLocal


def get_db() -> Generator[Session]:
    """FastAPI dependency for getting database sessions.

    This generator function creates a database session and ensures it's
    properly closed after the request completes.

    Yields:
        Database session

    Example:
        ```python
        @router.get("/gangs")
        def list_gangs(db: Session = Depends(get_db)):
            return db.scalars(select(Gang)).all()
        ```
    """
    SessionLocal = get_session_factory()  # noqa: N806
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(*, seed: bool = False) -> None:
    """Create all tables, optionally loading the reference catalog.

    Note:
        Tables are created directly from the ORM metadata.
    """
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    if seed:
        from munda.models.seed_data import seed_all_catalog_data

        with get_session_factory()() as session:
            seed_all_catalog_data(session)
            session.commit()
        logger.info("reference catalog seeded")


def check_database_health() -> bool:
    """Check if the database is accessible and valid.

    Returns:
        bool: True if database is healthy, False otherwise
    """
    try:
        engine = get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("database health check failed", exc_info=True)
        return False


def get_table_names() -> list[str]:
    """Get list of all table names in the database.

    Returns:
        list[str]: List of table names
    """
    engine = get_engine()
    inspector = inspect(engine)
    return inspector.get_table_names()


def count_rows(session: Session, table_name: str) -> int:
    """Count rows in a specific table.

    Args:
        session: Database session
        table_name: Name of the table to count.
                   Must be a valid table in the schema.

    Returns:
        int: Number of rows in the table

    Raises:
        ValueError: If table_name is not a valid table in the schema
    """
    if table_name not in Base.metadata.tables:
        valid_tables = sorted(Base.metadata.tables.keys())
        raise ValueError(
            f"Invalid table name: {table_name}. Valid tables: {', '.join(valid_tables)}"
        )

    table = Base.metadata.tables[table_name]
    result = session.execute(select(func.count()).select_from(table)).scalar()
    return result or 0
