"""Application configuration for Munda Manager."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = Field(
        default="sqlite:///munda.db", description="SQLAlchemy URL of the gang database"
    )
    DATABASE_ECHO: bool = Field(default=False, description="Echo emitted SQL to the log")
    DATABASE_POOL_SIZE: int = Field(default=5, ge=1, description="Pool size for server databases")
    DATABASE_MAX_OVERFLOW: int = Field(
        default=10, ge=0, description="Connections allowed beyond the pool size"
    )
    DATABASE_POOL_RECYCLE: int = Field(
        default=1800, description="Seconds before a pooled connection is recycled"
    )
    DATABASE_POOL_TIMEOUT: int = Field(
        default=30, gt=0, description="Seconds to wait for a pooled connection"
    )
    base_url: str = Field(
        default="http://localhost:3000", description="Public URL the web client is served from"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )
    starting_credits: int = Field(
        default=1000, ge=0, description="Credits a newly created gang starts with"
    )
    log_level: str = Field(default="INFO", description="Root log level for the API process")
    seed_catalog: bool = Field(
        default=True, description="Seed reference catalog data when the API starts"
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the root logger once for the API process."""

    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
