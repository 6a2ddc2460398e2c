"""Runtime primitives backing the Munda Manager HTTP API."""

from __future__ import annotations

import logging

from munda import database
from munda.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ApiState:
    """Process-wide resources shared by the FastAPI layer.

    Creating the state binds the global session factory to a fresh engine
    and makes sure the schema (and, if enabled, the catalog) exists.
    """

    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.engine = database.create_db_engine(self.settings)
        database.configure_engine(self.engine)
        database.init_db(seed=self.settings.seed_catalog)
        logger.info("database ready at %s", self.engine.url.render_as_string(hide_password=True))

    async def shutdown(self) -> None:
        self.engine.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
