"""FastAPI application wiring for Munda Manager."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from munda.api.errors import register_exception_handlers
from munda.api.routes import (
    campaigns,
    catalog,
    custom,
    dice,
    equipment,
    fighters,
    gangs,
    health,
    profiles,
    vehicles,
)
from munda.api.runtime import ApiState, build_state
from munda.config import configure_logging, get_settings


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        configure_logging(state.settings)
        app.state.api_state = state
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Munda Manager API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    for module in (
        health,
        profiles,
        catalog,
        gangs,
        fighters,
        equipment,
        vehicles,
        campaigns,
        custom,
        dice,
    ):
        app.include_router(module.router)
    return app


app = create_app()
