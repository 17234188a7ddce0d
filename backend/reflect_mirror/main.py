"""Reflect API Mirror: FastAPI application entry point.

Invariants:
    - Routes registered from api.route_table.ROUTE_TABLE only (no auto-discovery)
    - Global error handlers map ReflectMirrorError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - AppServices created on startup and closed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory so tests build isolated apps; `app` is what uvicorn serves
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reflect_mirror.api.dispatcher import register_routes
from reflect_mirror.api.error_handlers import register_error_handlers
from reflect_mirror.api.route_table import ROUTE_TABLE, Route
from reflect_mirror.config import Settings, get_settings
from reflect_mirror.infrastructure.app_services import AppServices
from reflect_mirror.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    app.state.services = AppServices.create(settings)
    logger.info(f"{settings.app_name} started")
    yield
    logger.info(f"{settings.app_name} shutting down")
    await app.state.services.close()


def create_app(
    settings: Settings | None = None, routes: tuple[Route, ...] = ROUTE_TABLE,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name, version=settings.app_version, lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS: configured from settings, not hardcoded
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app, routes)
    register_error_handlers(app)
    return app


app = create_app()
