"""FastAPI application factory for the DevBlog API server."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from structlog import get_logger

from devblog_api import __version__
from devblog_api.api.middleware.api_gate import APIGateMiddleware
from devblog_api.api.middleware.cors import setup_cors_middleware
from devblog_api.api.middleware.errors import setup_error_handlers
from devblog_api.api.middleware.logging import AccessLogMiddleware
from devblog_api.api.middleware.request_id import RequestIDMiddleware
from devblog_api.api.routes import (
    health_router,
    posts_router,
    tags_router,
    users_router,
)
from devblog_api.auth.api_keys import APIGate, QuotaPolicy
from devblog_api.config.settings import Settings, get_settings
from devblog_api.core.logging import setup_logging
from devblog_api.db import close_db, init_db
from devblog_api.db.repositories import ApiKeyRepository
from devblog_api.services import ContentService, DataStoreGuard


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database on startup and dispose of it on shutdown."""
    settings: Settings = app.state.settings

    logger.info(
        "server_start",
        host=settings.server.host,
        port=settings.server.port,
        quota_window=settings.gate.quota_window.value,
        version=__version__,
    )
    await init_db(settings.database.url, echo=settings.database.echo)

    yield

    logger.debug("server_stop")
    await close_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override. If None, uses get_settings().

    Returns:
        Configured FastAPI application instance.

    """
    if settings is None:
        settings = get_settings()

    # Reload mode re-imports the app, so logging may not be set up yet
    if not structlog.is_configured():
        setup_logging(
            json_logs=settings.server.json_logs,
            log_level_name=settings.server.log_level,
            log_file=settings.server.log_file,
        )

    app = FastAPI(
        title="DevBlog API",
        description="Read-only API over published DevBlog posts, tags and profiles",
        version=__version__,
        lifespan=lifespan,
    )

    guard = DataStoreGuard.from_settings(settings.gate)
    gate = APIGate(
        repository=ApiKeyRepository(),
        guard=guard,
        quota=QuotaPolicy.from_settings(settings.gate),
    )
    app.state.settings = settings
    app.state.guard = guard
    app.state.gate = gate
    app.state.content_service = ContentService(guard)

    setup_error_handlers(app)

    # Last added runs first: CORS -> request id -> access log -> gate
    app.add_middleware(APIGateMiddleware, gate=gate)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    setup_cors_middleware(app, settings)

    app.include_router(health_router)
    app.include_router(posts_router, prefix="/api")
    app.include_router(tags_router, prefix="/api")
    app.include_router(users_router, prefix="/api")

    return app
