from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staysync.api.v1.router import router as api_v1_router
from staysync.config.settings import Settings, get_settings
from staysync.core.error_handlers import register_exception_handlers
from staysync.core.logging import get_logger, setup_logging
from staysync.core.middleware import register_middlewares
from staysync.db import Database, init_db
from staysync.services.base import CacheService
from staysync.services.integrations import LineMessagingClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database
    if settings.DB_CREATE_TABLES:
        # For dev/tests only; production schemas are migrated
        init_db(database.engine)
    logger.info("Application started", extra={"environment": settings.ENVIRONMENT})
    yield
    database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Creates the database handle, cache and LINE client on ``app.state``.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.ENVIRONMENT)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.cache = CacheService.from_settings(settings)
    app.state.line_client = LineMessagingClient.from_settings(settings)

    # A wildcard origin cannot be combined with credentials
    allow_all = not settings.CORS_ORIGINS or settings.CORS_ORIGINS == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register shared core middlewares (request ID, timing)
    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok", "version": settings.API_VERSION}

    return app


app = create_app()
