"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from gatekeeper import __version__
from gatekeeper.api.router import api_router
from gatekeeper.config import Settings, settings
from gatekeeper.core.auth.middleware import RequestContextMiddleware
from gatekeeper.core.database import Database
from gatekeeper.core.errors import register_exception_handlers
from gatekeeper.core.logging import RequestLoggingMiddleware, configure_logging


configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    app_settings: Settings = app.state.settings
    logger.info(
        "application_startup",
        app_name=app_settings.app_name,
        environment=app_settings.environment,
    )

    yield

    logger.info("application_shutdown")

    database: Database = app.state.database
    await database.dispose()
    logger.info("database_disposed")


def create_app(
    app_settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use, defaults to the process settings
        database: Database handle to use, defaults to one built from the settings

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        description="Role-based access control for a REST API",
        version=__version__,
        debug=app_settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not app_settings.is_production else None,
        redoc_url="/redoc" if not app_settings.is_production else None,
        openapi_url="/openapi.json" if not app_settings.is_production else None,
    )

    app.state.settings = app_settings
    app.state.database = database or Database.from_settings(app_settings)

    # Middleware added last runs first: the context must exist before logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(api_router)

    return app

