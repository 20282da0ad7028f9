"""Liveness, readiness and info endpoints.

These read the app-bound ``Database`` and ``Settings`` from
``app.state`` so a test app built with ``create_app(database=...)`` is
probed against its own database.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from gatekeeper import __version__
from gatekeeper.config import Settings
from gatekeeper.core.database import Database


logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness response with one entry per dependency."""

    status: str
    checks: dict[str, str]


class InfoResponse(BaseModel):
    """Application metadata."""

    app: str
    version: str
    environment: str
    debug: bool


async def _check_database(database: Database) -> str:
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("readiness_check_failed", check="database", error=str(exc))
        return type(exc).__name__
    return "ok"


@router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 if the process is running.",
)
async def liveness() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(status="alive")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Returns 503 while the database cannot be reached.",
)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint."""
    checks = {"database": await _check_database(request.app.state.database)}
    ready = all(result == "ok" for result in checks.values())

    body: dict[str, Any] = ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
    ).model_dump()
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body,
    )


@router.get("/info", response_model=InfoResponse, summary="Application info")
async def info(request: Request) -> InfoResponse:
    """Name, version and environment of the running app."""
    app_settings: Settings = request.app.state.settings
    return InfoResponse(
        app=app_settings.app_name,
        version=__version__,
        environment=app_settings.environment,
        debug=app_settings.debug,
    )
