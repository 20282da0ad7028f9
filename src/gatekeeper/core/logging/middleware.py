"""Request logging middleware.

Emits one ``request_started`` and one ``request_completed`` event per
request. The request ID is already bound to the structlog context by
``RequestContextMiddleware``; the caller is read from the request's
``RequestContext`` once authentication has run.
"""

import time
from collections.abc import Callable
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from gatekeeper.core.auth.context import RequestContext


logger = structlog.get_logger()

QUIET_PATHS: tuple[str, ...] = (
    "/health/live",
    "/health/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
)


def get_client_ip(request: Request) -> str | None:
    """Return the client address, preferring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if real_ip := request.headers.get("X-Real-IP"):
        return real_ip
    return request.client.host if request.client else None


def _caller_fields(request: Request) -> dict[str, Any]:
    context: RequestContext | None = getattr(request.state, "context", None)
    if context is None or context.identity is None:
        return {}

    # ORM instances on the identity may be expired once the session closes
    identity = context.identity
    fields: dict[str, Any] = {"user_id": identity.user_id}
    if identity.role_name is not None:
        fields["role"] = identity.role_name
    return fields


def _level_for(status_code: int) -> Callable[..., Any]:
    if status_code >= 500:
        return logger.error
    if status_code in (401, 403):
        return logger.warning
    return logger.info


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status, duration and authenticated caller.

    Denied requests (401/403) are logged at warning level so access
    failures stand out from ordinary client errors.
    """

    def __init__(self, app: Any, quiet_paths: tuple[str, ...] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.quiet_paths = quiet_paths

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path.startswith(self.quiet_paths):
            return await call_next(request)

        started = time.perf_counter()
        logger.info(
            "request_started",
            method=request.method,
            path=path,
            client_ip=get_client_ip(request),
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **_caller_fields(request),
            )
            raise

        _level_for(response.status_code)(
            "request_completed",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            **_caller_fields(request),
        )
        return response
