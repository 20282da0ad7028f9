"""Request context middleware.

Every request gets a :class:`RequestContext` holding its request ID. The
authentication dependency later records the caller's identity on it.
"""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from gatekeeper.core.auth.context import RequestContext


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that creates the per-request context.

    The request ID is taken from the X-Request-ID header or generated, and
    is added to:
    - request.state.context and request.state.request_id
    - Response header X-Request-ID
    - Structlog context
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request with a fresh context.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response with X-Request-ID header
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.context = RequestContext(request_id=request_id)

        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "user_id")

        response.headers["X-Request-ID"] = request_id
        return response
