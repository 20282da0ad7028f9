"""FastAPI dependencies for authentication.

This module provides the dependency that turns a bearer token into an
authenticated :class:`Identity`:
- Extracting the token from the Authorization header
- Verifying its signature and expiry
- Checking the server-side session record
- Loading the user with role and permissions
"""

from datetime import UTC, datetime
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gatekeeper.api.dependencies import DBSession
from gatekeeper.core.auth.backend import decode_token, hash_token
from gatekeeper.core.auth.context import Identity, RequestContext, get_request_context
from gatekeeper.core.constants import (
    MSG_AUTHENTICATION_REQUIRED,
    MSG_INVALID_TOKEN,
    TOKEN_TYPE_ACCESS,
)
from gatekeeper.core.errors import UnauthorizedError
from gatekeeper.modules.users.repos import UserRepository, UserSessionRepository


logger = structlog.get_logger()

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


def _invalid_token(reason: str) -> UnauthorizedError:
    logger.warning("authentication_failed", reason=reason)
    return UnauthorizedError(MSG_INVALID_TOKEN, error_code="invalid_token")


async def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Return the raw bearer token, or None when the header is absent."""
    if not credentials or not credentials.credentials:
        return None
    return credentials.credentials


async def authenticate(
    request: Request,
    token: Annotated[str | None, Depends(get_bearer_token)],
    db: DBSession,
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> Identity:
    """Authenticate the request's bearer token.

    Every failure after the header check raises the same error so callers
    cannot tell a bad signature from a revoked session or a removed user.

    Args:
        request: The incoming request
        token: Bearer token from the Authorization header
        db: Database session
        context: The per-request context to populate

    Returns:
        The caller's identity with role and permissions resolved

    Raises:
        UnauthorizedError: If the token is missing, invalid, expired or
            revoked, or the user no longer exists or is inactive
    """
    if token is None:
        logger.info("authentication_failed", reason="missing_token")
        raise UnauthorizedError(
            MSG_AUTHENTICATION_REQUIRED,
            error_code="authentication_required",
        )

    token_data = decode_token(token)
    if token_data is None:
        raise _invalid_token("invalid_signature_or_expired")

    if token_data.type != TOKEN_TYPE_ACCESS:
        raise _invalid_token("wrong_token_type")

    session_repo = UserSessionRepository(db)
    user_session = await session_repo.get_active(hash_token(token), datetime.now(UTC))
    if user_session is None:
        raise _invalid_token("no_active_session")

    user_repo = UserRepository(db)
    user = await user_repo.get_by_id(token_data.user_id, with_permissions=True)
    if user is None:
        raise _invalid_token("user_not_found")

    if not user.is_active:
        raise _invalid_token("user_inactive")

    role = user.role
    identity = Identity(
        user=user,
        role=role,
        permissions=tuple(role.permissions) if role is not None else (),
        token=token,
        user_id=str(user.id),
        role_name=role.name if role is not None else None,
    )

    context.identity = identity
    structlog.contextvars.bind_contextvars(user_id=str(user.id))

    return identity


# Type alias for cleaner dependency injection
CurrentIdentity = Annotated[Identity, Depends(authenticate)]
