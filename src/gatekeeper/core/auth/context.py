"""Per-request context carrying the resolved caller identity."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fastapi import Request


if TYPE_CHECKING:
    from gatekeeper.core.permissions.models import Permission, Role
    from gatekeeper.modules.users.models import User


@dataclass(frozen=True)
class Identity:
    """An authenticated caller: the user, their role and its permissions.

    Attributes:
        user: The authenticated user
        role: The user's role, if any
        permissions: Every permission granted through the role
        token: The bearer token the request presented
        user_id: The user id as a string, safe to read after the
            request's database session has closed
        role_name: The role name, copied for the same reason
    """

    user: "User"
    role: "Role | None"
    permissions: tuple["Permission", ...]
    token: str
    user_id: str = ""
    role_name: str | None = None

    @property
    def permission_names(self) -> list[str]:
        """Names of the granted permissions (e.g. ``user:read``)."""
        return [permission.name for permission in self.permissions]


@dataclass
class RequestContext:
    """State scoped to one request.

    Created by ``RequestContextMiddleware`` and filled in by the
    authentication dependency once the bearer token is verified.
    """

    request_id: str
    identity: Identity | None = field(default=None)


def get_request_context(request: Request) -> RequestContext:
    """Return the context for this request, creating it if absent.

    Args:
        request: The incoming request

    Returns:
        The request's context
    """
    context: RequestContext | None = getattr(request.state, "context", None)
    if context is None:
        request_id = getattr(request.state, "request_id", None) or ""
        context = RequestContext(request_id=request_id)
        request.state.context = context
    return context
