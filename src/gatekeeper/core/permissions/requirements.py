"""Route-level permission requirements.

This module provides the FastAPI dependency that routes attach to declare
the permission they need:

    @router.delete(
        "/{user_id}",
        dependencies=[require_permission("delete", "users")],
    )
    async def delete_user(user_id: UUID, service: UserSvc) -> MessageResponse:
        ...
"""

from typing import Annotated, Any

import structlog
from fastapi import Depends

from gatekeeper.core.auth.context import Identity
from gatekeeper.core.auth.dependencies import authenticate
from gatekeeper.core.errors import AppException, InternalServerError
from gatekeeper.core.permissions.checker import PermissionRequirement, authorize
from gatekeeper.core.permissions.models import PermissionAction


logger = structlog.get_logger()


class PermissionGuard:
    """Dependency that enforces one :class:`PermissionRequirement`.

    Authentication runs first through the ``authenticate`` dependency, so
    an unauthenticated request never reaches the permission check.
    """

    def __init__(self, requirement: PermissionRequirement) -> None:
        self.requirement = requirement

    async def __call__(
        self,
        identity: Annotated[Identity, Depends(authenticate)],
    ) -> Identity:
        try:
            authorize(identity, self.requirement)
        except AppException as exc:
            logger.warning(
                "authorization_denied",
                required_permission=str(self.requirement),
                error_code=exc.error_code,
            )
            raise
        except Exception as exc:
            logger.exception(
                "authorization_error",
                required_permission=str(self.requirement),
            )
            raise InternalServerError("Authorization error") from exc

        return identity


def require_permission(action: PermissionAction | str, resource: str) -> Any:
    """Declare that a route requires ``(action, resource)``.

    Args:
        action: One of create, read, update, delete
        resource: The protected resource (e.g. "users")

    Returns:
        A FastAPI ``Depends`` marker for the route's ``dependencies`` list

    Raises:
        ValueError: If ``action`` is not a known permission action
    """
    requirement = PermissionRequirement(PermissionAction(action), resource)
    return Depends(PermissionGuard(requirement))
