"""Permission checking logic.

Authorization is data driven: each protected route declares a
:class:`PermissionRequirement` and one generic function, :func:`authorize`,
decides whether an identity satisfies it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gatekeeper.core.constants import (
    MSG_AUTHENTICATION_REQUIRED,
    MSG_INSUFFICIENT_PERMISSIONS,
)
from gatekeeper.core.errors import ForbiddenError, UnauthorizedError
from gatekeeper.core.permissions.models import PermissionAction


if TYPE_CHECKING:
    from gatekeeper.core.auth.context import Identity
    from gatekeeper.core.permissions.models import Permission


@dataclass(frozen=True)
class PermissionRequirement:
    """An (action, resource) pair a caller must hold.

    The action is checked against :class:`PermissionAction` on creation, so
    a typo in a route declaration fails at import time rather than silently
    denying every request.

    Attributes:
        action: One of create, read, update, delete
        resource: The protected resource (e.g. "users")
    """

    action: PermissionAction
    resource: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", PermissionAction(self.action))
        if not self.resource:
            raise ValueError("resource must not be empty")

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"


def has_permission(
    permissions: Iterable["Permission"],
    requirement: PermissionRequirement,
) -> bool:
    """Check whether any permission matches the requirement exactly.

    Matching compares action and resource for equality. There are no
    wildcards and no action implies another.

    Args:
        permissions: Permissions held by the caller
        requirement: The required (action, resource) pair

    Returns:
        True if one of the permissions grants the requirement
    """
    return any(
        permission.action == requirement.action
        and permission.resource == requirement.resource
        for permission in permissions
    )


def authorize(identity: "Identity | None", requirement: PermissionRequirement) -> None:
    """Allow or deny an identity for a requirement.

    Args:
        identity: The authenticated caller, or None if authentication did not run
        requirement: The required (action, resource) pair

    Raises:
        UnauthorizedError: If there is no identity
        ForbiddenError: If the caller has no role, an empty permission set,
            or no permission matching the requirement
    """
    if identity is None:
        raise UnauthorizedError(
            MSG_AUTHENTICATION_REQUIRED,
            error_code="authentication_required",
        )

    if identity.role is None or not identity.permissions:
        raise ForbiddenError(
            MSG_INSUFFICIENT_PERMISSIONS,
            error_code="permission_denied",
            details={"required_permission": str(requirement)},
        )

    if not has_permission(identity.permissions, requirement):
        raise ForbiddenError(
            MSG_INSUFFICIENT_PERMISSIONS,
            error_code="permission_denied",
            details={"required_permission": str(requirement)},
        )
