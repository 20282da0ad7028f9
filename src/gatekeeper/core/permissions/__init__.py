"""Permission system for role-based access control (RBAC).

Route guards live in ``gatekeeper.core.permissions.requirements`` and are
imported from there directly, since they depend on the auth layer.
"""

from gatekeeper.core.permissions.checker import (
    PermissionRequirement,
    authorize,
    has_permission,
)
from gatekeeper.core.permissions.models import (
    Permission,
    PermissionAction,
    Role,
    RolePermission,
)


__all__ = [
    # Models
    "Permission",
    "PermissionAction",
    # Checker
    "PermissionRequirement",
    "Role",
    "RolePermission",
    "authorize",
    "has_permission",
]
