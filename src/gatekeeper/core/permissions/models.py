"""Permission system database models.

This module defines the RBAC (Role-Based Access Control) models:
- Permission: One action that can be performed on a resource
- Role: A named bundle of permissions
- RolePermission: Link entity connecting a role to a permission

Users reference at most one role through ``User.role_id``.
"""

from enum import StrEnum
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatekeeper.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PERMISSION_ACTION_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
    MAX_PERMISSION_RESOURCE_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from gatekeeper.core.database.base import Base, TimestampMixin, UUIDMixin


class PermissionAction(StrEnum):
    """The closed set of actions a permission can grant."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Permission(Base, UUIDMixin, TimestampMixin):
    """Permission model representing an action on a resource.

    Attributes:
        name: Unique human-readable name (e.g., "user:read")
        description: Human-readable description of the permission
        resource: The resource being protected (e.g., "users", "roles")
        action: One of create, read, update, delete

    Examples:
        - name="user:read", resource="users", action="read"
        - name="role:delete", resource="roles", action="delete"
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    resource: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_RESOURCE_LENGTH),
        nullable=False,
        index=True,
    )
    action: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_ACTION_LENGTH),
        nullable=False,
    )

    @property
    def key(self) -> str:
        """Return the permission as 'resource:action'."""
        return f"{self.resource}:{self.action}"

    def __repr__(self) -> str:
        return f"<Permission(name={self.name}, {self.resource}:{self.action})>"


class Role(Base, UUIDMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    Attributes:
        name: Unique role name (e.g., "Admin", "Viewer")
        description: Human-readable description of the role
        permission_links: RolePermission rows owned by this role
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    # Relationships
    permission_links: Mapped[list["RolePermission"]] = relationship(
        "RolePermission",
        back_populates="role",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def permissions(self) -> list[Permission]:
        """Permissions granted through this role's links."""
        return [link.permission for link in self.permission_links if link.permission]

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"


class RolePermission(Base, UUIDMixin, TimestampMixin):
    """Link entity realizing the many-to-many Role <-> Permission relation.

    Each link has its own id; a role can be linked to a given permission
    at most once.
    """

    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission_id: Mapped[UUID] = mapped_column(
        ForeignKey("permissions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    role: Mapped["Role"] = relationship(
        "Role",
        back_populates="permission_links",
    )
    permission: Mapped["Permission"] = relationship(
        "Permission",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<RolePermission(id={self.id}, role_id={self.role_id}, "
            f"permission_id={self.permission_id})>"
        )
