"""Role and permission repositories for database operations."""

from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from gatekeeper.api.dependencies import DBSession
from gatekeeper.core.database.session import flush_unique
from gatekeeper.core.permissions.models import Permission, Role, RolePermission


class RoleRepository:
    """Repository for Role database operations.

    Roles are always returned with their permission links loaded, since
    every consumer of a role (responses, authorization) needs them.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    def _select(self) -> Select[tuple[Role]]:
        return select(Role).options(
            selectinload(Role.permission_links).selectinload(RolePermission.permission)
        )

    async def create(self, role: Role) -> Role:
        """Create a new role.

        Args:
            role: Role instance to create

        Returns:
            The created role with ID populated
        """
        self.session.add(role)
        await flush_unique(
            self.session, "Role already exists with this name", "role_exists"
        )
        await self.session.refresh(role)
        return role

    async def get_by_id(self, role_id: UUID, refresh: bool = False) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: The role's UUID
            refresh: Reload the role and its links even if already in the session

        Returns:
            Role if found, None otherwise
        """
        stmt = self._select().where(Role.id == role_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by its unique name."""
        result = await self.session.execute(self._select().where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Role]:
        """List all roles ordered by name."""
        result = await self.session.execute(self._select().order_by(Role.name))
        return list(result.scalars().all())

    async def update(self, role: Role) -> Role:
        """Update a role.

        Args:
            role: Role instance with updated fields

        Returns:
            The updated role
        """
        await flush_unique(
            self.session, "Role already exists with this name", "role_exists"
        )
        await self.session.refresh(role)
        return role

    async def delete(self, role: Role) -> None:
        """Delete a role. Its permission links are deleted with it.

        Args:
            role: Role instance to delete
        """
        await self.session.delete(role)
        await self.session.flush()


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, permission: Permission) -> Permission:
        """Create a new permission.

        Args:
            permission: Permission instance to create

        Returns:
            The created permission with ID populated
        """
        self.session.add(permission)
        await flush_unique(
            self.session, "Permission already exists with this name", "permission_exists"
        )
        await self.session.refresh(permission)
        return permission

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get a permission by ID."""
        stmt = select(Permission).where(Permission.id == permission_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Permission | None:
        """Get a permission by its unique name."""
        stmt = select(Permission).where(Permission.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, permission_ids: Sequence[UUID]) -> list[Permission]:
        """Get every permission whose ID is in ``permission_ids``.

        Unknown IDs are simply absent from the result.
        """
        if not permission_ids:
            return []
        stmt = select(Permission).where(Permission.id.in_(permission_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self) -> list[Permission]:
        """List all permissions ordered by resource and action."""
        stmt = select(Permission).order_by(Permission.resource, Permission.action)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_resource(self, resource: str) -> list[Permission]:
        """List the permissions that protect one resource."""
        stmt = (
            select(Permission)
            .where(Permission.resource == resource)
            .order_by(Permission.action)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, permission: Permission) -> Permission:
        """Update a permission.

        Args:
            permission: Permission instance with updated fields

        Returns:
            The updated permission
        """
        await flush_unique(
            self.session, "Permission already exists with this name", "permission_exists"
        )
        await self.session.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        """Delete a permission.

        Args:
            permission: Permission instance to delete
        """
        await self.session.delete(permission)
        await self.session.flush()


class RolePermissionRepository:
    """Repository for the Role <-> Permission link rows."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, link: RolePermission) -> RolePermission:
        """Create a new role-permission link."""
        self.session.add(link)
        await flush_unique(
            self.session,
            "One or more permissions are already assigned to this role",
            "permissions_already_assigned",
        )
        return link

    async def get(self, role_id: UUID, permission_id: UUID) -> RolePermission | None:
        """Get the link between a role and a permission, if any."""
        stmt = select(RolePermission).where(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_linked_permission_ids(
        self, role_id: UUID, permission_ids: Sequence[UUID]
    ) -> set[UUID]:
        """Return which of ``permission_ids`` are already linked to the role."""
        if not permission_ids:
            return set()
        stmt = select(RolePermission.permission_id).where(
            RolePermission.role_id == role_id,
            RolePermission.permission_id.in_(permission_ids),
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def count_by_permission(self, permission_id: UUID) -> int:
        """Count the roles linked to a permission."""
        stmt = (
            select(func.count())
            .select_from(RolePermission)
            .where(RolePermission.permission_id == permission_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def delete(self, link: RolePermission) -> None:
        """Delete a role-permission link."""
        await self.session.delete(link)
        await self.session.flush()


# Type aliases for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]
RolePermissionRepo = Annotated[RolePermissionRepository, Depends(RolePermissionRepository)]
