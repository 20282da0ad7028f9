"""Role service for business logic."""

from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from gatekeeper.core.errors import BadRequestError, ConflictError, NotFoundError
from gatekeeper.core.permissions.models import Role, RolePermission
from gatekeeper.core.permissions.repos import PermissionRepo, RolePermissionRepo, RoleRepo
from gatekeeper.modules.roles.schemas import RoleCreate, RoleUpdate
from gatekeeper.modules.users.repos import UserRepo


logger = structlog.get_logger()


class RoleService:
    """Service for role management operations.

    All changes made by one call happen in the request's transaction, so
    linking several permissions either links all of them or none.
    """

    def __init__(
        self,
        repo: RoleRepo,
        permission_repo: PermissionRepo,
        link_repo: RolePermissionRepo,
        user_repo: UserRepo,
    ) -> None:
        self.repo = repo
        self.permission_repo = permission_repo
        self.link_repo = link_repo
        self.user_repo = user_repo

    async def list_roles(self) -> list[Role]:
        """List all roles with their permissions."""
        return await self.repo.list_all()

    async def get_role(self, role_id: UUID, refresh: bool = False) -> Role:
        """Get a role by ID.

        Raises:
            NotFoundError: If role not found
        """
        role = await self.repo.get_by_id(role_id, refresh=refresh)
        if not role:
            raise NotFoundError(
                "Role not found",
                resource="role",
                resource_id=str(role_id),
            )
        return role

    async def create_role(self, data: RoleCreate) -> Role:
        """Create a role and link its initial permissions.

        Raises:
            ConflictError: If the name is already taken
            BadRequestError: If any permission ID is unknown
        """
        if await self.repo.get_by_name(data.name):
            raise ConflictError(
                "Role already exists with this name",
                error_code="role_exists",
                details={"name": data.name},
            )

        role = await self.repo.create(Role(name=data.name, description=data.description))
        logger.info("role_created", role_id=str(role.id), name=role.name)

        if data.permission_ids:
            return await self._link_permissions(role, data.permission_ids)
        return await self.get_role(role.id, refresh=True)

    async def update_role(self, role_id: UUID, data: RoleUpdate) -> Role:
        """Update a role's name or description.

        Renaming a role to its own current name is a no-op.

        Raises:
            NotFoundError: If role not found
            ConflictError: If the new name belongs to another role
        """
        role = await self.get_role(role_id)
        update_data = data.model_dump(exclude_unset=True)

        name = update_data.get("name")
        if name is not None and name != role.name:
            existing = await self.repo.get_by_name(name)
            if existing and existing.id != role.id:
                raise ConflictError(
                    "Role name is already taken",
                    error_code="role_exists",
                    details={"name": name},
                )
            role.name = name

        if "description" in update_data:
            role.description = update_data["description"]

        await self.repo.update(role)
        logger.info("role_updated", role_id=str(role.id))
        return await self.get_role(role.id, refresh=True)

    async def delete_role(self, role_id: UUID) -> None:
        """Delete a role that no user is assigned to.

        Raises:
            NotFoundError: If role not found
            ConflictError: If users still reference the role
        """
        role = await self.get_role(role_id)

        count = await self.user_repo.count_by_role(role.id)
        if count > 0:
            raise ConflictError(
                "Cannot delete role that is assigned to users",
                error_code="role_in_use",
                details={"count": count},
            )

        await self.repo.delete(role)
        logger.info("role_deleted", role_id=str(role_id))

    async def add_permissions(self, role_id: UUID, permission_ids: Sequence[UUID]) -> Role:
        """Link permissions to a role.

        Raises:
            NotFoundError: If role not found
            BadRequestError: If any permission ID is unknown
            ConflictError: If any permission is already linked to the role
        """
        role = await self.get_role(role_id)
        return await self._link_permissions(role, permission_ids)

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> None:
        """Unlink one permission from a role.

        Raises:
            NotFoundError: If the role does not exist or does not hold
                the permission
        """
        role = await self.get_role(role_id)

        link = await self.link_repo.get(role.id, permission_id)
        if not link:
            raise NotFoundError(
                "Permission not assigned to this role",
                resource="role_permission",
                resource_id=str(permission_id),
            )

        await self.link_repo.delete(link)
        logger.info(
            "permission_removed_from_role",
            role_id=str(role_id),
            permission_id=str(permission_id),
        )

    async def _link_permissions(self, role: Role, permission_ids: Sequence[UUID]) -> Role:
        """Validate every permission ID, then create the links.

        Duplicate IDs in the request are collapsed. Nothing is linked unless
        every ID names an existing permission not yet held by the role.
        """
        requested = list(dict.fromkeys(permission_ids))

        found = {p.id for p in await self.permission_repo.get_many(requested)}
        missing = [pid for pid in requested if pid not in found]
        if missing:
            raise BadRequestError(
                "One or more permissions do not exist",
                error_code="invalid_permissions",
                details={"invalid_permission_ids": [str(pid) for pid in missing]},
            )

        linked = await self.link_repo.get_linked_permission_ids(role.id, requested)
        if linked:
            raise ConflictError(
                "One or more permissions are already assigned to this role",
                error_code="permissions_already_assigned",
                details={
                    "permission_ids": [str(pid) for pid in requested if pid in linked]
                },
            )

        for permission_id in requested:
            await self.link_repo.create(
                RolePermission(role_id=role.id, permission_id=permission_id)
            )

        logger.info(
            "permissions_added_to_role",
            role_id=str(role.id),
            count=len(requested),
        )
        return await self.get_role(role.id, refresh=True)


# Type alias for dependency injection
RoleSvc = Annotated[RoleService, Depends(RoleService)]
