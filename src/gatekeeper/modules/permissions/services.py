"""Permission service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from gatekeeper.core.errors import ConflictError, NotFoundError
from gatekeeper.core.permissions.models import Permission
from gatekeeper.core.permissions.repos import PermissionRepo, RolePermissionRepo
from gatekeeper.modules.permissions.schemas import PermissionCreate, PermissionUpdate


logger = structlog.get_logger()


class PermissionService:
    """Service for permission management operations."""

    def __init__(self, repo: PermissionRepo, link_repo: RolePermissionRepo) -> None:
        self.repo = repo
        self.link_repo = link_repo

    async def list_permissions(self) -> list[Permission]:
        """List all permissions."""
        return await self.repo.list_all()

    async def list_by_resource(self, resource: str) -> list[Permission]:
        """List the permissions protecting one resource."""
        return await self.repo.list_by_resource(resource)

    async def get_permission(self, permission_id: UUID) -> Permission:
        """Get a permission by ID.

        Raises:
            NotFoundError: If permission not found
        """
        permission = await self.repo.get_by_id(permission_id)
        if not permission:
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=str(permission_id),
            )
        return permission

    async def create_permission(self, data: PermissionCreate) -> Permission:
        """Create a new permission.

        Raises:
            ConflictError: If the name is already taken
        """
        if await self.repo.get_by_name(data.name):
            raise ConflictError(
                "Permission already exists with this name",
                error_code="permission_exists",
                details={"name": data.name},
            )

        permission = Permission(
            name=data.name,
            description=data.description,
            resource=data.resource,
            action=data.action.value,
        )
        permission = await self.repo.create(permission)
        logger.info("permission_created", permission_id=str(permission.id), name=permission.name)
        return permission

    async def update_permission(
        self, permission_id: UUID, data: PermissionUpdate
    ) -> Permission:
        """Update a permission.

        Renaming a permission to its own current name is a no-op.

        Raises:
            NotFoundError: If permission not found
            ConflictError: If the new name belongs to another permission
        """
        permission = await self.get_permission(permission_id)
        update_data = data.model_dump(exclude_unset=True)

        name = update_data.get("name")
        if name is not None and name != permission.name:
            existing = await self.repo.get_by_name(name)
            if existing and existing.id != permission.id:
                raise ConflictError(
                    "Permission name is already taken",
                    error_code="permission_exists",
                    details={"name": name},
                )
            permission.name = name

        if "description" in update_data:
            permission.description = update_data["description"]
        if update_data.get("resource") is not None:
            permission.resource = update_data["resource"]
        if update_data.get("action") is not None:
            permission.action = update_data["action"].value

        permission = await self.repo.update(permission)
        logger.info("permission_updated", permission_id=str(permission.id))
        return permission

    async def delete_permission(self, permission_id: UUID) -> None:
        """Delete a permission that no role references.

        Raises:
            NotFoundError: If permission not found
            ConflictError: If any role still holds the permission
        """
        permission = await self.get_permission(permission_id)

        count = await self.link_repo.count_by_permission(permission.id)
        if count > 0:
            raise ConflictError(
                "Cannot delete permission that is assigned to roles",
                error_code="permission_in_use",
                details={"count": count},
            )

        await self.repo.delete(permission)
        logger.info("permission_deleted", permission_id=str(permission_id))


# Type alias for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
