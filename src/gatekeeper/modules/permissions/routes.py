"""Permission management API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from gatekeeper.core.permissions.requirements import require_permission
from gatekeeper.modules.permissions.schemas import (
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
)
from gatekeeper.modules.permissions.services import PermissionSvc
from gatekeeper.modules.users.schemas import MessageResponse


router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get(
    "",
    response_model=list[PermissionResponse],
    summary="List permissions",
    dependencies=[require_permission("read", "permissions")],
)
async def list_permissions(service: PermissionSvc) -> list[PermissionResponse]:
    """List all permissions."""
    permissions = await service.list_permissions()
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.get(
    "/resource/{resource}",
    response_model=list[PermissionResponse],
    summary="List permissions for a resource",
    dependencies=[require_permission("read", "permissions")],
)
async def list_permissions_by_resource(
    resource: str, service: PermissionSvc
) -> list[PermissionResponse]:
    """List the permissions protecting one resource."""
    permissions = await service.list_by_resource(resource)
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Get permission by ID",
    dependencies=[require_permission("read", "permissions")],
)
async def get_permission(permission_id: UUID, service: PermissionSvc) -> PermissionResponse:
    """Get a permission by ID."""
    permission = await service.get_permission(permission_id)
    return PermissionResponse.model_validate(permission)


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create permission",
    dependencies=[require_permission("create", "permissions")],
)
async def create_permission(
    data: PermissionCreate, service: PermissionSvc
) -> PermissionResponse:
    """Create a permission."""
    permission = await service.create_permission(data)
    return PermissionResponse.model_validate(permission)


@router.put(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Update permission",
    dependencies=[require_permission("update", "permissions")],
)
async def update_permission(
    permission_id: UUID,
    data: PermissionUpdate,
    service: PermissionSvc,
) -> PermissionResponse:
    """Update a permission."""
    permission = await service.update_permission(permission_id, data)
    return PermissionResponse.model_validate(permission)


@router.delete(
    "/{permission_id}",
    response_model=MessageResponse,
    summary="Delete permission",
    description="Refused while any role holds the permission.",
    dependencies=[require_permission("delete", "permissions")],
)
async def delete_permission(permission_id: UUID, service: PermissionSvc) -> MessageResponse:
    """Delete a permission."""
    await service.delete_permission(permission_id)
    return MessageResponse(message="Permission deleted successfully")
