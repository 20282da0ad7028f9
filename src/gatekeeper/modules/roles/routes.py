"""Role management API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from gatekeeper.core.permissions.requirements import require_permission
from gatekeeper.modules.roles.schemas import (
    RoleCreate,
    RolePermissionsAdd,
    RoleResponse,
    RoleUpdate,
)
from gatekeeper.modules.roles.services import RoleSvc
from gatekeeper.modules.users.schemas import MessageResponse


router = APIRouter(prefix="/roles", tags=["roles"])


@router.get(
    "",
    response_model=list[RoleResponse],
    summary="List roles",
    dependencies=[require_permission("read", "roles")],
)
async def list_roles(service: RoleSvc) -> list[RoleResponse]:
    """List all roles with their permissions."""
    roles = await service.list_roles()
    return [RoleResponse.model_validate(r) for r in roles]


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Get role by ID",
    dependencies=[require_permission("read", "roles")],
)
async def get_role(role_id: UUID, service: RoleSvc) -> RoleResponse:
    """Get a role by ID."""
    role = await service.get_role(role_id)
    return RoleResponse.model_validate(role)


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    description="Create a role, optionally linking existing permissions.",
    dependencies=[require_permission("create", "roles")],
)
async def create_role(data: RoleCreate, service: RoleSvc) -> RoleResponse:
    """Create a role."""
    role = await service.create_role(data)
    return RoleResponse.model_validate(role)


@router.put(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update role",
    dependencies=[require_permission("update", "roles")],
)
async def update_role(role_id: UUID, data: RoleUpdate, service: RoleSvc) -> RoleResponse:
    """Update a role's name or description."""
    role = await service.update_role(role_id, data)
    return RoleResponse.model_validate(role)


@router.delete(
    "/{role_id}",
    response_model=MessageResponse,
    summary="Delete role",
    description="Refused while any user is assigned the role.",
    dependencies=[require_permission("delete", "roles")],
)
async def delete_role(role_id: UUID, service: RoleSvc) -> MessageResponse:
    """Delete a role."""
    await service.delete_role(role_id)
    return MessageResponse(message="Role deleted successfully")


@router.post(
    "/{role_id}/permissions",
    response_model=RoleResponse,
    summary="Add permissions to role",
    description="Link existing permissions to a role. All or nothing.",
    dependencies=[require_permission("update", "roles")],
)
async def add_permissions_to_role(
    role_id: UUID,
    data: RolePermissionsAdd,
    service: RoleSvc,
) -> RoleResponse:
    """Link permissions to a role."""
    role = await service.add_permissions(role_id, data.permission_ids)
    return RoleResponse.model_validate(role)


@router.delete(
    "/{role_id}/permissions/{permission_id}",
    response_model=MessageResponse,
    summary="Remove permission from role",
    dependencies=[require_permission("update", "roles")],
)
async def remove_permission_from_role(
    role_id: UUID,
    permission_id: UUID,
    service: RoleSvc,
) -> MessageResponse:
    """Unlink a permission from a role."""
    await service.remove_permission(role_id, permission_id)
    return MessageResponse(message="Permission removed from role successfully")
