"""User management API routes.

Authentication routes (register, login, logout, me) are in the auth
module. Every route here requires the matching ``users`` permission,
except changing one's own password.
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from gatekeeper.core.auth.dependencies import CurrentIdentity
from gatekeeper.core.constants import MSG_INSUFFICIENT_PERMISSIONS
from gatekeeper.core.errors import ForbiddenError
from gatekeeper.core.permissions.checker import PermissionRequirement, has_permission
from gatekeeper.core.permissions.models import PermissionAction
from gatekeeper.core.permissions.requirements import require_permission
from gatekeeper.modules.users.schemas import (
    MessageResponse,
    UserCreate,
    UserDetailResponse,
    UserListResponse,
    UserPasswordUpdate,
    UserResponse,
    UserUpdate,
)
from gatekeeper.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])

UPDATE_USERS = PermissionRequirement(PermissionAction.UPDATE, "users")


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    dependencies=[require_permission("read", "users")],
)
async def list_users(
    service: UserSvc,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> UserListResponse:
    """List users."""
    users, total = await service.list_users(page, page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    summary="Get user by ID",
    dependencies=[require_permission("read", "users")],
)
async def get_user(user_id: UUID, service: UserSvc) -> UserDetailResponse:
    """Get user by ID, including the role's permissions."""
    user = await service.get_user(user_id)
    return UserDetailResponse.model_validate(user)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    dependencies=[require_permission("create", "users")],
)
async def create_user(data: UserCreate, service: UserSvc) -> UserResponse:
    """Create a user."""
    user = await service.create_user(data)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Update profile fields, email, role assignment or the active flag.",
    dependencies=[require_permission("update", "users")],
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    service: UserSvc,
) -> UserResponse:
    """Update user by ID."""
    user = await service.update_user(user_id, data)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete user",
    dependencies=[require_permission("delete", "users")],
)
async def delete_user(user_id: UUID, service: UserSvc) -> MessageResponse:
    """Delete a user and their sessions."""
    await service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")


@router.post(
    "/{user_id}/change-password",
    response_model=MessageResponse,
    summary="Change password",
    description="Allowed for the user themself or a holder of the update users permission.",
)
async def change_password(
    user_id: UUID,
    data: UserPasswordUpdate,
    identity: CurrentIdentity,
    service: UserSvc,
) -> MessageResponse:
    """Change a user's password."""
    if identity.user.id != user_id and not has_permission(
        identity.permissions, UPDATE_USERS
    ):
        raise ForbiddenError(
            MSG_INSUFFICIENT_PERMISSIONS,
            error_code="permission_denied",
            details={"required_permission": str(UPDATE_USERS)},
        )

    await service.change_password(user_id, data.current_password, data.new_password)
    return MessageResponse(message="Password updated successfully")
