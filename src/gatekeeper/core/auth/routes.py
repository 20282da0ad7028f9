"""Authentication API routes.

Provides endpoints for:
- User registration
- Login/logout
- The current caller's identity
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from gatekeeper.core.auth.dependencies import CurrentIdentity, get_bearer_token
from gatekeeper.core.auth.service import AuthSvc
from gatekeeper.core.errors import BadRequestError
from gatekeeper.modules.users.schemas import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserDetailResponse,
    UserResponse,
)


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Creates a user account, optionally assigned to an existing role.",
)
async def register(
    data: RegisterRequest,
    service: AuthSvc,
) -> RegisterResponse:
    """Register a new user."""
    user = await service.register(
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role_id=data.role_id,
    )
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login with email and password",
    description="Authenticate with email and password to receive a bearer token.",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
) -> LoginResponse:
    """Login with email and password."""
    user, token = await service.login(email=data.email, password=data.password)

    return LoginResponse(
        token=token.access_token,
        token_type=token.token_type,
        expires_in=token.expires_in,
        user=UserDetailResponse.model_validate(user),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Revoke the bearer token sent in the Authorization header.",
)
async def logout(
    token: Annotated[str | None, Depends(get_bearer_token)],
    service: AuthSvc,
) -> MessageResponse:
    """Logout by deleting the session for the presented token."""
    if token is None:
        raise BadRequestError("Token is required", error_code="token_required")

    await service.logout(token)
    return MessageResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
    description="Returns the authenticated user with role and permission names.",
)
async def get_me(identity: CurrentIdentity) -> MeResponse:
    """Get the current user's profile and permissions."""
    return MeResponse(
        user=UserDetailResponse.model_validate(identity.user),
        permissions=identity.permission_names,
    )
