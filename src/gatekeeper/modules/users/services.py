"""User service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from gatekeeper.core.auth.backend import hash_password, verify_password
from gatekeeper.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
)
from gatekeeper.core.permissions.repos import RoleRepo
from gatekeeper.modules.users.models import User
from gatekeeper.modules.users.repos import UserRepo, UserSessionRepo
from gatekeeper.modules.users.schemas import UserCreate, UserUpdate


logger = structlog.get_logger()


class UserService:
    """Service for user management operations.

    Contains business logic for user CRUD operations,
    password management, and role assignment.
    """

    def __init__(
        self,
        repo: UserRepo,
        role_repo: RoleRepo,
        session_repo: UserSessionRepo,
    ) -> None:
        self.repo = repo
        self.role_repo = role_repo
        self.session_repo = session_repo

    async def _ensure_email_available(self, email: str, user_id: UUID | None = None) -> None:
        existing = await self.repo.get_by_email(email)
        if existing and existing.id != user_id:
            raise ConflictError(
                "User already exists with this email",
                error_code="email_exists",
                details={"email": email},
            )

    async def _ensure_role_exists(self, role_id: UUID) -> None:
        role = await self.role_repo.get_by_id(role_id)
        if not role:
            raise BadRequestError(
                "Role does not exist",
                error_code="invalid_role",
                details={"role_id": str(role_id)},
            )

    async def add_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        role_id: UUID | None = None,
        is_active: bool = True,
    ) -> User:
        """Create a user from already validated values.

        Args:
            email: Email address (unique, case-sensitive)
            password: Plain text password, stored only as a bcrypt hash
            first_name: Optional given name
            last_name: Optional family name
            role_id: Optional role to assign
            is_active: Whether the user may log in

        Returns:
            The created user with role and permissions loaded

        Raises:
            ConflictError: If the email is already registered
            BadRequestError: If ``role_id`` names no role
        """
        await self._ensure_email_available(email)
        if role_id is not None:
            await self._ensure_role_exists(role_id)

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role_id=role_id,
            is_active=is_active,
        )
        user = await self.repo.create(user)
        logger.info("user_created", user_id=str(user.id))
        return await self.get_user(user.id)

    async def create_user(self, data: UserCreate) -> User:
        """Create a new user.

        Args:
            data: User creation data

        Returns:
            The created user
        """
        return await self.add_user(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=data.role_id,
            is_active=data.is_active,
        )

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID with role and permissions loaded.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id, with_permissions=True)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users with pagination."""
        return await self.repo.list_all(page, page_size)

    async def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        """Update a user's profile, role or active flag.

        Only fields present in the request are applied. Sending
        ``role_id: null`` explicitly removes the user's role.

        Args:
            user_id: The user's UUID
            data: Update data

        Returns:
            The updated user

        Raises:
            NotFoundError: If user not found
            ConflictError: If the new email belongs to another user
            BadRequestError: If the new role does not exist
        """
        user = await self.get_user(user_id)
        update_data = data.model_dump(exclude_unset=True)

        email = update_data.get("email")
        if email is not None and email != user.email:
            await self._ensure_email_available(email, user.id)
            user.email = email

        for field in ("first_name", "last_name"):
            if field in update_data:
                setattr(user, field, update_data[field])

        if update_data.get("is_active") is not None:
            user.is_active = update_data["is_active"]

        if "role_id" in update_data:
            role_id = update_data["role_id"]
            if role_id is not None:
                await self._ensure_role_exists(role_id)
            user.role_id = role_id

        await self.repo.update(user)
        logger.info("user_updated", user_id=str(user.id), fields=sorted(update_data))
        return await self.get_user(user.id)

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """Replace a user's password after verifying the current one.

        Raises:
            NotFoundError: If user not found
            UnauthorizedError: If the current password is wrong
        """
        user = await self.get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise UnauthorizedError(
                "Current password is incorrect",
                error_code="invalid_password",
            )

        user.password_hash = hash_password(new_password)
        await self.repo.update(user)
        logger.info("password_changed", user_id=str(user.id))

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user and every session they hold.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.get_user(user_id)
        await self.session_repo.delete_for_user(user.id)
        await self.repo.delete(user)
        logger.info("user_deleted", user_id=str(user_id))


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
