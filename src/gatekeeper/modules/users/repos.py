"""User and session repositories for database operations."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from gatekeeper.api.dependencies import DBSession
from gatekeeper.core.database.session import flush_unique
from gatekeeper.core.permissions.models import Role, RolePermission
from gatekeeper.modules.users.models import User, UserSession


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.session.add(user)
        await flush_unique(
            self.session, "User already exists with this email", "email_exists"
        )
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID, with_permissions: bool = False) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's UUID
            with_permissions: Also load the role and the role's permissions

        Returns:
            User if found, None otherwise
        """
        stmt = select(User).where(User.id == user_id)
        if with_permissions:
            stmt = stmt.options(
                selectinload(User.role)
                .selectinload(Role.permission_links)
                .selectinload(RolePermission.permission)
            ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address (exact match).

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(
        self,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users with pagination.

        Args:
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (users list, total count)
        """
        count_stmt = select(func.count()).select_from(User)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar_one()

        offset = (page - 1) * page_size
        stmt = (
            select(User)
            .order_by(User.created_at.desc(), User.email)
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        users = list(result.scalars().all())

        return users, total

    async def count_by_role(self, role_id: UUID) -> int:
        """Count the users assigned to a role."""
        stmt = select(func.count()).select_from(User).where(User.role_id == role_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update(self, user: User) -> User:
        """Update a user.

        Args:
            user: User instance with updated fields

        Returns:
            The updated user
        """
        await flush_unique(
            self.session, "User already exists with this email", "email_exists"
        )
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        """Delete a user.

        Args:
            user: User instance to delete
        """
        await self.session.delete(user)
        await self.session.flush()


class UserSessionRepository:
    """Repository for UserSession database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user_session: UserSession) -> UserSession:
        """Persist a new session row.

        Args:
            user_session: UserSession instance to create

        Returns:
            The created session
        """
        self.session.add(user_session)
        await self.session.flush()
        await self.session.refresh(user_session)
        return user_session

    async def get_active(self, token_hash: str, now: datetime) -> UserSession | None:
        """Get the session for a token hash if it has not expired.

        Args:
            token_hash: SHA-256 hash of the token
            now: Reference time for the expiry check

        Returns:
            UserSession if found and still valid, None otherwise
        """
        stmt = select(UserSession).where(
            UserSession.token_hash == token_hash,
            UserSession.expires_at > now,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_token_hash(self, token_hash: str) -> int:
        """Delete the sessions matching a token hash.

        Returns:
            Number of sessions deleted (zero is not an error)
        """
        stmt = delete(UserSession).where(UserSession.token_hash == token_hash)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_for_user(self, user_id: UUID) -> int:
        """Delete every session belonging to a user.

        Returns:
            Number of sessions deleted
        """
        stmt = delete(UserSession).where(UserSession.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions that expired at or before ``now``.

        Args:
            now: Reference time

        Returns:
            Number of sessions deleted
        """
        stmt = delete(UserSession).where(UserSession.expires_at <= now)
        result = await self.session.execute(stmt)
        return result.rowcount


# Type aliases for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
UserSessionRepo = Annotated[UserSessionRepository, Depends(UserSessionRepository)]
