"""Authentication service for login, registration, and session management."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from gatekeeper.api.dependencies import DBSession
from gatekeeper.config import settings
from gatekeeper.core.auth.backend import (
    create_access_token,
    get_token_expiration,
    hash_token,
    pwd_context,
    verify_password,
)
from gatekeeper.core.auth.schemas import IssuedToken
from gatekeeper.core.constants import MSG_INVALID_CREDENTIALS
from gatekeeper.core.errors import UnauthorizedError
from gatekeeper.core.permissions.repos import RoleRepository
from gatekeeper.modules.users.models import User, UserSession
from gatekeeper.modules.users.repos import UserRepository, UserSessionRepository
from gatekeeper.modules.users.services import UserService


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Handles user registration, login and logout. Every issued token is
    backed by a session row; removing the row revokes the token.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_repo = UserSessionRepository(db)
        self.users = UserService(self.user_repo, RoleRepository(db), self.session_repo)

    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        role_id: UUID | None = None,
    ) -> User:
        """Register a new user.

        Args:
            email: User's email address
            password: Plain text password
            first_name: Optional given name
            last_name: Optional family name
            role_id: Optional role to assign

        Returns:
            The created user

        Raises:
            ConflictError: If email already exists
            BadRequestError: If ``role_id`` names no role
        """
        user = await self.users.add_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role_id=role_id,
        )
        logger.info("user_registered", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> tuple[User, IssuedToken]:
        """Authenticate a user with email and password.

        Unknown email and wrong password produce the same error.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user with role and permissions, issued token)

        Raises:
            UnauthorizedError: If credentials are invalid or the account
                is deactivated
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            # Spend the same hashing time as a real comparison
            pwd_context.dummy_verify()
            logger.warning("login_failed", reason="unknown_email")
            raise UnauthorizedError(
                MSG_INVALID_CREDENTIALS,
                error_code="invalid_credentials",
            )

        if not verify_password(password, user.password_hash):
            logger.warning("login_failed", reason="wrong_password", user_id=str(user.id))
            raise UnauthorizedError(
                MSG_INVALID_CREDENTIALS,
                error_code="invalid_credentials",
            )

        if not user.is_active:
            logger.warning("login_failed", reason="inactive", user_id=str(user.id))
            raise UnauthorizedError(
                "Account is deactivated",
                error_code="account_inactive",
            )

        token = await self._issue_token(user)
        user = await self.users.get_user(user.id)
        logger.info("login_succeeded", user_id=str(user.id))

        return user, token

    async def logout(self, token: str) -> int:
        """Revoke a token by deleting its session.

        Idempotent: logging out an unknown or already revoked token is
        not an error.

        Args:
            token: The exact bearer token string

        Returns:
            Number of sessions deleted
        """
        deleted = await self.session_repo.delete_by_token_hash(hash_token(token))
        logger.info("logout", sessions_deleted=deleted)
        return deleted

    async def _issue_token(self, user: User) -> IssuedToken:
        """Sign a token for a user and record its session.

        The session shares the token's expiry so both lapse together.
        """
        expires_at = get_token_expiration()
        access_token = create_access_token(user.id, user.email, expires_at=expires_at)

        await self.session_repo.create(
            UserSession(
                user_id=user.id,
                token_hash=hash_token(access_token),
                expires_at=expires_at,
            )
        )

        return IssuedToken(
            access_token=access_token,
            expires_at=expires_at,
            expires_in=settings.access_token_expire_minutes * 60,
        )


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
