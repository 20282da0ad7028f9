"""Authentication backend for JWT and password handling.

This module provides core authentication utilities including:
- Password hashing with bcrypt
- JWT access token creation and verification
- Token hashing for session storage
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from gatekeeper.config import settings
from gatekeeper.core.auth.schemas import TokenData
from gatekeeper.core.constants import ACCESS_TOKEN_JTI_LENGTH, TOKEN_TYPE_ACCESS


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# JWT Token Utilities
# ============================================================


def get_token_expiration(minutes: int | None = None) -> datetime:
    """Get the expiration datetime for a new access token.

    Args:
        minutes: Lifetime in minutes, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Timezone-aware expiration datetime
    """
    if minutes is None:
        minutes = settings.access_token_expire_minutes
    return datetime.now(UTC) + timedelta(minutes=minutes)


def create_access_token(
    user_id: UUID,
    email: str,
    expires_at: datetime | None = None,
) -> str:
    """Create a signed JWT access token.

    The ``jti`` claim is random, so two tokens issued for the same user in
    the same second still differ.

    Args:
        user_id: The user's UUID
        email: The user's email
        expires_at: Optional custom expiration time

    Returns:
        Encoded JWT access token
    """
    expire = expires_at or get_token_expiration()

    to_encode: dict[str, Any] = {
        "id": str(user_id),
        "sub": str(user_id),
        "email": email,
        "exp": expire,
        "type": TOKEN_TYPE_ACCESS,
        "iat": datetime.now(UTC),
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
    }

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def hash_token(token: str) -> str:
    """Hash a token for secure storage.

    Sessions are looked up by this SHA-256 digest of the exact token
    string, so the raw token never reaches the database.

    Args:
        token: The token to hash

    Returns:
        SHA-256 hash of the token
    """
    return hashlib.sha256(token.encode()).hexdigest()


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a JWT token.

    Args:
        token: The JWT token to decode

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        user_id = payload.get("sub") or payload.get("id")
        email = payload.get("email")
        exp = payload.get("exp")
        token_type = payload.get("type", TOKEN_TYPE_ACCESS)
        jti = payload.get("jti")

        if not user_id or not email or exp is None:
            return None

        return TokenData(
            user_id=UUID(user_id),
            email=email,
            exp=datetime.fromtimestamp(exp, tz=UTC),
            type=token_type,
            jti=jti,
        )

    except (JWTError, ValueError):
        return None
