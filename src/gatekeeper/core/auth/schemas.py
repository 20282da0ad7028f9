"""Authentication schemas for token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Attributes:
        user_id: The user's UUID
        email: The email the token was issued for
        exp: Token expiration time
        type: Token type (always "access" for tokens issued here)
        jti: Unique token ID
    """

    user_id: UUID
    email: str
    exp: datetime
    type: str = "access"
    jti: str | None = None


class IssuedToken(BaseModel):
    """An access token together with its lifetime.

    Attributes:
        access_token: Signed JWT for API access
        token_type: Always "bearer"
        expires_at: When the token and its session expire
        expires_in: Token lifetime in seconds
    """

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    expires_in: int
