"""User and session database models."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatekeeper.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    SHA256_HEX_LENGTH,
)
from gatekeeper.core.database.base import Base, TimestampMixin, UUIDMixin
from gatekeeper.core.permissions.models import Role


class User(Base, UUIDMixin, TimestampMixin):
    """User model representing an account that can authenticate.

    Attributes:
        email: Unique email address (compared case-sensitively)
        password_hash: Bcrypt hash of the password
        first_name: Optional given name
        last_name: Optional family name
        is_active: Whether the user can log in
        role_id: The single role assigned to the user, if any
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    first_name: Mapped[str | None] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=True,
    )
    last_name: Mapped[str | None] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    role_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # Relationships
    role: Mapped[Role | None] = relationship(
        Role,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role_id={self.role_id})>"


class UserSession(Base, UUIDMixin, TimestampMixin):
    """Server-side record of an issued access token.

    A token is honoured only while a row with its hash exists and has not
    expired. Logout deletes the row.

    Attributes:
        user_id: The user this session belongs to
        token_hash: SHA-256 hash of the exact token string
        expires_at: When the session stops being valid
    """

    __tablename__ = "sessions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(
        String(SHA256_HEX_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserSession(id={self.id}, user_id={self.user_id})>"
