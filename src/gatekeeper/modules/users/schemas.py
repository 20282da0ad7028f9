"""Pydantic schemas for user and authentication operations."""

import re
from datetime import datetime
from typing import Annotated
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from gatekeeper.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)


# ============================================================
# Password Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\\;'`~_+\-=/]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Requirements:
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


# ============================================================
# Email Validation
# ============================================================


def validate_email_format(email: str) -> str:
    """Check that an address is well formed and return it unchanged.

    Emails are a case-sensitive key, so unlike ``EmailStr`` the address is
    not normalized: ``Alice@Example.COM`` and ``alice@example.com`` are
    distinct users.

    Raises:
        ValueError: If the address is not a valid email
    """
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: {e}") from e
    return email


Email = Annotated[str, AfterValidator(validate_email_format)]


# ============================================================
# Nested Summaries
# ============================================================


class PermissionSummary(BaseModel):
    """Permission as shown inside a user's role."""

    id: UUID
    name: str
    resource: str
    action: str

    model_config = ConfigDict(from_attributes=True)


class RoleSummary(BaseModel):
    """Role reference shown on user listings."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class RoleWithPermissions(RoleSummary):
    """Role reference including the permissions it grants."""

    permissions: list[PermissionSummary] = []


# ============================================================
# User Schemas
# ============================================================


class UserBase(BaseModel):
    """Base schema for user data."""

    email: Email
    first_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    last_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)


class UserCreate(UserBase):
    """Schema for creating a new user with password."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role_id: UUID | None = None
    is_active: bool = True

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserUpdate(BaseModel):
    """Schema for updating user data. Omitted fields are left unchanged."""

    email: Email | None = None
    first_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    last_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    role_id: UUID | None = None
    is_active: bool | None = None


class UserPasswordUpdate(BaseModel):
    """Schema for updating user password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserResponse(UserBase):
    """Schema for user response data."""

    id: UUID
    is_active: bool
    role: RoleSummary | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserDetailResponse(UserResponse):
    """User response including the role's permissions."""

    role: RoleWithPermissions | None = None


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


# ============================================================
# Authentication Schemas
# ============================================================


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: Email
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Schema for a successful login."""

    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserDetailResponse


class RegisterRequest(UserBase):
    """Schema for self-registration."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role_id: UUID | None = None

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class RegisterResponse(BaseModel):
    """Schema for registration response."""

    message: str = "User registered successfully"
    user: UserResponse


class MeResponse(BaseModel):
    """The authenticated caller and the permission names they hold."""

    user: UserDetailResponse
    permissions: list[str]
