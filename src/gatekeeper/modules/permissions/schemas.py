"""Pydantic schemas for permission operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gatekeeper.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
    MAX_PERMISSION_RESOURCE_LENGTH,
)
from gatekeeper.core.permissions.models import PermissionAction


class PermissionBase(BaseModel):
    """Base schema for permission data."""

    name: str = Field(..., min_length=1, max_length=MAX_PERMISSION_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    resource: str = Field(..., min_length=1, max_length=MAX_PERMISSION_RESOURCE_LENGTH)
    action: PermissionAction


class PermissionCreate(PermissionBase):
    """Schema for creating a permission."""


class PermissionUpdate(BaseModel):
    """Schema for updating a permission. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=MAX_PERMISSION_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    resource: str | None = Field(
        None, min_length=1, max_length=MAX_PERMISSION_RESOURCE_LENGTH
    )
    action: PermissionAction | None = None


class PermissionResponse(PermissionBase):
    """Schema for permission response data."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
