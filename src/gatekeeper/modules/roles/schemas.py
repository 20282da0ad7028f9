"""Pydantic schemas for role operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gatekeeper.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from gatekeeper.modules.permissions.schemas import PermissionResponse


class RoleBase(BaseModel):
    """Base schema for role data."""

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class RoleCreate(RoleBase):
    """Schema for creating a role, optionally with initial permissions."""

    permission_ids: list[UUID] = []


class RoleUpdate(BaseModel):
    """Schema for updating a role. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class RolePermissionsAdd(BaseModel):
    """Schema for linking permissions to a role."""

    permission_ids: list[UUID] = Field(..., min_length=1)


class RoleResponse(RoleBase):
    """Schema for role response data."""

    id: UUID
    permissions: list[PermissionResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
