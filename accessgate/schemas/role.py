"""Role and grant API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from accessgate.domain.enums import SystemRole


class RoleCreateRequest(BaseModel):
    """Request body for creating a role."""

    name: str = Field(..., min_length=1, max_length=100)
    system_role: SystemRole = SystemRole.CUSTOM
    description: str | None = Field(default=None, max_length=500)


class RoleResponse(BaseModel):
    """Role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    system_role: SystemRole
    description: str | None
    is_active: bool


class RolePermissionsUpdate(BaseModel):
    """Request body replacing a role's grants."""

    permissions: list[str] = Field(default_factory=list, max_length=200)


class RolePermissionsResponse(BaseModel):
    """Permission codes granted to a role."""

    role_id: str
    permissions: list[str]


class UserRoleAssign(BaseModel):
    """Optional body when assigning a role to a user."""

    expires_at: datetime | None = None
