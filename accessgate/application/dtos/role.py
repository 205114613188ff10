"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from accessgate.domain.enums import SystemRole


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_by_id, create_role, get_roles_for_user, etc.)."""

    id: str
    name: str
    system_role: SystemRole
    description: str | None
    is_active: bool


@dataclass(frozen=True)
class UserRoleResult:
    """User-role link read-model."""

    id: str
    user_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
