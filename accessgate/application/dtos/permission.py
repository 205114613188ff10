"""DTOs for permission use cases (no dependency on ORM)."""

from dataclasses import dataclass

from accessgate.domain.enums import PermissionAction
from accessgate.domain.value_objects import PermissionKey


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model. Hashable so effective grants can be collapsed with set union."""

    id: str
    code: str
    resource: str
    action: PermissionAction
    display_name: str
    description: str | None
    is_active: bool
    is_system: bool

    @property
    def key(self) -> PermissionKey:
        return PermissionKey(self.resource, self.action)


@dataclass(frozen=True)
class RolePermissionResult:
    """Role-permission link read-model; its existence is the grant."""

    id: str
    role_id: str
    permission_id: str
