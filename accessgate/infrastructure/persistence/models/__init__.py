"""ORM models. Importing this package registers every table on Base.metadata."""

from accessgate.infrastructure.persistence.models.menu import MenuItem
from accessgate.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from accessgate.infrastructure.persistence.models.role import Role
from accessgate.infrastructure.persistence.models.subscription import UserSubscription

__all__ = [
    "MenuItem",
    "Permission",
    "Role",
    "RolePermission",
    "UserRole",
    "UserSubscription",
]
