"""Repositories: SQLAlchemy implementations of the application repository Protocols."""

from accessgate.infrastructure.persistence.repositories.base import BaseRepository
from accessgate.infrastructure.persistence.repositories.menu_repo import MenuRepository
from accessgate.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from accessgate.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from accessgate.infrastructure.persistence.repositories.role_repo import RoleRepository
from accessgate.infrastructure.persistence.repositories.subscription_repo import (
    SubscriptionRepository,
)
from accessgate.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "BaseRepository",
    "MenuRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "SubscriptionRepository",
    "UserRoleRepository",
]
