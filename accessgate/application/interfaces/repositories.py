"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

from accessgate.domain.enums import (
    MenuType,
    PermissionAction,
    SubscriptionStatus,
    SubscriptionType,
    SystemRole,
)

if TYPE_CHECKING:
    from accessgate.application.dtos.menu import MenuItemResult, MenuSeed
    from accessgate.application.dtos.permission import PermissionResult
    from accessgate.application.dtos.role import RoleResult, UserRoleResult
    from accessgate.application.dtos.subscription import SubscriptionResult


class IRoleRepository(Protocol):
    """Protocol for role repository (DIP)."""

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        """Return role by ID."""

    async def get_by_name(self, name: str) -> RoleResult | None:
        """Return role by unique name."""

    async def get_by_system_role(self, system_role: SystemRole) -> RoleResult | None:
        """Return the built-in role carrying this tag (None for CUSTOM)."""

    async def list_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        """Return roles ordered by name."""

    async def create_role(
        self,
        name: str,
        system_role: SystemRole = SystemRole.CUSTOM,
        description: str | None = None,
    ) -> RoleResult:
        """Create role. Raises DuplicateAssignmentException on name clash."""

    async def set_active(self, role_id: str, is_active: bool) -> RoleResult | None:
        """Toggle is_active; None if role not found."""


class IPermissionRepository(Protocol):
    """Protocol for permission repository (DIP)."""

    async def get_by_id(self, permission_id: str) -> PermissionResult | None:
        """Return permission by ID."""

    async def get_by_code(self, code: str) -> PermissionResult | None:
        """Return permission by resource:action code."""

    async def list_permissions(self) -> list[PermissionResult]:
        """Return all permissions ordered by code."""

    async def create_permission(
        self,
        resource: str,
        action: PermissionAction,
        display_name: str,
        description: str | None = None,
        is_system: bool = False,
    ) -> PermissionResult:
        """Create permission. Raises DuplicateAssignmentException on code clash."""


class IRolePermissionRepository(Protocol):
    """Protocol for role-permission link repository (DIP)."""

    async def get_permissions_for_roles(
        self, role_ids: Iterable[str]
    ) -> list[PermissionResult]:
        """Return active permissions granted to any of the roles (may repeat across roles)."""

    async def get_permission_ids_for_role(self, role_id: str) -> set[str]:
        """Return IDs of permissions linked to the role."""

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> bool:
        """Insert link. Raises DuplicateAssignmentException if it already exists."""

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> bool:
        """Delete link; False if it did not exist."""


class IUserRoleRepository(Protocol):
    """Protocol for user-role link repository (DIP)."""

    async def get_active_roles_for_user(
        self, user_id: str, as_of: datetime
    ) -> list[RoleResult]:
        """Return active roles linked to the user whose link is unexpired at as_of."""

    async def get_link(self, user_id: str, role_id: str) -> UserRoleResult | None:
        """Return the user-role link if present."""

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        """Insert link. Raises DuplicateAssignmentException if it already exists."""

    async def remove_role_from_user(self, user_id: str, role_id: str) -> bool:
        """Delete link; False if it did not exist."""


class ISubscriptionRepository(Protocol):
    """Protocol for user subscription repository (DIP)."""

    async def get_by_id(self, subscription_id: str) -> SubscriptionResult | None:
        """Return subscription by ID."""

    async def list_by_status(
        self, user_id: str, status: SubscriptionStatus
    ) -> list[SubscriptionResult]:
        """Return the user's subscriptions with this status (newest start first)."""

    async def list_for_user(self, user_id: str) -> list[SubscriptionResult]:
        """Return all subscriptions for user (newest start first)."""

    async def list_lapsed_active(self, as_of: datetime) -> list[SubscriptionResult]:
        """Return ACTIVE subscriptions whose end_at <= as_of."""

    async def create_subscription(
        self,
        user_id: str,
        subscription_type: SubscriptionType,
        start_at: datetime,
        end_at: datetime,
        amount: Decimal,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        payment_reference: str | None = None,
        notes: str | None = None,
    ) -> SubscriptionResult:
        """Create subscription row."""

    async def update_subscription(
        self,
        subscription_id: str,
        *,
        status: SubscriptionStatus | None = None,
        end_at: datetime | None = None,
        amount: Decimal | None = None,
        notes: str | None = None,
    ) -> SubscriptionResult | None:
        """Update the given fields; None if not found."""


class IMenuRepository(Protocol):
    """Protocol for menu item repository (DIP)."""

    async def list_menu_items(
        self, menu_type: MenuType | None = None, include_inactive: bool = False
    ) -> list[MenuItemResult]:
        """Return flat menu rows (ordered by sort_order, name)."""

    async def get_by_name(self, name: str) -> MenuItemResult | None:
        """Return menu item by unique name."""

    async def create_menu_item(self, data: MenuSeed) -> MenuItemResult:
        """Create menu item. Raises DuplicateAssignmentException on name clash."""
