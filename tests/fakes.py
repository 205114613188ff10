"""In-memory stand-ins for the RBAC reader and the cache backend."""

import asyncio
import fnmatch
from datetime import timedelta
from decimal import Decimal
from typing import Any

from accessgate.application.dtos.identity import Identity
from accessgate.application.dtos.permission import PermissionResult
from accessgate.application.dtos.role import RoleResult
from accessgate.application.dtos.subscription import SubscriptionResult
from accessgate.domain.enums import (
    PermissionAction,
    SubscriptionStatus,
    SubscriptionType,
    SystemRole,
)
from accessgate.domain.exceptions import MultipleActiveSubscriptions
from accessgate.domain.value_objects import PermissionKey
from accessgate.shared.utils.datetime import utc_now


def make_role(
    role_id: str, name: str, system_role: SystemRole = SystemRole.CUSTOM
) -> RoleResult:
    return RoleResult(
        id=role_id, name=name, system_role=system_role, description=None, is_active=True
    )


def make_permission(code: str) -> PermissionResult:
    key = PermissionKey.parse(code)
    return PermissionResult(
        id=f"perm-{code}",
        code=key.code,
        resource=key.resource,
        action=PermissionAction(key.action),
        display_name=code,
        description=None,
        is_active=True,
        is_system=False,
    )


def make_subscription(
    user_id: str,
    subscription_type: SubscriptionType = SubscriptionType.PREMIUM,
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
    days_left: int = 30,
) -> SubscriptionResult:
    now = utc_now()
    return SubscriptionResult(
        id=f"sub-{user_id}-{subscription_type.value}",
        user_id=user_id,
        subscription_type=subscription_type,
        status=status,
        start_at=now - timedelta(days=1),
        end_at=now + timedelta(days=days_left),
        amount=Decimal("10.00"),
        payment_reference=None,
        notes=None,
    )


class FakeRbacReader:
    """IRbacReader over dicts. Set `error` to make every read raise, `delay` to stall."""

    def __init__(self) -> None:
        self.roles: dict[str, set[RoleResult]] = {}
        self.grants: dict[str, set[str]] = {}
        self.subscriptions: dict[str, list[SubscriptionResult]] = {}
        self.error: Exception | None = None
        self.delay: float = 0
        self.permission_reads = 0

    def give_role(self, user_id: str, role: RoleResult, *codes: str) -> None:
        self.roles.setdefault(user_id, set()).add(role)
        self.grants.setdefault(role.id, set()).update(codes)

    async def _enter(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def get_roles_for_user(self, user_id: str) -> set[RoleResult]:
        await self._enter()
        return set(self.roles.get(user_id, set()))

    async def get_permissions_for_user(self, user_id: str) -> set[PermissionResult]:
        await self._enter()
        self.permission_reads += 1
        codes: set[str] = set()
        for role in self.roles.get(user_id, set()):
            codes |= self.grants.get(role.id, set())
        return {make_permission(c) for c in codes}

    async def get_active_subscription(self, user_id: str) -> SubscriptionResult | None:
        await self._enter()
        active = [
            s for s in self.subscriptions.get(user_id, []) if s.status == SubscriptionStatus.ACTIVE
        ]
        if len(active) > 1:
            raise MultipleActiveSubscriptions(user_id, [s.id for s in active])
        if active and active[0].is_active_at(utc_now()):
            return active[0]
        return None

    async def resolve_identity(self, user_id: str) -> Identity:
        roles = await self.get_roles_for_user(user_id)
        subscription = await self.get_active_subscription(user_id)
        return Identity(
            user_id=user_id,
            role_ids=frozenset(r.id for r in roles),
            role_names=frozenset(r.name for r in roles),
            system_roles=frozenset(
                r.system_role for r in roles if r.system_role is not SystemRole.CUSTOM
            ),
            subscription_type=subscription.subscription_type if subscription else None,
            subscription_status=subscription.status if subscription else None,
        )


class FakeCache:
    """ICacheService over a dict; `available` toggles the backend."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.available = True

    def is_available(self) -> bool:
        return self.available

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        self.data[key] = value
        return True

    async def delete(self, key: str) -> bool:
        self.data.pop(key, None)
        return True

    async def delete_pattern(self, pattern: str) -> int:
        keys = [k for k in self.data if fnmatch.fnmatch(k, pattern)]
        for key in keys:
            del self.data[key]
        return len(keys)
