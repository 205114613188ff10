"""Authorization engine: the single decision point for permission, role and entitlement checks.

Checks read the RBAC store on every call unless a PermissionCache is wired in,
in which case only permission codes are cached and every store mutation
invalidates them. Role and subscription checks always read live state.

Checks fail closed: a store error, an integrity violation or a timeout is
logged and reported as a denial with reason INDETERMINATE. Task cancellation
is never caught, so a cancelled check cannot produce an allow.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from accessgate.application.dtos.identity import AuthorizationDecision
from accessgate.application.interfaces.services import IRbacReader
from accessgate.application.services.permission_cache import PermissionCache
from accessgate.domain.enums import DecisionReason, SubscriptionType, SystemRole
from accessgate.domain.exceptions import (
    MultipleActiveSubscriptions,
    NotEntitled,
    PermissionDenied,
    RoleDenied,
    ValidationException,
)
from accessgate.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _role_label(role: SystemRole | str) -> str:
    return role.value if isinstance(role, SystemRole) else role


class AuthorizationService:
    """Answers "can this user do this thing" against current RBAC state."""

    def __init__(
        self,
        store: IRbacReader,
        cache: PermissionCache | None = None,
        check_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.cache = cache or PermissionCache()
        self.check_timeout = check_timeout

    async def _guard(
        self, check: str, user_id: str, evaluate: Callable[[], Awaitable[T]]
    ) -> T | None:
        """Run evaluate under the optional deadline. None means the check could not complete."""
        try:
            if self.check_timeout is None:
                return await evaluate()
            async with asyncio.timeout(self.check_timeout):
                return await evaluate()
        except TimeoutError:
            logger.error(
                "Authorization check %s for user %s timed out after %ss; denying",
                check,
                user_id,
                self.check_timeout,
            )
        except MultipleActiveSubscriptions as e:
            logger.error(
                "Authorization check %s for user %s hit an integrity violation: %s; denying",
                check,
                user_id,
                e.message,
            )
        except Exception:
            logger.exception(
                "Authorization check %s for user %s failed; denying", check, user_id
            )
        return None

    @staticmethod
    def _key(permission: PermissionKey | str) -> PermissionKey:
        try:
            return PermissionKey.coerce(permission)
        except ValueError as e:
            raise ValidationException(str(e), field="permission") from e

    # Raw lookups (errors propagate)

    async def _load_permission_codes(self, user_id: str) -> frozenset[str]:
        cached = await self.cache.get(user_id)
        if cached is not None:
            return cached
        # Taken before the store read; a concurrent invalidation voids the write.
        version = await self.cache.version(user_id)
        permissions = await self.store.get_permissions_for_user(user_id)
        codes = frozenset(p.code for p in permissions)
        await self.cache.set(user_id, codes, version=version)
        return codes

    async def _holds_any_role(self, user_id: str, roles: list[SystemRole | str]) -> bool:
        held = await self.store.get_roles_for_user(user_id)
        tags = {r.system_role for r in held}
        names = {r.name for r in held}
        for role in roles:
            if isinstance(role, SystemRole):
                if role in tags:
                    return True
            elif role in names or role in {t.value for t in tags}:
                return True
        return False

    async def _entitled(self, user_id: str, required_type: SubscriptionType | None) -> bool:
        subscription = await self.store.get_active_subscription(user_id)
        if subscription is None:
            return False
        return required_type is None or subscription.subscription_type == required_type

    # Checks (fail closed)

    async def get_user_permissions(self, user_id: str) -> frozenset[str]:
        """Effective resource:action codes; empty when the store cannot be read."""
        result = await self._guard(
            "get_user_permissions", user_id, lambda: self._load_permission_codes(user_id)
        )
        return frozenset() if result is None else result

    async def has_permission(self, user_id: str, permission: PermissionKey | str) -> bool:
        """True iff permission is in the union of the user's role grants. No wildcards."""
        key = self._key(permission)
        result = await self._guard(
            "has_permission", user_id, lambda: self._load_permission_codes(user_id)
        )
        return result is not None and key.code in result

    async def has_any_role(self, user_id: str, roles: Iterable[SystemRole | str]) -> bool:
        """True iff the user holds a role matching one of roles.

        A SystemRole matches the role's built-in tag; a string matches the role's
        name or tag value. Holding a role grants nothing by itself.
        """
        wanted = list(roles)
        if not wanted:
            return False
        result = await self._guard(
            "has_any_role", user_id, lambda: self._holds_any_role(user_id, wanted)
        )
        return result is True

    async def is_entitled(
        self, user_id: str, required_type: SubscriptionType | None = None
    ) -> bool:
        """True iff the user has a live ACTIVE subscription (of required_type, when given).

        Types match exactly; no tier implies another.
        """
        result = await self._guard(
            "is_entitled", user_id, lambda: self._entitled(user_id, required_type)
        )
        return result is True

    async def authorize(
        self,
        user_id: str,
        permission: PermissionKey | str | None,
        *,
        subscription_required: bool = False,
        subscription_type: SubscriptionType | None = None,
    ) -> AuthorizationDecision:
        """Composite decision: permission check AND, when gated, entitlement check.

        permission None skips the permission check (entitlement-only gates).
        """
        code = self._key(permission).code if permission is not None else None
        if code is not None:
            granted = await self._guard(
                "authorize.permission", user_id, lambda: self._load_permission_codes(user_id)
            )
            if granted is None:
                return AuthorizationDecision.deny(
                    DecisionReason.INDETERMINATE, user_id, code, check="permission"
                )
            if code not in granted:
                logger.info("Denied %s to user %s: permission not granted", code, user_id)
                return AuthorizationDecision.deny(
                    DecisionReason.PERMISSION_DENIED, user_id, code, check="permission"
                )
        if subscription_required or subscription_type is not None:
            entitled = await self._guard(
                "authorize.entitlement",
                user_id,
                lambda: self._entitled(user_id, subscription_type),
            )
            if entitled is None:
                return AuthorizationDecision.deny(
                    DecisionReason.INDETERMINATE, user_id, code, check="entitlement"
                )
            if entitled is not True:
                logger.info(
                    "Denied %s to user %s: no active %s subscription",
                    code or "access",
                    user_id,
                    subscription_type.value if subscription_type else "",
                )
                return AuthorizationDecision.deny(
                    DecisionReason.NOT_ENTITLED,
                    user_id,
                    code,
                    check="entitlement",
                    required_type=subscription_type.value if subscription_type else None,
                )
        return AuthorizationDecision.grant(user_id, code)

    # Enforcement

    async def require_permission(self, user_id: str, permission: PermissionKey | str) -> None:
        """Raise PermissionDenied unless the user holds permission."""
        decision = await self.authorize(user_id, permission)
        if not decision.allowed:
            raise PermissionDenied(
                permission=decision.permission,
                user_id=user_id,
                reason=decision.reason.value,
            )

    async def require_any_role(self, user_id: str, roles: Iterable[SystemRole | str]) -> None:
        """Raise RoleDenied unless the user holds one of roles."""
        wanted = list(roles)
        if not await self.has_any_role(user_id, wanted):
            logger.info("Denied user %s: none of roles %s", user_id, wanted)
            raise RoleDenied(
                required_roles=[_role_label(r) for r in wanted],
                user_id=user_id,
                reason=DecisionReason.ROLE_DENIED.value,
            )

    async def require_entitlement(
        self, user_id: str, required_type: SubscriptionType | None = None
    ) -> None:
        """Raise NotEntitled unless the user has a live subscription (of required_type)."""
        decision = await self.authorize(
            user_id, None, subscription_required=True, subscription_type=required_type
        )
        if not decision.allowed:
            raise NotEntitled(
                required_type=required_type.value if required_type else None,
                user_id=user_id,
                reason=decision.reason.value,
            )

    async def require(
        self,
        user_id: str,
        permission: PermissionKey | str | None,
        *,
        subscription_required: bool = False,
        subscription_type: SubscriptionType | None = None,
    ) -> AuthorizationDecision:
        """authorize(), raising the matching denial instead of returning it."""
        decision = await self.authorize(
            user_id,
            permission,
            subscription_required=subscription_required,
            subscription_type=subscription_type,
        )
        if decision.allowed:
            return decision
        if decision.details.get("check") == "entitlement":
            raise NotEntitled(
                required_type=subscription_type.value if subscription_type else None,
                user_id=user_id,
                reason=decision.reason.value,
            )
        raise PermissionDenied(
            permission=decision.permission, user_id=user_id, reason=decision.reason.value
        )

    async def invalidate_user_cache(self, user_id: str) -> None:
        await self.cache.invalidate_user(user_id)
