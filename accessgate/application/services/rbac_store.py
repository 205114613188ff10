"""RBAC store: roles, permissions, grants, user-role links and subscriptions.

Composes the repository ports into the read and mutation contracts the
authorization engine, credential service and admin use cases rely on.
Mutations are idempotent at the link level (re-granting is a no-op success)
and invalidate the optional permission cache before returning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import Decimal

from accessgate.application.dtos.identity import Identity, IdentitySource
from accessgate.application.dtos.permission import PermissionResult
from accessgate.application.dtos.role import RoleResult
from accessgate.application.dtos.subscription import SubscriptionResult
from accessgate.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    ISubscriptionRepository,
    IUserRoleRepository,
)
from accessgate.application.services.permission_cache import PermissionCache
from accessgate.domain.enums import (
    PermissionAction,
    SubscriptionStatus,
    SubscriptionType,
    SystemRole,
)
from accessgate.domain.exceptions import (
    MultipleActiveSubscriptions,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from accessgate.domain.value_objects import PermissionKey
from accessgate.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class RbacStore:
    """Storage-facing RBAC contracts (implements IRbacReader)."""

    def __init__(
        self,
        roles: IRoleRepository,
        permissions: IPermissionRepository,
        role_permissions: IRolePermissionRepository,
        user_roles: IUserRoleRepository,
        subscriptions: ISubscriptionRepository,
        cache: PermissionCache | None = None,
    ) -> None:
        self.roles = roles
        self.permissions = permissions
        self.role_permissions = role_permissions
        self.user_roles = user_roles
        self.subscriptions = subscriptions
        self.cache = cache or PermissionCache()

    # Reads

    async def get_roles_for_user(self, user_id: str) -> set[RoleResult]:
        """Active roles held through user-role links that have not expired."""
        return set(await self.user_roles.get_active_roles_for_user(user_id, utc_now()))

    async def get_permissions_for_user(self, user_id: str) -> set[PermissionResult]:
        """Union of the active permissions granted to each held role, keyed by permission id."""
        roles = await self.get_roles_for_user(user_id)
        if not roles:
            return set()
        granted = await self.role_permissions.get_permissions_for_roles(r.id for r in roles)
        by_id = {p.id: p for p in granted}
        return set(by_id.values())

    async def get_active_subscription(self, user_id: str) -> SubscriptionResult | None:
        """The user's ACTIVE subscription whose window has not ended, or None.

        Raises:
            MultipleActiveSubscriptions: more than one row has status ACTIVE.
        """
        active = await self.subscriptions.list_by_status(user_id, SubscriptionStatus.ACTIVE)
        if len(active) > 1:
            logger.error(
                "Integrity violation: user %s has %d active subscriptions (%s)",
                user_id,
                len(active),
                ", ".join(s.id for s in active),
            )
            raise MultipleActiveSubscriptions(user_id, [s.id for s in active])
        if not active:
            return None
        subscription = active[0]
        return subscription if subscription.is_active_at(utc_now()) else None

    async def resolve_identity(self, user_id: str) -> Identity:
        """Live identity: current roles and entitlement."""
        roles = await self.get_roles_for_user(user_id)
        subscription = await self.get_active_subscription(user_id)
        return Identity(
            user_id=user_id,
            role_ids=frozenset(r.id for r in roles),
            role_names=frozenset(r.name for r in roles),
            system_roles=frozenset(
                r.system_role for r in roles if r.system_role.is_builtin
            ),
            subscription_type=subscription.subscription_type if subscription else None,
            subscription_status=subscription.status if subscription else None,
            source=IdentitySource.LIVE,
        )

    async def get_role(self, role_id: str) -> RoleResult:
        role = await self.roles.get_by_id(role_id)
        if role is None:
            raise ResourceNotFoundException("Role", role_id)
        return role

    async def get_permission(self, permission: PermissionKey | str) -> PermissionResult:
        """Look a permission up by key or resource:action code."""
        try:
            key = PermissionKey.coerce(permission)
        except ValueError as e:
            raise ValidationException(str(e), field="permission") from e
        found = await self.permissions.get_by_code(key.code)
        if found is None:
            raise ResourceNotFoundException("Permission", key.code)
        return found

    async def list_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        return await self.roles.list_roles(include_inactive=include_inactive)

    async def list_permissions(self) -> list[PermissionResult]:
        return await self.permissions.list_permissions()

    async def get_role_permission_codes(self, role_id: str) -> frozenset[str]:
        await self.get_role(role_id)
        granted = await self.role_permissions.get_permissions_for_roles([role_id])
        return frozenset(p.code for p in granted)

    # Role and permission administration

    async def create_role(
        self,
        name: str,
        system_role: SystemRole = SystemRole.CUSTOM,
        description: str | None = None,
    ) -> RoleResult:
        name = name.strip()
        if not name:
            raise ValidationException("Role name is required", field="name")
        if await self.roles.get_by_name(name) is not None:
            raise ResourceAlreadyExistsException("Role", name)
        if system_role.is_builtin:
            if await self.roles.get_by_system_role(system_role) is not None:
                raise ResourceAlreadyExistsException("Role", system_role.value)
        role = await self.roles.create_role(name, system_role, description)
        logger.info("Created role %s (%s, tag=%s)", role.name, role.id, role.system_role.value)
        return role

    async def create_permission(
        self,
        resource: str,
        action: PermissionAction | str,
        display_name: str | None = None,
        description: str | None = None,
        is_system: bool = False,
    ) -> PermissionResult:
        try:
            key = PermissionKey(resource, PermissionAction(action))
        except ValueError as e:
            raise ValidationException(str(e), field="permission") from e
        if await self.permissions.get_by_code(key.code) is not None:
            raise ResourceAlreadyExistsException("Permission", key.code)
        permission = await self.permissions.create_permission(
            key.resource,
            key.action,
            display_name or f"{key.action.value.title()} {key.resource}",
            description,
            is_system,
        )
        logger.info("Created permission %s (%s)", permission.code, permission.id)
        return permission

    async def set_role_active(self, role_id: str, is_active: bool) -> RoleResult:
        role = await self.roles.set_active(role_id, is_active)
        if role is None:
            raise ResourceNotFoundException("Role", role_id)
        await self.cache.invalidate_all()
        logger.info("Role %s is_active=%s", role_id, is_active)
        return role

    async def grant_permission_to_role(
        self, role_id: str, permission: PermissionKey | str
    ) -> bool:
        """Link permission to role. Returns False when the grant already existed."""
        await self.get_role(role_id)
        perm = await self.get_permission(permission)
        if perm.id in await self.role_permissions.get_permission_ids_for_role(role_id):
            return False
        await self.role_permissions.assign_permission_to_role(role_id, perm.id)
        await self.cache.invalidate_all()
        logger.info("Granted %s to role %s", perm.code, role_id)
        return True

    async def revoke_permission_from_role(
        self, role_id: str, permission: PermissionKey | str
    ) -> bool:
        """Unlink permission from role. Returns False when there was no grant."""
        await self.get_role(role_id)
        perm = await self.get_permission(permission)
        removed = await self.role_permissions.remove_permission_from_role(role_id, perm.id)
        if removed:
            await self.cache.invalidate_all()
            logger.info("Revoked %s from role %s", perm.code, role_id)
        return removed

    async def replace_role_permissions(
        self, role_id: str, permissions: Iterable[PermissionKey | str]
    ) -> frozenset[str]:
        """Make the role's grants exactly the given set; returns the resulting codes."""
        await self.get_role(role_id)
        wanted = {p.id: p for p in [await self.get_permission(x) for x in permissions]}
        current = await self.role_permissions.get_permission_ids_for_role(role_id)
        to_add = wanted.keys() - current
        to_remove = current - wanted.keys()
        for permission_id in to_remove:
            await self.role_permissions.remove_permission_from_role(role_id, permission_id)
        for permission_id in to_add:
            await self.role_permissions.assign_permission_to_role(role_id, permission_id)
        if to_add or to_remove:
            await self.cache.invalidate_all()
            logger.info(
                "Replaced grants on role %s (+%d, -%d)", role_id, len(to_add), len(to_remove)
            )
        return frozenset(p.code for p in wanted.values())

    # User-role links

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> bool:
        """Link user to role. Returns False when an unexpired link already existed.

        An expired link is replaced so the role is held again.
        """
        await self.get_role(role_id)
        expires_at = ensure_utc(expires_at)
        if expires_at is not None and expires_at <= utc_now():
            raise ValidationException("expires_at must be in the future", field="expires_at")
        link = await self.user_roles.get_link(user_id, role_id)
        if link is not None:
            if link.expires_at is None or link.expires_at > utc_now():
                return False
            await self.user_roles.remove_role_from_user(user_id, role_id)
        await self.user_roles.assign_role_to_user(user_id, role_id, assigned_by, expires_at)
        await self.cache.invalidate_user(user_id)
        logger.info("Assigned role %s to user %s (by %s)", role_id, user_id, assigned_by)
        return True

    async def revoke_role_from_user(self, user_id: str, role_id: str) -> bool:
        """Unlink user from role. Returns False when there was no link."""
        removed = await self.user_roles.remove_role_from_user(user_id, role_id)
        if removed:
            await self.cache.invalidate_user(user_id)
            logger.info("Revoked role %s from user %s", role_id, user_id)
        return removed

    # Subscriptions

    async def create_subscription(
        self,
        user_id: str,
        subscription_type: SubscriptionType,
        end_at: datetime | None = None,
        *,
        start_at: datetime | None = None,
        duration_days: int | None = None,
        amount: Decimal = Decimal("0"),
        payment_reference: str | None = None,
        notes: str | None = None,
    ) -> SubscriptionResult:
        """Create an ACTIVE subscription, retiring any ACTIVE row the user already has.

        Retired rows become EXPIRED when their window has ended, INACTIVE otherwise.
        Re-submitting the current subscription (same type, end and payment
        reference) returns it unchanged.
        """
        now = utc_now()
        start_at = ensure_utc(start_at) or now
        if end_at is None:
            if duration_days is None or duration_days <= 0:
                raise ValidationException(
                    "end_at or a positive duration_days is required", field="end_at"
                )
            end_at = start_at + timedelta(days=duration_days)
        end_at = ensure_utc(end_at)
        assert end_at is not None
        if end_at <= start_at:
            raise ValidationException("end_at must be after start_at", field="end_at")
        if amount < 0:
            raise ValidationException("amount must not be negative", field="amount")

        existing = await self.subscriptions.list_by_status(user_id, SubscriptionStatus.ACTIVE)
        for current in existing:
            if (
                current.subscription_type == subscription_type
                and current.end_at == end_at
                and current.payment_reference == payment_reference
                and current.is_active_at(now)
            ):
                return current
        for current in existing:
            retired = (
                SubscriptionStatus.EXPIRED
                if current.end_at <= now
                else SubscriptionStatus.INACTIVE
            )
            await self.subscriptions.update_subscription(current.id, status=retired)
            logger.info(
                "Retired subscription %s for user %s as %s", current.id, user_id, retired.value
            )
        created = await self.subscriptions.create_subscription(
            user_id,
            subscription_type,
            start_at,
            end_at,
            amount,
            SubscriptionStatus.ACTIVE,
            payment_reference,
            notes,
        )
        logger.info(
            "Created %s subscription %s for user %s until %s",
            subscription_type.value,
            created.id,
            user_id,
            end_at.isoformat(),
        )
        return created

    async def update_subscription_status(
        self, subscription_id: str, status: SubscriptionStatus
    ) -> SubscriptionResult:
        """Set a subscription's status. Activating is refused while another row is ACTIVE."""
        subscription = await self.subscriptions.get_by_id(subscription_id)
        if subscription is None:
            raise ResourceNotFoundException("Subscription", subscription_id)
        if subscription.status == status:
            return subscription
        if status == SubscriptionStatus.ACTIVE:
            others = [
                s
                for s in await self.subscriptions.list_by_status(
                    subscription.user_id, SubscriptionStatus.ACTIVE
                )
                if s.id != subscription_id
            ]
            if others:
                raise ValidationException(
                    f"User {subscription.user_id} already has an active subscription",
                    field="status",
                )
        updated = await self.subscriptions.update_subscription(subscription_id, status=status)
        assert updated is not None
        logger.info(
            "Subscription %s status %s -> %s",
            subscription_id,
            subscription.status.value,
            status.value,
        )
        return updated

    async def cancel_subscription(
        self, user_id: str, reason: str | None = None
    ) -> SubscriptionResult | None:
        """Cancel the user's ACTIVE subscription; None when there is nothing to cancel."""
        active = await self.subscriptions.list_by_status(user_id, SubscriptionStatus.ACTIVE)
        if not active:
            return None
        cancelled: SubscriptionResult | None = None
        for current in active:
            notes = current.notes
            if reason:
                notes = f"{notes}\nCancelled: {reason}" if notes else f"Cancelled: {reason}"
            cancelled = await self.subscriptions.update_subscription(
                current.id, status=SubscriptionStatus.CANCELLED, notes=notes
            )
            logger.info("Cancelled subscription %s for user %s", current.id, user_id)
        return cancelled

    async def renew_subscription(
        self,
        user_id: str,
        new_end_at: datetime,
        amount: Decimal = Decimal("0"),
    ) -> SubscriptionResult:
        """Extend the live subscription to new_end_at, adding amount to what was paid."""
        current = await self.get_active_subscription(user_id)
        if current is None:
            raise ResourceNotFoundException("ActiveSubscription", user_id)
        new_end_at = ensure_utc(new_end_at)
        assert new_end_at is not None
        if new_end_at <= current.end_at:
            raise ValidationException(
                "new_end_at must be after the current end_at", field="new_end_at"
            )
        if amount < 0:
            raise ValidationException("amount must not be negative", field="amount")
        renewed = await self.subscriptions.update_subscription(
            current.id, end_at=new_end_at, amount=current.amount + amount
        )
        assert renewed is not None
        logger.info(
            "Renewed subscription %s for user %s until %s",
            current.id,
            user_id,
            new_end_at.isoformat(),
        )
        return renewed

    async def get_subscription_history(self, user_id: str) -> list[SubscriptionResult]:
        return await self.subscriptions.list_for_user(user_id)

    async def expire_lapsed_subscriptions(self) -> int:
        """Mark ACTIVE subscriptions whose window has ended as EXPIRED; returns the count."""
        lapsed = await self.subscriptions.list_lapsed_active(utc_now())
        for subscription in lapsed:
            await self.subscriptions.update_subscription(
                subscription.id, status=SubscriptionStatus.EXPIRED
            )
        if lapsed:
            logger.info("Expired %d lapsed subscriptions", len(lapsed))
        return len(lapsed)
