"""Authorization queries: permission, role and entitlement checks, identity views."""

from __future__ import annotations

from dataclasses import dataclass

from accessgate.application.dispatcher import Query
from accessgate.application.dtos.identity import AuthorizationDecision, Identity
from accessgate.application.dtos.role import RoleResult
from accessgate.application.use_cases.base import Handler
from accessgate.domain.enums import SubscriptionType, SystemRole


@dataclass(frozen=True)
class CheckPermission(Query):
    user_id: str
    permission: str


@dataclass(frozen=True)
class CheckAnyRole(Query):
    user_id: str
    roles: tuple[SystemRole | str, ...]


@dataclass(frozen=True)
class CheckEntitlement(Query):
    user_id: str
    subscription_type: SubscriptionType | None = None


@dataclass(frozen=True)
class Authorize(Query):
    """Composite check for a protected operation."""

    user_id: str
    permission: str | None
    subscription_required: bool = False
    subscription_type: SubscriptionType | None = None


@dataclass(frozen=True)
class GetUserPermissions(Query):
    user_id: str


@dataclass(frozen=True)
class GetUserRoles(Query):
    user_id: str


@dataclass(frozen=True)
class ResolveIdentity(Query):
    user_id: str


class CheckPermissionHandler(Handler):
    async def handle(self, request: CheckPermission) -> bool:
        return await self.ctx.authz.has_permission(request.user_id, request.permission)


class CheckAnyRoleHandler(Handler):
    async def handle(self, request: CheckAnyRole) -> bool:
        return await self.ctx.authz.has_any_role(request.user_id, request.roles)


class CheckEntitlementHandler(Handler):
    async def handle(self, request: CheckEntitlement) -> bool:
        return await self.ctx.authz.is_entitled(request.user_id, request.subscription_type)


class AuthorizeHandler(Handler):
    async def handle(self, request: Authorize) -> AuthorizationDecision:
        return await self.ctx.authz.authorize(
            request.user_id,
            request.permission,
            subscription_required=request.subscription_required,
            subscription_type=request.subscription_type,
        )


class GetUserPermissionsHandler(Handler):
    async def handle(self, request: GetUserPermissions) -> frozenset[str]:
        return await self.ctx.authz.get_user_permissions(request.user_id)


class GetUserRolesHandler(Handler):
    async def handle(self, request: GetUserRoles) -> list[RoleResult]:
        roles = await self.ctx.store.get_roles_for_user(request.user_id)
        return sorted(roles, key=lambda r: r.name)


class ResolveIdentityHandler(Handler):
    async def handle(self, request: ResolveIdentity) -> Identity:
        return await self.ctx.store.resolve_identity(request.user_id)


HANDLERS: list[tuple[type, type]] = [
    (CheckPermission, CheckPermissionHandler),
    (CheckAnyRole, CheckAnyRoleHandler),
    (CheckEntitlement, CheckEntitlementHandler),
    (Authorize, AuthorizeHandler),
    (GetUserPermissions, GetUserPermissionsHandler),
    (GetUserRoles, GetUserRolesHandler),
    (ResolveIdentity, ResolveIdentityHandler),
]
