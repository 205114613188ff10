"""Role and permission administration: roles, permissions, grants, user-role links.

Commands carrying an actor_id are checked against the admin permission
for their area before anything is written.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from accessgate.application.dispatcher import Command, Query
from accessgate.application.dtos.permission import PermissionResult
from accessgate.application.dtos.role import RoleResult
from accessgate.application.use_cases.base import Handler
from accessgate.domain.enums import PermissionAction, SystemRole

ROLES_CREATE = "roles:create"
ROLES_EDIT = "roles:edit"
ROLES_VIEW = "roles:view"
PERMISSIONS_CREATE = "permissions:create"
PERMISSIONS_VIEW = "permissions:view"
USERS_MANAGE = "users:manage"


@dataclass(frozen=True)
class CreateRole(Command):
    name: str
    system_role: SystemRole = SystemRole.CUSTOM
    description: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class CreatePermission(Command):
    resource: str
    action: PermissionAction
    display_name: str | None = None
    description: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class SetRoleActive(Command):
    role_id: str
    is_active: bool
    actor_id: str | None = None


@dataclass(frozen=True)
class GrantPermissionToRole(Command):
    role_id: str
    permission: str
    actor_id: str | None = None


@dataclass(frozen=True)
class RevokePermissionFromRole(Command):
    role_id: str
    permission: str
    actor_id: str | None = None


@dataclass(frozen=True)
class ReplaceRolePermissions(Command):
    role_id: str
    permissions: tuple[str, ...]
    actor_id: str | None = None


@dataclass(frozen=True)
class AssignRoleToUser(Command):
    user_id: str
    role_id: str
    expires_at: datetime | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class RevokeRoleFromUser(Command):
    user_id: str
    role_id: str
    actor_id: str | None = None


@dataclass(frozen=True)
class ListRoles(Query):
    include_inactive: bool = False
    actor_id: str | None = None


@dataclass(frozen=True)
class ListPermissions(Query):
    actor_id: str | None = None


@dataclass(frozen=True)
class GetRolePermissions(Query):
    role_id: str
    actor_id: str | None = None


class CreateRoleHandler(Handler):
    async def handle(self, request: CreateRole) -> RoleResult:
        await self.require_actor(request.actor_id, ROLES_CREATE)
        return await self.ctx.store.create_role(
            request.name, request.system_role, request.description
        )


class CreatePermissionHandler(Handler):
    async def handle(self, request: CreatePermission) -> PermissionResult:
        await self.require_actor(request.actor_id, PERMISSIONS_CREATE)
        return await self.ctx.store.create_permission(
            request.resource, request.action, request.display_name, request.description
        )


class SetRoleActiveHandler(Handler):
    async def handle(self, request: SetRoleActive) -> RoleResult:
        await self.require_actor(request.actor_id, ROLES_EDIT)
        return await self.ctx.store.set_role_active(request.role_id, request.is_active)


class GrantPermissionToRoleHandler(Handler):
    async def handle(self, request: GrantPermissionToRole) -> bool:
        await self.require_actor(request.actor_id, ROLES_EDIT)
        return await self.ctx.store.grant_permission_to_role(
            request.role_id, request.permission
        )


class RevokePermissionFromRoleHandler(Handler):
    async def handle(self, request: RevokePermissionFromRole) -> bool:
        await self.require_actor(request.actor_id, ROLES_EDIT)
        return await self.ctx.store.revoke_permission_from_role(
            request.role_id, request.permission
        )


class ReplaceRolePermissionsHandler(Handler):
    async def handle(self, request: ReplaceRolePermissions) -> frozenset[str]:
        await self.require_actor(request.actor_id, ROLES_EDIT)
        return await self.ctx.store.replace_role_permissions(
            request.role_id, request.permissions
        )


class AssignRoleToUserHandler(Handler):
    async def handle(self, request: AssignRoleToUser) -> bool:
        await self.require_actor(request.actor_id, USERS_MANAGE)
        return await self.ctx.store.assign_role_to_user(
            request.user_id,
            request.role_id,
            assigned_by=request.actor_id,
            expires_at=request.expires_at,
        )


class RevokeRoleFromUserHandler(Handler):
    async def handle(self, request: RevokeRoleFromUser) -> bool:
        await self.require_actor(request.actor_id, USERS_MANAGE)
        return await self.ctx.store.revoke_role_from_user(request.user_id, request.role_id)


class ListRolesHandler(Handler):
    async def handle(self, request: ListRoles) -> list[RoleResult]:
        await self.require_actor(request.actor_id, ROLES_VIEW)
        return await self.ctx.store.list_roles(include_inactive=request.include_inactive)


class ListPermissionsHandler(Handler):
    async def handle(self, request: ListPermissions) -> list[PermissionResult]:
        await self.require_actor(request.actor_id, PERMISSIONS_VIEW)
        return await self.ctx.store.list_permissions()


class GetRolePermissionsHandler(Handler):
    async def handle(self, request: GetRolePermissions) -> frozenset[str]:
        await self.require_actor(request.actor_id, ROLES_VIEW)
        return await self.ctx.store.get_role_permission_codes(request.role_id)


HANDLERS: list[tuple[type, type]] = [
    (CreateRole, CreateRoleHandler),
    (CreatePermission, CreatePermissionHandler),
    (SetRoleActive, SetRoleActiveHandler),
    (GrantPermissionToRole, GrantPermissionToRoleHandler),
    (RevokePermissionFromRole, RevokePermissionFromRoleHandler),
    (ReplaceRolePermissions, ReplaceRolePermissionsHandler),
    (AssignRoleToUser, AssignRoleToUserHandler),
    (RevokeRoleFromUser, RevokeRoleFromUserHandler),
    (ListRoles, ListRolesHandler),
    (ListPermissions, ListPermissionsHandler),
    (GetRolePermissions, GetRolePermissionsHandler),
]
