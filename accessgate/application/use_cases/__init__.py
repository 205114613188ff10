"""Application use cases: typed queries and commands with one handler each."""

from accessgate.application.use_cases.authorization import (
    Authorize,
    CheckAnyRole,
    CheckEntitlement,
    CheckPermission,
    GetUserPermissions,
    GetUserRoles,
    ResolveIdentity,
)
from accessgate.application.use_cases.base import Handler, HandlerContext
from accessgate.application.use_cases.credentials import IssueCredential, ValidateCredential
from accessgate.application.use_cases.menus import GetVisibleMenu
from accessgate.application.use_cases.role_admin import (
    AssignRoleToUser,
    CreatePermission,
    CreateRole,
    GetRolePermissions,
    GrantPermissionToRole,
    ListPermissions,
    ListRoles,
    ReplaceRolePermissions,
    RevokePermissionFromRole,
    RevokeRoleFromUser,
    SetRoleActive,
)
from accessgate.application.use_cases.subscriptions import (
    CancelSubscription,
    CreateSubscription,
    ExpireLapsedSubscriptions,
    GetActiveSubscription,
    GetSubscriptionHistory,
    RenewSubscription,
    UpdateSubscriptionStatus,
)

__all__ = [
    "AssignRoleToUser",
    "Authorize",
    "CancelSubscription",
    "CheckAnyRole",
    "CheckEntitlement",
    "CheckPermission",
    "CreatePermission",
    "CreateRole",
    "CreateSubscription",
    "ExpireLapsedSubscriptions",
    "GetActiveSubscription",
    "GetRolePermissions",
    "GetSubscriptionHistory",
    "GetUserPermissions",
    "GetUserRoles",
    "GetVisibleMenu",
    "GrantPermissionToRole",
    "Handler",
    "HandlerContext",
    "IssueCredential",
    "ListPermissions",
    "ListRoles",
    "RenewSubscription",
    "ReplaceRolePermissions",
    "ResolveIdentity",
    "RevokePermissionFromRole",
    "RevokeRoleFromUser",
    "SetRoleActive",
    "UpdateSubscriptionStatus",
    "ValidateCredential",
]
