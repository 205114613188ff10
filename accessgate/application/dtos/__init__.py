"""Application DTOs: read-models and values exchanged with the transport layer."""

from accessgate.application.dtos.identity import (
    AuthorizationDecision,
    Identity,
    IdentitySource,
    IssuedCredential,
)
from accessgate.application.dtos.menu import MenuItemResult, MenuNode, MenuSeed
from accessgate.application.dtos.permission import PermissionResult, RolePermissionResult
from accessgate.application.dtos.role import RoleResult, UserRoleResult
from accessgate.application.dtos.subscription import SubscriptionResult

__all__ = [
    "AuthorizationDecision",
    "Identity",
    "IdentitySource",
    "IssuedCredential",
    "MenuItemResult",
    "MenuNode",
    "MenuSeed",
    "PermissionResult",
    "RolePermissionResult",
    "RoleResult",
    "SubscriptionResult",
    "UserRoleResult",
]
