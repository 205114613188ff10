"""Application services: RBAC store, authorization engine, credentials, menu projection."""

from accessgate.application.services.authorization_service import AuthorizationService
from accessgate.application.services.credential_service import CredentialService
from accessgate.application.services.menu_projection import (
    MenuProjection,
    build_menu_tree,
    prune_menu,
)
from accessgate.application.services.permission_cache import PermissionCache
from accessgate.application.services.rbac_store import RbacStore

__all__ = [
    "AuthorizationService",
    "CredentialService",
    "MenuProjection",
    "PermissionCache",
    "RbacStore",
    "build_menu_tree",
    "prune_menu",
]
