"""Application interfaces (ports): repository and service Protocols."""

from accessgate.application.interfaces.repositories import (
    IMenuRepository,
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    ISubscriptionRepository,
    IUserRoleRepository,
)
from accessgate.application.interfaces.services import (
    ICacheService,
    IRbacReader,
    ITokenSigner,
)

__all__ = [
    "ICacheService",
    "IMenuRepository",
    "IPermissionRepository",
    "IRbacReader",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ISubscriptionRepository",
    "ITokenSigner",
    "IUserRoleRepository",
]
