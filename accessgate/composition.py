"""Composition root: wire repositories, services and the dispatcher for one session.

Used by the FastAPI dependencies, the seed script and the tests so that all
three build the same object graph.
"""

from __future__ import annotations

from datetime import timedelta
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dispatcher import Dispatcher, HandlerRegistry
from accessgate.application.interfaces.services import ICacheService, ITokenSigner
from accessgate.application.services.authorization_service import AuthorizationService
from accessgate.application.services.credential_service import CredentialService
from accessgate.application.services.menu_projection import MenuProjection
from accessgate.application.services.permission_cache import PermissionCache
from accessgate.application.services.rbac_store import RbacStore
from accessgate.application.use_cases.base import HandlerContext
from accessgate.application.use_cases.registry import build_registry
from accessgate.core.config import Settings, get_settings
from accessgate.infrastructure.persistence.database import after_transaction
from accessgate.infrastructure.persistence.repositories import (
    MenuRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    SubscriptionRepository,
    UserRoleRepository,
)
from accessgate.infrastructure.security.jwt import JwtTokenSigner


def build_store(db: AsyncSession, cache: PermissionCache | None = None) -> RbacStore:
    """RBAC store over SQLAlchemy repositories bound to db."""
    return RbacStore(
        roles=RoleRepository(db),
        permissions=PermissionRepository(db),
        role_permissions=RolePermissionRepository(db),
        user_roles=UserRoleRepository(db),
        subscriptions=SubscriptionRepository(db),
        cache=cache,
    )


def build_context(
    db: AsyncSession,
    *,
    cache: ICacheService | None = None,
    signer: ITokenSigner | None = None,
    settings: Settings | None = None,
) -> HandlerContext:
    """All services for one unit of work. cache is only used when cache_enabled is set.

    Cache invalidations are repeated once db's transaction ends (see
    database.transaction), when the committed rows are visible to everyone.
    """
    settings = settings or get_settings()
    permission_cache = PermissionCache(
        cache if settings.cache_enabled else None,
        ttl=settings.cache_ttl_permissions,
        defer=partial(after_transaction, db),
    )
    store = build_store(db, permission_cache)
    authz = AuthorizationService(
        store,
        cache=permission_cache,
        check_timeout=settings.authorization_check_timeout_seconds,
    )
    credentials = CredentialService(
        store,
        signer or JwtTokenSigner.from_settings(settings),
        lifetime=timedelta(minutes=settings.access_token_expire_minutes),
    )
    menus = MenuProjection(authz, MenuRepository(db))
    return HandlerContext(store=store, authz=authz, credentials=credentials, menus=menus)


def build_dispatcher(
    ctx: HandlerContext, registry: HandlerRegistry | None = None
) -> Dispatcher:
    """Dispatcher whose handlers are constructed with ctx.

    Pass the registry built at startup; without one a fresh registry is built,
    which suits scripts and tests.
    """
    if registry is None:
        registry = build_registry()
    return Dispatcher(registry, lambda handler_type: handler_type(ctx))
