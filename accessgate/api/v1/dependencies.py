"""Authorization dependencies (composition root for HTTP requests).

Endpoints receive services and the dispatcher from here instead of building
repositories themselves. Gates re-check live RBAC state through the
authorization service; the bearer credential only identifies the caller.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dispatcher import Dispatcher
from accessgate.application.dtos.identity import Identity
from accessgate.application.use_cases.base import HandlerContext
from accessgate.composition import build_context, build_dispatcher
from accessgate.domain.enums import PermissionAction, SubscriptionType, SystemRole
from accessgate.domain.exceptions import InvalidCredential
from accessgate.domain.value_objects import PermissionKey
from accessgate.infrastructure.persistence.database import get_db, get_db_transactional

_http_bearer = HTTPBearer(auto_error=False)


async def get_services(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HandlerContext:
    """Services for read operations.

    The cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise permission checks hit the database only.
    """
    return build_context(db, cache=getattr(request.app.state, "cache", None))


async def get_services_for_write(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> HandlerContext:
    """Services for mutations (transactional session, committed on success)."""
    return build_context(db, cache=getattr(request.app.state, "cache", None))


def get_dispatcher(
    request: Request,
    ctx: Annotated[HandlerContext, Depends(get_services)],
) -> Dispatcher:
    """Dispatcher over the registry frozen at startup (app.state.handlers)."""
    return build_dispatcher(ctx, request.app.state.handlers)


def get_dispatcher_for_write(
    request: Request,
    ctx: Annotated[HandlerContext, Depends(get_services_for_write)],
) -> Dispatcher:
    return build_dispatcher(ctx, request.app.state.handlers)


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    ctx: Annotated[HandlerContext, Depends(get_services)],
) -> Identity:
    """Identity snapshot from the bearer credential; 401 if missing, invalid or expired."""
    if credentials is None or not credentials.credentials:
        raise InvalidCredential("Not authenticated")
    return ctx.credentials.validate(credentials.credentials)


def require_permission(resource: str, action: str):
    """Dependency factory: require a valid credential and live resource:action."""
    key = PermissionKey(resource, PermissionAction(action))

    async def _require(
        identity: Annotated[Identity, Depends(get_current_identity)],
        ctx: Annotated[HandlerContext, Depends(get_services)],
    ) -> Identity:
        await ctx.authz.require_permission(identity.user_id, key)
        return identity

    return _require


def require_any_role(*roles: SystemRole | str):
    """Dependency factory: require a valid credential and one of roles (live)."""
    if not roles:
        raise ValueError("require_any_role needs at least one role")

    async def _require(
        identity: Annotated[Identity, Depends(get_current_identity)],
        ctx: Annotated[HandlerContext, Depends(get_services)],
    ) -> Identity:
        await ctx.authz.require_any_role(identity.user_id, roles)
        return identity

    return _require


def require_subscription(subscription_type: SubscriptionType | None = None):
    """Dependency factory: require a live active subscription (of subscription_type)."""

    async def _require(
        identity: Annotated[Identity, Depends(get_current_identity)],
        ctx: Annotated[HandlerContext, Depends(get_services)],
    ) -> Identity:
        await ctx.authz.require_entitlement(identity.user_id, subscription_type)
        return identity

    return _require
