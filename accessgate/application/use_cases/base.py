"""Shared handler plumbing: the services a handler may use and actor checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from accessgate.application.services.authorization_service import AuthorizationService
    from accessgate.application.services.credential_service import CredentialService
    from accessgate.application.services.menu_projection import MenuProjection
    from accessgate.application.services.rbac_store import RbacStore


@dataclass(frozen=True)
class HandlerContext:
    """Services bound to one unit of work (one database session)."""

    store: RbacStore
    authz: AuthorizationService
    credentials: CredentialService
    menus: MenuProjection


class Handler:
    """Base for request handlers; one instance per dispatch."""

    def __init__(self, ctx: HandlerContext) -> None:
        self.ctx = ctx

    async def require_actor(self, actor_id: str | None, permission: str) -> None:
        """Enforce permission for actor_id; system calls (actor_id None) are trusted."""
        if actor_id is not None:
            await self.ctx.authz.require_permission(actor_id, permission)
