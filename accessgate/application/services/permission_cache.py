"""Optional cache of effective permission codes per user.

Wraps an ICacheService with the permission key format. Every method is a
no-op (or a miss) when no cache is configured or the backend is down.

Invalidation writes a fresh version token (per user, or global) before
dropping entries. A reader takes version() before reading the store and
passes it to set(); the entry is only written when no invalidation happened
in between, so a read that raced a mutation never repopulates the cache.
When a defer callback is given, every invalidation is repeated once the
surrounding transaction has ended, since readers in other sessions see the
old rows until then.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from accessgate.application.interfaces.services import ICacheService
from accessgate.core.cache_keys import (
    permission_global_version_key,
    permission_key,
    permission_key_pattern,
    permission_version_key,
)
from accessgate.core.constants import CACHE_KEY_SEP
from accessgate.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

Deferred = Callable[[Callable[[], Awaitable[None]]], None]
Version = tuple[str | None, str | None]


class PermissionCache:
    """Read-through cache for permission codes, invalidated by RBAC mutations."""

    def __init__(
        self,
        cache: ICacheService | None = None,
        ttl: int = 300,
        defer: Deferred | None = None,
    ) -> None:
        self.cache = cache
        self.ttl = ttl
        self.defer = defer

    @property
    def enabled(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    def _usable(self, user_id: str) -> bool:
        return self.enabled and CACHE_KEY_SEP not in user_id

    async def version(self, user_id: str) -> Version | None:
        """Current (global, user) version tokens; None when caching is off."""
        if not self._usable(user_id):
            return None
        assert self.cache is not None
        return (
            await self.cache.get(permission_global_version_key()),
            await self.cache.get(permission_version_key(user_id)),
        )

    async def get(self, user_id: str) -> frozenset[str] | None:
        if not self._usable(user_id):
            return None
        assert self.cache is not None
        cached = await self.cache.get(permission_key(user_id))
        if cached is None:
            return None
        return frozenset(cached)

    async def set(
        self, user_id: str, codes: frozenset[str], *, version: Version | None = None
    ) -> None:
        """Store codes. With version, skip the write if an invalidation has run since."""
        if not self._usable(user_id):
            return
        assert self.cache is not None
        if version is not None and await self.version(user_id) != version:
            logger.debug("Permission cache write for user %s skipped: invalidated", user_id)
            return
        await self.cache.set(permission_key(user_id), sorted(codes), ttl=self.ttl)

    async def invalidate_user(self, user_id: str) -> None:
        """Drop one user's entry (user-role changes)."""
        if not self._usable(user_id):
            return
        await self._drop_user(user_id)
        if self.defer is not None:
            self.defer(partial(self._drop_user, user_id))

    async def invalidate_all(self) -> None:
        """Drop every user's entry (role grant and role state changes)."""
        if not self.enabled:
            return
        await self._drop_all()
        if self.defer is not None:
            self.defer(self._drop_all)

    async def _drop_user(self, user_id: str) -> None:
        assert self.cache is not None
        await self.cache.set(permission_version_key(user_id), generate_cuid(), ttl=self.ttl)
        if not await self.cache.delete(permission_key(user_id)):
            logger.warning("Permission cache invalidation failed for user %s", user_id)

    async def _drop_all(self) -> None:
        assert self.cache is not None
        await self.cache.set(permission_global_version_key(), generate_cuid(), ttl=self.ttl)
        await self.cache.delete_pattern(permission_key_pattern())
