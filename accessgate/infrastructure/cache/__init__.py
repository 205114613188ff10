"""Cache: Redis implementation of ICacheService."""

from accessgate.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
