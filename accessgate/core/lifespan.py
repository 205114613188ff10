"""Application lifespan: startup and shutdown.

Only infrastructure wiring lives here: logging, the optional Redis
permission cache, and disposal of the database engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from accessgate.core.config import get_settings
from accessgate.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, Redis cache (if enabled). Shutdown: cache disconnect,
    SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    if settings.cache_enabled:
        from accessgate.infrastructure.cache.redis_cache import CacheService

        cache = CacheService(settings=settings)
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    from accessgate.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
    logger.info("Database engine disposed")
