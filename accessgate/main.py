"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, routers. See
accessgate.core.lifespan and accessgate.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and clear
the get_settings cache) before calling create_app(). Serve with:

    uvicorn accessgate.main:create_app --factory
"""

import logging

from fastapi import FastAPI

from accessgate.api.v1 import api_router
from accessgate.application.use_cases.registry import build_registry
from accessgate.core.config import get_settings
from accessgate.core.exception_handlers import register_exception_handlers
from accessgate.core.lifespan import create_lifespan

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build and return the FastAPI application.

    The handler registry is built and frozen here, once per app; a duplicate
    registration raises HandlerAmbiguous and the app never starts.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    # Replaced in lifespan when the Redis cache is enabled.
    app.state.cache = None
    registry = build_registry()
    registry.freeze()
    app.state.handlers = registry
    logger.info("Registered %d request handlers", len(registry))

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")
    return app
