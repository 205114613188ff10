"""Startup registration of every request type with its handler."""

from accessgate.application.dispatcher import HandlerRegistry
from accessgate.application.use_cases import (
    authorization,
    credentials,
    menus,
    role_admin,
    subscriptions,
)

_MODULES = (authorization, credentials, menus, role_admin, subscriptions)


def build_registry() -> HandlerRegistry:
    """Fresh registry with all accessgate handlers. Duplicates raise HandlerAmbiguous."""
    registry = HandlerRegistry()
    for module in _MODULES:
        for request_type, handler_type in module.HANDLERS:
            registry.register(request_type, handler_type)
    return registry
