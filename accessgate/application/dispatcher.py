"""Request dispatcher: routes a typed query or command to its single handler.

Handlers are registered per request type in a HandlerRegistry at startup.
Building a Dispatcher freezes the registry; lookups go through a read-only
mapping keyed by the request's exact runtime type (subclasses do not inherit
their parent's handler).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Protocol, TypeVar

from accessgate.domain.exceptions import (
    DispatcherConfigurationError,
    HandlerAmbiguous,
    HandlerNotFound,
)

logger = logging.getLogger(__name__)


class Query:
    """Marker base for read requests. Subclasses are frozen dataclasses."""


class Command:
    """Marker base for write requests. Subclasses are frozen dataclasses."""


class RequestHandler(Protocol):
    """A handler serves exactly one request type."""

    async def handle(self, request: Any) -> Any: ...


HandlerT = TypeVar("HandlerT")
HandlerFactory = Callable[[type[Any]], RequestHandler]


class HandlerRegistry:
    """Mapping from request type to handler type, populated once at startup."""

    def __init__(self) -> None:
        self._handlers: dict[type, type] = {}
        self._frozen = False
        self._view: Mapping[type, type] | None = None

    def register(self, request_type: type, handler_type: type) -> None:
        """Register handler_type for request_type.

        Raises:
            HandlerAmbiguous: request_type already has a handler.
            DispatcherConfigurationError: registry is frozen, or request_type is
                neither a Query nor a Command.
        """
        if self._frozen:
            raise DispatcherConfigurationError(
                f"Registry is frozen; cannot register {request_type.__qualname__}",
                details={"request_type": request_type.__qualname__},
            )
        if not issubclass(request_type, (Query, Command)):
            raise DispatcherConfigurationError(
                f"{request_type.__qualname__} is neither a Query nor a Command",
                details={"request_type": request_type.__qualname__},
            )
        existing = self._handlers.get(request_type)
        if existing is not None:
            raise HandlerAmbiguous(request_type, [existing, handler_type])
        self._handlers[request_type] = handler_type

    def handles(self, request_type: type) -> Callable[[type[HandlerT]], type[HandlerT]]:
        """Class decorator form of register."""

        def decorator(handler_type: type[HandlerT]) -> type[HandlerT]:
            self.register(request_type, handler_type)
            return handler_type

        return decorator

    def freeze(self) -> Mapping[type, type]:
        """Stop accepting registrations and return a read-only view.

        Repeated calls return the same view, so one startup registry can back
        a Dispatcher per request.
        """
        if self._view is None:
            self._frozen = True
            self._view = MappingProxyType(dict(self._handlers))
        return self._view

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __contains__(self, request_type: object) -> bool:
        return request_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class Dispatcher:
    """Invokes the handler registered for a request's exact type.

    The dispatcher adds no semantics: handler errors propagate unchanged and
    each call is an independent invocation (idempotence is the handler's job).
    handler_factory builds a handler instance from its type for each dispatch.
    """

    def __init__(self, registry: HandlerRegistry, handler_factory: HandlerFactory) -> None:
        self._handlers = registry.freeze()
        self._handler_factory = handler_factory

    @property
    def handlers(self) -> Mapping[type, type]:
        return self._handlers

    async def query(self, query: Query, *, timeout: float | None = None) -> Any:
        """Dispatch a read request and return the handler's response."""
        handler = self._resolve(query, Query)
        return await self._invoke(handler, query, timeout)

    async def command(self, command: Command, *, timeout: float | None = None) -> Any:
        """Dispatch a write request; returns the handler's response (may be None)."""
        handler = self._resolve(command, Command)
        return await self._invoke(handler, command, timeout)

    def _resolve(self, request: object, kind: type) -> RequestHandler:
        request_type = type(request)
        if not isinstance(request, kind):
            raise DispatcherConfigurationError(
                f"{request_type.__qualname__} is not a {kind.__name__}",
                details={"request_type": request_type.__qualname__},
            )
        handler_type = self._handlers.get(request_type)
        if handler_type is None:
            raise HandlerNotFound(request_type)
        logger.debug(
            "Dispatching %s to %s", request_type.__qualname__, handler_type.__qualname__
        )
        return self._handler_factory(handler_type)

    @staticmethod
    async def _invoke(
        handler: RequestHandler, request: object, timeout: float | None
    ) -> Any:
        if timeout is None:
            return await handler.handle(request)
        async with asyncio.timeout(timeout):
            return await handler.handle(request)
