"""Tests for the request dispatcher and handler registry."""

import asyncio
from dataclasses import dataclass

import pytest

from accessgate.application.dispatcher import Command, Dispatcher, HandlerRegistry, Query
from accessgate.application.use_cases.registry import build_registry
from accessgate.domain.exceptions import (
    DispatcherConfigurationError,
    HandlerAmbiguous,
    HandlerNotFound,
)


@dataclass(frozen=True)
class Ping(Query):
    value: int


@dataclass(frozen=True)
class SubPing(Ping):
    pass


@dataclass(frozen=True)
class Unregistered(Query):
    pass


@dataclass(frozen=True)
class Bump(Command):
    amount: int


@dataclass(frozen=True)
class Sleep(Query):
    seconds: float


class Calls:
    def __init__(self) -> None:
        self.log: list[tuple[str, object]] = []


class PingHandler:
    def __init__(self, calls: Calls) -> None:
        self.calls = calls

    async def handle(self, request: Ping) -> int:
        self.calls.log.append(("ping", request))
        return request.value * 2


class OtherPingHandler(PingHandler):
    pass


class BumpHandler:
    def __init__(self, calls: Calls) -> None:
        self.calls = calls

    async def handle(self, request: Bump) -> None:
        self.calls.log.append(("bump", request))


class FailingHandler:
    def __init__(self, calls: Calls) -> None:
        self.calls = calls

    async def handle(self, request: Bump) -> None:
        raise LookupError("boom")


class SleepHandler:
    def __init__(self, calls: Calls) -> None:
        self.calls = calls

    async def handle(self, request: Sleep) -> str:
        await asyncio.sleep(request.seconds)
        return "done"


def _dispatcher(*pairs: tuple[type, type]) -> tuple[Dispatcher, Calls]:
    calls = Calls()
    registry = HandlerRegistry()
    for request_type, handler_type in pairs:
        registry.register(request_type, handler_type)
    return Dispatcher(registry, lambda handler_type: handler_type(calls)), calls


class TestHandlerRegistry:
    def test_second_handler_for_same_type_is_ambiguous(self) -> None:
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler)
        with pytest.raises(HandlerAmbiguous) as exc_info:
            registry.register(Ping, OtherPingHandler)
        assert exc_info.value.error_code == "HANDLER_AMBIGUOUS"
        assert exc_info.value.details["handlers"] == ["PingHandler", "OtherPingHandler"]

    def test_decorator_registers(self) -> None:
        registry = HandlerRegistry()

        @registry.handles(Ping)
        class Decorated(PingHandler):
            pass

        assert Ping in registry
        assert len(registry) == 1

    def test_registration_after_freeze_rejected(self) -> None:
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler)
        view = registry.freeze()
        assert registry.is_frozen
        with pytest.raises(DispatcherConfigurationError, match="frozen"):
            registry.register(Bump, BumpHandler)
        with pytest.raises(TypeError):
            view[Bump] = BumpHandler  # type: ignore[index]

    def test_non_request_type_rejected(self) -> None:
        registry = HandlerRegistry()
        with pytest.raises(DispatcherConfigurationError, match="neither"):
            registry.register(int, PingHandler)

    def test_application_registry_has_one_handler_per_request(self) -> None:
        registry = build_registry()
        assert len(registry) > 20


class TestDispatcher:
    async def test_dispatch_invokes_registered_handler_exactly_once(self) -> None:
        dispatcher, calls = _dispatcher((Ping, PingHandler))
        result = await dispatcher.query(Ping(21))
        assert result == 42
        assert calls.log == [("ping", Ping(21))]

    async def test_same_request_twice_is_two_invocations(self) -> None:
        dispatcher, calls = _dispatcher((Bump, BumpHandler))
        await dispatcher.command(Bump(1))
        await dispatcher.command(Bump(1))
        assert calls.log == [("bump", Bump(1)), ("bump", Bump(1))]

    async def test_unregistered_type_fails_with_handler_not_found(self) -> None:
        dispatcher, _ = _dispatcher((Ping, PingHandler))
        with pytest.raises(HandlerNotFound) as exc_info:
            await dispatcher.query(Unregistered())
        assert exc_info.value.details["request_type"] == "Unregistered"

    async def test_lookup_uses_exact_type(self) -> None:
        """A subclass of a registered request does not inherit its handler."""
        dispatcher, calls = _dispatcher((Ping, PingHandler))
        with pytest.raises(HandlerNotFound):
            await dispatcher.query(SubPing(1))
        assert calls.log == []

    async def test_command_sent_as_query_rejected(self) -> None:
        dispatcher, _ = _dispatcher((Bump, BumpHandler))
        with pytest.raises(DispatcherConfigurationError, match="not a Query"):
            await dispatcher.query(Bump(1))  # type: ignore[arg-type]

    async def test_handler_errors_propagate_unchanged(self) -> None:
        dispatcher, _ = _dispatcher((Bump, FailingHandler))
        with pytest.raises(LookupError, match="boom"):
            await dispatcher.command(Bump(1))

    async def test_timeout(self) -> None:
        dispatcher, _ = _dispatcher((Sleep, SleepHandler))
        assert await dispatcher.query(Sleep(0), timeout=1) == "done"
        with pytest.raises(TimeoutError):
            await dispatcher.query(Sleep(5), timeout=0.01)

    async def test_dispatcher_freezes_registry(self) -> None:
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler)
        dispatcher = Dispatcher(registry, lambda handler_type: handler_type(Calls()))
        assert registry.is_frozen
        assert dict(dispatcher.handlers) == {Ping: PingHandler}

    async def test_dispatchers_share_one_frozen_registry(self) -> None:
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler)
        first = Dispatcher(registry, lambda handler_type: handler_type(Calls()))
        calls = Calls()
        second = Dispatcher(registry, lambda handler_type: handler_type(calls))
        assert first.handlers is second.handlers
        assert await second.query(Ping(2)) == 4
        assert calls.log == [("ping", Ping(2))]
