"""Unit tests for AuthorizationService: union semantics, fail-closed checks, caching."""

import asyncio

import pytest
from fakes import FakeCache, FakeRbacReader, make_role, make_subscription

from accessgate.application.services.authorization_service import AuthorizationService
from accessgate.application.services.permission_cache import PermissionCache
from accessgate.domain.enums import (
    DecisionReason,
    SubscriptionStatus,
    SubscriptionType,
    SystemRole,
)
from accessgate.domain.exceptions import (
    NotEntitled,
    PermissionDenied,
    RoleDenied,
    ValidationException,
)

EDITOR = make_role("r-editor", "Editor")
VIEWER = make_role("r-viewer", "Viewer")
ADMIN = make_role("r-admin", "Admin", SystemRole.ADMIN)


@pytest.fixture
def reader() -> FakeRbacReader:
    return FakeRbacReader()


@pytest.fixture
def authz(reader: FakeRbacReader) -> AuthorizationService:
    return AuthorizationService(reader)


class TestPermissionUnion:
    async def test_user_with_no_roles_has_nothing(self, authz: AuthorizationService) -> None:
        assert await authz.get_user_permissions("nobody") == frozenset()
        assert not await authz.has_permission("nobody", "content:view")

    async def test_single_role(self, reader: FakeRbacReader, authz: AuthorizationService) -> None:
        reader.give_role("u1", VIEWER, "content:view")
        assert await authz.has_permission("u1", "content:view")
        assert not await authz.has_permission("u1", "content:edit")

    async def test_overlapping_roles_collapse(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.give_role("u1", EDITOR, "content:edit", "content:view")
        reader.give_role("u1", VIEWER, "content:view")
        assert await authz.get_user_permissions("u1") == {"content:edit", "content:view"}

    async def test_editor_viewer_scenario(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.give_role("u1", EDITOR, "content:edit")
        reader.give_role("u1", VIEWER, "content:view")
        assert await authz.get_user_permissions("u1") == {"content:edit", "content:view"}
        assert not await authz.has_permission("u1", "content:delete")

    async def test_no_wildcards(self, reader: FakeRbacReader, authz: AuthorizationService) -> None:
        reader.give_role("u1", EDITOR, "content:manage")
        assert not await authz.has_permission("u1", "content:edit")

    async def test_invalid_permission_code_is_a_validation_error(
        self, authz: AuthorizationService
    ) -> None:
        with pytest.raises(ValidationException):
            await authz.has_permission("u1", "not-a-code")


class TestRoles:
    async def test_matches_tag_or_name(self, reader: FakeRbacReader, authz: AuthorizationService) -> None:
        reader.give_role("u1", ADMIN)
        assert await authz.has_any_role("u1", [SystemRole.ADMIN])
        assert await authz.has_any_role("u1", ["Admin"])
        assert await authz.has_any_role("u1", ["admin"])
        assert not await authz.has_any_role("u1", [SystemRole.SUPER_ADMIN, "Finance"])

    async def test_custom_tag_never_matches_a_builtin(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.give_role("u1", EDITOR)
        assert not await authz.has_any_role("u1", [SystemRole.ADMIN])

    async def test_empty_role_list_denies(self, reader: FakeRbacReader, authz: AuthorizationService) -> None:
        reader.give_role("u1", ADMIN)
        assert not await authz.has_any_role("u1", [])

    async def test_role_without_grant_does_not_allow(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        """Holding Admin is not the same as holding the permission an operation needs."""
        reader.give_role("u1", ADMIN)
        assert await authz.has_any_role("u1", [SystemRole.ADMIN])
        decision = await authz.authorize("u1", "users:delete")
        assert not decision.allowed
        assert decision.reason is DecisionReason.PERMISSION_DENIED

    async def test_require_any_role_raises(self, authz: AuthorizationService) -> None:
        with pytest.raises(RoleDenied) as exc_info:
            await authz.require_any_role("u1", [SystemRole.ADMIN, "Finance"])
        assert exc_info.value.details["required_roles"] == ["admin", "Finance"]


class TestEntitlement:
    async def test_active_subscription(self, reader: FakeRbacReader, authz: AuthorizationService) -> None:
        reader.subscriptions["u1"] = [make_subscription("u1", SubscriptionType.PREMIUM)]
        assert await authz.is_entitled("u1")
        assert await authz.is_entitled("u1", SubscriptionType.PREMIUM)

    async def test_type_must_match_exactly(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.subscriptions["u1"] = [make_subscription("u1", SubscriptionType.ALL_MODULES)]
        assert not await authz.is_entitled("u1", SubscriptionType.IELTS_ONLY)

    async def test_lapsed_or_inactive_not_entitled(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.subscriptions["u1"] = [make_subscription("u1", days_left=-1)]
        reader.subscriptions["u2"] = [
            make_subscription("u2", status=SubscriptionStatus.CANCELLED, days_left=30)
        ]
        assert not await authz.is_entitled("u1")
        assert not await authz.is_entitled("u2")

    async def test_composite_requires_both(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.give_role("u1", VIEWER, "content:view")
        decision = await authz.authorize("u1", "content:view", subscription_required=True)
        assert decision.reason is DecisionReason.NOT_ENTITLED
        assert decision.details["check"] == "entitlement"

        reader.subscriptions["u1"] = [make_subscription("u1", SubscriptionType.BASIC)]
        assert (await authz.authorize("u1", "content:view", subscription_required=True)).allowed
        denied = await authz.authorize(
            "u1", "content:view", subscription_type=SubscriptionType.PREMIUM
        )
        assert denied.reason is DecisionReason.NOT_ENTITLED
        assert denied.details["required_type"] == "premium"

    async def test_require_entitlement_raises(self, authz: AuthorizationService) -> None:
        with pytest.raises(NotEntitled) as exc_info:
            await authz.require_entitlement("u1", SubscriptionType.PREMIUM)
        assert exc_info.value.details["reason"] == "not_entitled"

    async def test_require_raises_matching_denial(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        with pytest.raises(PermissionDenied):
            await authz.require("u1", "content:view", subscription_required=True)
        reader.give_role("u1", VIEWER, "content:view")
        with pytest.raises(NotEntitled):
            await authz.require("u1", "content:view", subscription_required=True)


class TestFailClosed:
    async def test_store_error_denies_every_check(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.give_role("u1", ADMIN, "users:view")
        reader.subscriptions["u1"] = [make_subscription("u1")]
        reader.error = ConnectionError("database unreachable")

        assert not await authz.has_permission("u1", "users:view")
        assert not await authz.has_any_role("u1", [SystemRole.ADMIN])
        assert not await authz.is_entitled("u1")
        assert await authz.get_user_permissions("u1") == frozenset()
        decision = await authz.authorize("u1", "users:view")
        assert not decision.allowed
        assert decision.reason is DecisionReason.INDETERMINATE

    async def test_store_error_surfaces_as_permission_denied(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.error = RuntimeError("boom")
        with pytest.raises(PermissionDenied) as exc_info:
            await authz.require_permission("u1", "users:view")
        assert exc_info.value.details["reason"] == "indeterminate"

    async def test_store_error_is_logged(
        self, reader: FakeRbacReader, authz: AuthorizationService, caplog: pytest.LogCaptureFixture
    ) -> None:
        reader.error = RuntimeError("boom")
        await authz.has_permission("u1", "users:view")
        assert "failed; denying" in caplog.text

    async def test_multiple_active_subscriptions_denies(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.subscriptions["u1"] = [
            make_subscription("u1", SubscriptionType.BASIC),
            make_subscription("u1", SubscriptionType.PREMIUM),
        ]
        assert not await authz.is_entitled("u1")
        decision = await authz.authorize("u1", None, subscription_required=True)
        assert decision.reason is DecisionReason.INDETERMINATE
        assert decision.details["check"] == "entitlement"

    async def test_timeout_denies(self, reader: FakeRbacReader) -> None:
        reader.give_role("u1", VIEWER, "content:view")
        reader.delay = 1.0
        authz = AuthorizationService(reader, check_timeout=0.01)
        assert not await authz.has_permission("u1", "content:view")
        decision = await authz.authorize("u1", "content:view")
        assert decision.reason is DecisionReason.INDETERMINATE

    async def test_cancellation_propagates(self, reader: FakeRbacReader, authz: AuthorizationService) -> None:
        """A cancelled check never turns into a result, let alone an allow."""
        reader.give_role("u1", VIEWER, "content:view")
        reader.delay = 10
        task = asyncio.create_task(authz.has_permission("u1", "content:view"))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestPermissionCaching:
    async def test_no_cache_reads_store_every_time(
        self, reader: FakeRbacReader, authz: AuthorizationService
    ) -> None:
        reader.give_role("u1", VIEWER, "content:view")
        await authz.has_permission("u1", "content:view")
        await authz.has_permission("u1", "content:view")
        assert reader.permission_reads == 2

    async def test_cache_hit_and_user_invalidation(self, reader: FakeRbacReader) -> None:
        cache = FakeCache()
        authz = AuthorizationService(reader, cache=PermissionCache(cache, ttl=60))
        reader.give_role("u1", VIEWER, "content:view")

        assert await authz.has_permission("u1", "content:view")
        assert await authz.has_permission("u1", "content:view")
        assert reader.permission_reads == 1
        assert cache.data == {"permission:u1": ["content:view"]}

        reader.roles["u1"].clear()
        await authz.invalidate_user_cache("u1")
        assert not await authz.has_permission("u1", "content:view")
        assert reader.permission_reads == 2

    async def test_unavailable_cache_falls_through(self, reader: FakeRbacReader) -> None:
        cache = FakeCache()
        cache.available = False
        authz = AuthorizationService(reader, cache=PermissionCache(cache))
        reader.give_role("u1", VIEWER, "content:view")
        assert await authz.has_permission("u1", "content:view")
        assert cache.data == {}

    async def test_role_checks_never_cached(self, reader: FakeRbacReader) -> None:
        cache = FakeCache()
        authz = AuthorizationService(reader, cache=PermissionCache(cache))
        reader.give_role("u1", ADMIN)
        assert await authz.has_any_role("u1", [SystemRole.ADMIN])
        reader.roles["u1"].clear()
        assert not await authz.has_any_role("u1", [SystemRole.ADMIN])


class TestPermissionCacheVersions:
    async def test_write_after_invalidation_is_dropped(self) -> None:
        cache = FakeCache()
        permissions = PermissionCache(cache)
        version = await permissions.version("u1")
        await permissions.invalidate_user("u1")
        await permissions.set("u1", frozenset({"content:edit"}), version=version)
        assert await permissions.get("u1") is None

    async def test_global_invalidation_voids_pending_write(self) -> None:
        cache = FakeCache()
        permissions = PermissionCache(cache)
        version = await permissions.version("u1")
        await permissions.invalidate_all()
        await permissions.set("u1", frozenset({"content:edit"}), version=version)
        assert await permissions.get("u1") is None

    async def test_write_with_current_version_is_kept(self) -> None:
        cache = FakeCache()
        permissions = PermissionCache(cache)
        await permissions.invalidate_user("u1")
        version = await permissions.version("u1")
        await permissions.set("u1", frozenset({"content:view"}), version=version)
        assert await permissions.get("u1") == {"content:view"}

    async def test_invalidations_repeat_through_defer(self) -> None:
        cache = FakeCache()
        queued = []
        permissions = PermissionCache(cache, defer=queued.append)
        await permissions.invalidate_user("u1")
        await permissions.invalidate_all()
        assert len(queued) == 2

        await permissions.set("u1", frozenset({"content:edit"}))
        for callback in queued:
            await callback()
        assert await permissions.get("u1") is None

    async def test_read_overlapping_an_invalidation_is_not_cached(
        self, reader: FakeRbacReader
    ) -> None:
        cache = FakeCache()
        permissions = PermissionCache(cache)
        authz = AuthorizationService(reader, cache=permissions)
        reader.give_role("u1", EDITOR, "content:edit")
        reader.delay = 0.05

        check = asyncio.create_task(authz.has_permission("u1", "content:edit"))
        await asyncio.sleep(0.01)
        await permissions.invalidate_user("u1")

        assert await check
        assert "permission:u1" not in cache.data
