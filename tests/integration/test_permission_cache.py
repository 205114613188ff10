"""Permission cache across sessions on a file-backed SQLite database.

A revocation in one transaction must not leave a stale entry behind for a
reader that checked before the commit.
"""

import pytest
from fakes import FakeCache
from sqlalchemy.ext.asyncio import create_async_engine

from accessgate.composition import build_context
from accessgate.core.config import Settings
from accessgate.domain.enums import PermissionAction
from accessgate.infrastructure.persistence.database import (
    create_schema,
    make_session_factory,
    transaction,
)


@pytest.fixture
async def session_factory(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gate.db'}")
    await create_schema(eng)
    yield make_session_factory(eng)
    await eng.dispose()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def settings() -> Settings:
    return Settings(cache_enabled=True)


@pytest.fixture
async def editor_id(session_factory, cache, settings) -> str:
    """Role granting content:edit, assigned to u1 and committed."""
    async with transaction(session_factory) as session:
        store = build_context(session, cache=cache, settings=settings).store
        await store.create_permission("content", PermissionAction.EDIT)
        editor = await store.create_role("Editor")
        await store.grant_permission_to_role(editor.id, "content:edit")
        await store.assign_role_to_user("u1", editor.id)
    return editor.id


async def _check(session_factory, cache, settings) -> bool:
    async with session_factory() as session:
        authz = build_context(session, cache=cache, settings=settings).authz
        return await authz.has_permission("u1", "content:edit")


async def test_check_before_commit_does_not_outlive_revocation(
    session_factory, cache: FakeCache, settings: Settings, editor_id: str
) -> None:
    async with transaction(session_factory) as session:
        store = build_context(session, cache=cache, settings=settings).store
        assert await store.revoke_permission_from_role(editor_id, "content:edit")

        # Another session still sees the committed grant and caches it.
        assert await _check(session_factory, cache, settings)
        assert "permission:u1" in cache.data

    assert "permission:u1" not in cache.data
    assert not await _check(session_factory, cache, settings)


async def test_rolled_back_revocation_still_clears_cache(
    session_factory, cache: FakeCache, settings: Settings, editor_id: str
) -> None:
    with pytest.raises(RuntimeError):
        async with transaction(session_factory) as session:
            store = build_context(session, cache=cache, settings=settings).store
            await store.revoke_permission_from_role(editor_id, "content:edit")
            assert await _check(session_factory, cache, settings)
            raise RuntimeError("abort")

    assert "permission:u1" not in cache.data
    assert await _check(session_factory, cache, settings)


async def test_role_removal_clears_user_entry_after_commit(
    session_factory, cache: FakeCache, settings: Settings, editor_id: str
) -> None:
    async with transaction(session_factory) as session:
        store = build_context(session, cache=cache, settings=settings).store
        assert await store.revoke_role_from_user("u1", editor_id)
        assert await _check(session_factory, cache, settings)

    assert not await _check(session_factory, cache, settings)
