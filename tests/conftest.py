"""Pytest configuration and fixtures for accessgate.

Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
with the schema created from the ORM models. Settings come from the
environment set below; get_settings() is cleared per test.
"""

import os

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-accessgate-tests-only")

from accessgate.application.dtos.role import RoleResult  # noqa: E402
from accessgate.application.services.rbac_store import RbacStore  # noqa: E402
from accessgate.application.use_cases.base import HandlerContext  # noqa: E402
from accessgate.composition import build_context, build_dispatcher  # noqa: E402
from accessgate.core.config import get_settings  # noqa: E402
from accessgate.domain.enums import SystemRole  # noqa: E402
from accessgate.infrastructure.persistence.database import (  # noqa: E402
    create_schema,
    get_db,
    get_db_transactional,
    make_session_factory,
)
from accessgate.infrastructure.persistence.repositories import MenuRepository  # noqa: E402
from accessgate.infrastructure.services import RbacSeedService  # noqa: E402
from accessgate.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def engine():
    """Private in-memory database per test."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncSession:
    """Database session for store/repository tests. Rolls back after test."""
    async with make_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def ctx(db_session: AsyncSession) -> HandlerContext:
    """All services bound to the test session (no cache)."""
    return build_context(db_session)


@pytest.fixture
def store(ctx: HandlerContext) -> RbacStore:
    return ctx.store


@pytest.fixture
def dispatcher(ctx: HandlerContext):
    return build_dispatcher(ctx)


@pytest.fixture
async def seeded(db_session: AsyncSession, store: RbacStore) -> dict[SystemRole, RoleResult]:
    """Seed the built-in catalog; return built-in roles by tag."""
    await RbacSeedService(store, MenuRepository(db_session)).seed()
    roles = await store.list_roles()
    return {r.system_role: r for r in roles if r.system_role.is_builtin}


@pytest.fixture
def app(db_session: AsyncSession) -> FastAPI:
    """Application whose database dependencies yield the test session."""
    application = create_app()

    async def _session():
        yield db_session

    application.dependency_overrides[get_db] = _session
    application.dependency_overrides[get_db_transactional] = _session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

