"""Root conftest — test infrastructure for all backend tests.

Provides:
- Safety guard: DB integration tests only run with STORYTELLER_TESTS_ENABLED=1
- Transaction-rollback db_session fixture for integration tests
- Mocked-session API client with dependency overrides
- Autouse guard against real GitHub calls
"""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import settings

from tests.helpers.factories import TestDataFactory
from tests.helpers.mock_factories import make_mock_user

INTEGRATION_ENABLED = os.getenv("STORYTELLER_TESTS_ENABLED") == "1"

# ─────────────────────────────────────────────────────────────────────────────
# Safety Guard
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: DB integration tests (transaction rollback)")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip DB integration tests unless STORYTELLER_TESTS_ENABLED=1.

    Unit and API tests (pure mocks) always run.
    """
    if INTEGRATION_ENABLED:
        return
    skip = pytest.mark.skip(reason="Set STORYTELLER_TESTS_ENABLED=1 to run DB integration tests")
    for item in items:
        if "integration" in item.nodeid.split("/"):
            item.add_marker(skip)


# ─────────────────────────────────────────────────────────────────────────────
# Transaction-Rollback Fixtures (integration tests only)
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
async def db_session():
    """Session bound to an outer transaction that is always rolled back.

    Code under test may commit(); with create_savepoint each commit only
    releases a SAVEPOINT. Runs on the direct connection (port 5432) since
    the transaction pooler does not keep SAVEPOINTs on one backend.
    """
    engine = create_async_engine(settings.database_url_direct, poolclass=NullPool)
    async with engine.connect() as conn:
        outer = await conn.begin()
        session = AsyncSession(
            bind=conn,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )
        try:
            yield session
        finally:
            await session.close()
            await outer.rollback()
    await engine.dispose()


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """A user row inside the rolled-back transaction."""
    return await TestDataFactory.create_user(db_session)


# ─────────────────────────────────────────────────────────────────────────────
# API Client (mocked session)
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_db() -> AsyncMock:
    """AsyncSession stand-in for API tests; domain ops are patched per test."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def current_user() -> MagicMock:
    return make_mock_user()


@pytest.fixture
async def api_client(mock_db: AsyncMock, current_user: MagicMock):
    """HTTP client that bypasses JWT auth and uses the mocked session.

    Overrides: get_current_user, get_db, get_db_with_rls
    """
    from app.api.deps.auth import get_current_user, get_db_with_rls
    from app.core.database import get_db
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: current_user

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_db_with_rls] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ─────────────────────────────────────────────────────────────────────────────
# External Service Guard
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def block_github_network():
    """SAFETY: Never reach api.github.com from tests.

    Tests that exercise the fetcher patch get_github_client themselves; the
    inner patch takes precedence over this one.
    """
    client = MagicMock()
    client.get = AsyncMock(side_effect=httpx.ConnectError("network disabled in tests"))
    with patch("app.services.github.read_operations.get_github_client", return_value=client):
        yield client
