"""API test fixtures — unauthenticated client and a fake story generator.

Builds on root conftest fixtures (mock_db, current_user, api_client).
Domain operations are patched per test; no database is touched.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture
async def unauth_client():
    """HTTP client with no dependency overrides and no Authorization header."""
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fake_generator():
    """StoryGenerator stand-in installed as the get_story_generator dependency."""
    from app.api.v1.stories import get_story_generator
    from app.main import app

    generator = AsyncMock()
    app.dependency_overrides[get_story_generator] = lambda: generator
    yield generator
    app.dependency_overrides.pop(get_story_generator, None)
