"""Domain integration test fixtures.

Extends the root conftest fixtures (db_session, test_user) with a second
user and a stored repository for isolation tests.
"""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.repository_operations import repository_ops

from tests.helpers.factories import TestDataFactory, make_repository_create


@pytest.fixture
async def second_user(db_session: AsyncSession):
    """A second user, for per-user isolation tests."""
    return await TestDataFactory.create_user(db_session, display_name="Second User")


@pytest.fixture
async def test_repository(db_session: AsyncSession, test_user):
    """A repository row owned by test_user."""
    return await repository_ops.find_or_create(
        db_session, user_id=test_user.id, data=make_repository_create()
    )
