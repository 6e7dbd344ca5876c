"""DB integration tests for RepositoryOperations.

Tests real SQL against PostgreSQL via rollback fixture.
Covers: upsert idempotency, per-user scoping, URL lookup.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.repository_operations import repository_ops
from app.models.repository import Repository

from tests.helpers.factories import make_repository_create


async def _count_rows(db: AsyncSession, url: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Repository).where(Repository.url == url)  # type: ignore[arg-type]
    )
    return result.scalar_one()


# ─────────────────────────────────────────────────────────────────────────────
# find_or_create
# ─────────────────────────────────────────────────────────────────────────────


class TestFindOrCreate:
    async def test_inserts_new_row(self, db_session: AsyncSession, test_user):
        repo = await repository_ops.find_or_create(
            db_session, user_id=test_user.id, data=make_repository_create()
        )

        assert repo.id is not None
        assert repo.user_id == test_user.id
        assert repo.full_name == "octo/hello"
        assert repo.last_analyzed_at is not None

    async def test_stores_github_id_beyond_32_bits(self, db_session: AsyncSession, test_user):
        repo = await repository_ops.find_or_create(
            db_session,
            user_id=test_user.id,
            data=make_repository_create(github_id=2**31 + 7),
        )

        assert repo.github_id == 2**31 + 7

    async def test_same_user_and_url_returns_same_row(
        self, db_session: AsyncSession, test_user, test_repository
    ):
        again = await repository_ops.find_or_create(
            db_session,
            user_id=test_user.id,
            data=make_repository_create(stars_count=9999),
        )

        assert again.id == test_repository.id
        assert await _count_rows(db_session, test_repository.url) == 1

    async def test_conflict_keeps_first_seen_metadata(
        self, db_session: AsyncSession, test_user, test_repository
    ):
        again = await repository_ops.find_or_create(
            db_session,
            user_id=test_user.id,
            data=make_repository_create(stars_count=9999),
        )

        assert again.stars_count == 80

    async def test_different_users_get_separate_rows(
        self, db_session: AsyncSession, test_repository, second_user
    ):
        other = await repository_ops.find_or_create(
            db_session, user_id=second_user.id, data=make_repository_create()
        )

        assert other.id != test_repository.id
        assert await _count_rows(db_session, test_repository.url) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────────────────────


class TestRepositoryLookups:
    async def test_get_by_url(self, db_session: AsyncSession, test_user, test_repository):
        found = await repository_ops.get_by_url(db_session, test_user.id, test_repository.url)
        assert found is not None
        assert found.id == test_repository.id

    async def test_get_by_url_other_user_returns_none(
        self, db_session: AsyncSession, second_user, test_repository
    ):
        found = await repository_ops.get_by_url(db_session, second_user.id, test_repository.url)
        assert found is None

    async def test_get_by_user_scoped(
        self, db_session: AsyncSession, second_user, test_repository
    ):
        found = await repository_ops.get_by_user(
            db_session, user_id=second_user.id, id=test_repository.id
        )
        assert found is None

    async def test_get_multi_by_user(self, db_session: AsyncSession, test_user, test_repository):
        repos = await repository_ops.get_multi_by_user(db_session, user_id=test_user.id)
        assert [r.id for r in repos] == [test_repository.id]


class TestUniqueIndex:
    async def test_plain_insert_of_duplicate_url_raises(
        self, db_session: AsyncSession, test_user, test_repository
    ):
        with pytest.raises(IntegrityError):
            await repository_ops.create(
                db_session,
                obj_in=make_repository_create().model_dump(),
                user_id=test_user.id,
            )
