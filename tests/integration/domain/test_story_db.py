"""DB integration tests for StoryOperations and the RLS context.

Tests real SQL against PostgreSQL via rollback fixture.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rls import get_current_rls_user_id, set_rls_user_context
from app.domain.story_operations import story_ops

INSIGHTS = {
    "total_commits": 110,
    "commits_source": "authoritative",
    "contributors": 2,
    "languages": ["Python", "Shell"],
    "timespan": "7 months",
}


async def _create_story(db: AsyncSession, user_id, repository_id, title="The Story of hello"):
    return await story_ops.create(
        db,
        obj_in={
            "title": title,
            "content": "Once upon a time.",
            "repository_id": repository_id,
            "insights": INSIGHTS,
        },
        user_id=user_id,
    )


class TestStoryCreate:
    async def test_create_loads_repository(
        self, db_session: AsyncSession, test_user, test_repository
    ):
        story = await _create_story(db_session, test_user.id, test_repository.id)

        assert story.id is not None
        assert story.repository is not None
        assert story.repository.full_name == "octo/hello"
        assert story.insights == INSIGHTS

    async def test_each_run_inserts_new_story(
        self, db_session: AsyncSession, test_user, test_repository
    ):
        first = await _create_story(db_session, test_user.id, test_repository.id)
        second = await _create_story(db_session, test_user.id, test_repository.id)

        assert first.id != second.id
        stories = await story_ops.list_with_repository(db_session, user_id=test_user.id)
        assert {s.id for s in stories} == {first.id, second.id}


class TestStoryReads:
    async def test_get_with_repository_scoped_to_user(
        self, db_session: AsyncSession, test_user, second_user, test_repository
    ):
        story = await _create_story(db_session, test_user.id, test_repository.id)

        assert await story_ops.get_with_repository(
            db_session, user_id=second_user.id, id=story.id
        ) is None
        found = await story_ops.get_with_repository(db_session, user_id=test_user.id, id=story.id)
        assert found is not None
        assert found.repository.id == test_repository.id

    async def test_deleting_repository_keeps_story(
        self, db_session: AsyncSession, test_user, test_repository
    ):
        story = await _create_story(db_session, test_user.id, test_repository.id)

        await db_session.delete(test_repository)
        await db_session.flush()

        found = await story_ops.get_with_repository(db_session, user_id=test_user.id, id=story.id)
        assert found is not None
        assert found.repository_id is None
        assert found.repository is None


class TestRlsContext:
    async def test_context_set_for_transaction(self, db_session: AsyncSession, test_user):
        await set_rls_user_context(db_session, test_user.id)
        assert await get_current_rls_user_id(db_session) == test_user.id
