"""Story operations.

Stories are insert-only. Reads eager-load the linked repository so the API
can serialize both without lazy loads on the async session.
"""

import uuid as uuid_pkg

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain.base_operations import BaseOperations
from app.models.story import Story


class StoryOperations(BaseOperations[Story]):
    """Operations for Story model."""

    def __init__(self) -> None:
        super().__init__(Story)

    async def create(
        self,
        db: AsyncSession,
        obj_in: dict,
        user_id: uuid_pkg.UUID,
    ) -> Story:
        """Insert a story and return it with its repository loaded."""
        story = await super().create(db, obj_in=obj_in, user_id=user_id)
        loaded = await self.get_with_repository(db, user_id=user_id, id=story.id)
        return loaded or story

    async def get_with_repository(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        id: uuid_pkg.UUID,
    ) -> Story | None:
        """Get a single story with its repository eager-loaded."""
        statement = (
            select(Story)
            .options(selectinload(Story.repository))  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
            .where(
                Story.id == id,  # type: ignore[arg-type]
                Story.user_id == user_id,  # type: ignore[arg-type]
            )
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def list_with_repository(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Story]:
        """List the user's stories newest first, repositories eager-loaded."""
        statement = (
            select(Story)
            .options(selectinload(Story.repository))  # type: ignore[arg-type]
            .where(Story.user_id == user_id)  # type: ignore[arg-type]
            .order_by(Story.created_at.desc())  # type: ignore[attr-defined]
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


story_ops = StoryOperations()
