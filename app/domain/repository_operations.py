"""Repository operations.

Repositories are user-owned: each user has at most one row per URL,
enforced by the unique (user_id, url) index. find_or_create relies on that
index for an atomic upsert instead of a check-then-insert.
"""

import uuid as uuid_pkg
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.base_operations import BaseOperations
from app.models.repository import Repository, RepositoryCreate


class RepositoryOperations(BaseOperations[Repository]):
    """Operations for Repository model."""

    def __init__(self) -> None:
        super().__init__(Repository)

    async def get_by_url(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        url: str,
    ) -> Repository | None:
        """Get the user's repository row for an exact URL."""
        statement = select(Repository).where(
            Repository.user_id == user_id,  # type: ignore[arg-type]
            Repository.url == url,  # type: ignore[arg-type]
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def find_or_create(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        data: RepositoryCreate,
    ) -> Repository:
        """
        Return the user's repository for data.url, inserting it if missing.

        Uses PostgreSQL's INSERT ... ON CONFLICT DO UPDATE for atomicity, so
        two concurrent calls for the same user and URL resolve to one row.
        On conflict only last_analyzed_at and updated_at are touched; the
        stored GitHub metadata keeps its first-seen values.

        Args:
            db: Database session
            user_id: Owner of the row
            data: Repository fields built from GitHub metadata

        Returns:
            The existing or newly inserted Repository
        """
        now = datetime.now(UTC)

        stmt = (
            insert(Repository)
            .values(
                **data.model_dump(),
                user_id=user_id,
                last_analyzed_at=now,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=["user_id", "url"],
                set_={
                    "last_analyzed_at": now,
                    "updated_at": now,
                },
            )
            .returning(Repository)
        )

        result = await db.execute(stmt)
        await db.flush()

        return result.scalar_one()


repository_ops = RepositoryOperations()
