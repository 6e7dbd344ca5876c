import uuid as uuid_pkg
from typing import Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseOperations(Generic[ModelType]):
    """Read and insert operations for user-owned models.

    There is no unscoped getter: every query filters on user_id, and the
    RLS policies enforce the same scope inside the database.
    """

    def __init__(self, model: type[ModelType]):
        self.model = model

    def _owned_by(self, user_id: uuid_pkg.UUID) -> Select:
        return select(self.model).where(self.model.user_id == user_id)

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        id: uuid_pkg.UUID,
    ) -> ModelType | None:
        """Get one of the user's records, or None if it is missing or not theirs."""
        result = await db.execute(self._owned_by(user_id).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_multi_by_user(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModelType]:
        """Page through the user's records, newest first."""
        statement = (
            self._owned_by(user_id)
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        obj_in: dict,
        user_id: uuid_pkg.UUID,
    ) -> ModelType:
        """Insert a record owned by user_id and return it with server defaults loaded."""
        db_obj = self.model(**obj_in, user_id=user_id)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj
