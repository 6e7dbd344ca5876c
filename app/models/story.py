import uuid as uuid_pkg
from typing import Any, Optional

from sqlalchemy import Column, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

from app.models.base import TimestampMixin, UserOwnedMixin, UUIDMixin
from app.models.repository import Repository


class StoryBase(SQLModel):
    """Base fields for Story."""

    title: str = Field(max_length=500)
    content: str


class StoryCreate(StoryBase):
    """Schema for inserting a generated story."""

    repository_id: uuid_pkg.UUID | None = None
    insights: dict[str, Any]


class Story(StoryBase, UUIDMixin, TimestampMixin, UserOwnedMixin, table=True):
    """Generated narrative for one repository run.

    Each generation inserts a new row; stories are never updated.
    """

    __tablename__ = "stories"

    repository_id: uuid_pkg.UUID | None = Field(
        default=None,
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("repositories.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )

    insights: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(
            JSONB,
            nullable=False,
            comment="Frozen statistics at generation time (StoryInsights schema)",
        ),
    )

    # Relationships
    repository: Optional[Repository] = Relationship()
