from datetime import datetime

from sqlalchemy import BigInteger, Index
from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, UserOwnedMixin, UUIDMixin, timestamp_field


class RepositoryBase(SQLModel):
    """Base fields for Repository."""

    name: str = Field(max_length=255, index=True)
    full_name: str = Field(max_length=500)
    url: str = Field(max_length=500)
    description: str | None = Field(default=None, max_length=2000)
    language: str | None = Field(default=None, max_length=50)
    is_private: bool = Field(default=False)

    # GitHub metadata (stored at analysis time)
    github_id: int | None = Field(default=None, index=True, sa_type=BigInteger)
    stars_count: int = Field(default=0)
    forks_count: int = Field(default=0)


class RepositoryCreate(RepositoryBase):
    """Schema for find-or-create. Built from fetched GitHub metadata."""


class Repository(RepositoryBase, UUIDMixin, TimestampMixin, UserOwnedMixin, table=True):
    """GitHub repository analyzed by a user.

    Rows are per user: the same URL submitted by two users yields two rows.
    """

    __tablename__ = "repositories"
    __table_args__ = (
        Index(
            "ix_repositories_user_url",
            "user_id",
            "url",
            unique=True,
        ),
    )

    # Bumped by find_or_create on every story run
    last_analyzed_at: datetime = timestamp_field(
        description="When a story was last generated for this repository",
    )
