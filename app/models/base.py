import uuid as uuid_pkg
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def timestamp_field(**kwargs: Any) -> Any:
    """TIMESTAMP WITH TIME ZONE column defaulting to now() on both sides."""
    return Field(  # type: ignore[call-overload]
        default_factory=utcnow,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
        **kwargs,
    )


class UUIDMixin(SQLModel):
    """UUID primary key, generated client-side with a gen_random_uuid() fallback."""

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        primary_key=True,
        index=True,
        nullable=False,
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )


class TimestampMixin(SQLModel):
    """created_at / updated_at, both timezone-aware."""

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class UserOwnedMixin(SQLModel):
    """Owner column read by the RLS policies. Rows go when the user goes."""

    user_id: uuid_pkg.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        nullable=False,
        index=True,
    )
