import uuid as uuid_pkg

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin


class User(TimestampMixin, SQLModel, table=True):
    """
    Mirror of a Supabase auth.users row.

    The id is the JWT `sub` claim. Rows are created on the first
    authenticated request; profile fields come from the token's user_metadata.
    """

    __tablename__ = "users"

    id: uuid_pkg.UUID = Field(
        primary_key=True,
        nullable=False,
        description="UUID from Supabase auth.users",
    )
    email: str | None = Field(default=None, max_length=255)
    display_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=500)
