"""initial_story_schema

Revision ID: 8c1e4a7b2d90
Revises:
Create Date: 2026-10-18 09:12:31.504117

Creates the users, repositories and stories tables and enables Row-Level
Security on them. Policies compare owner columns to app_user_id(), which
reads the app.current_user_id setting bound per request transaction.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "8c1e4a7b2d90"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # 1. users (mirrors Supabase auth.users)
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False, comment="UUID from Supabase auth.users"),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # 2. repositories (one row per user and URL)
    op.create_table(
        "repositories",
        sa.Column(
            "id",
            sa.Uuid(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=500), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("description", sa.String(length=2000), nullable=True),
        sa.Column("language", sa.String(length=50), nullable=True),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("github_id", sa.BigInteger(), nullable=True),
        sa.Column("stars_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("forks_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "last_analyzed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="When a story was last generated for this repository",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_repositories_id", "repositories", ["id"])
    op.create_index("ix_repositories_user_id", "repositories", ["user_id"])
    op.create_index("ix_repositories_name", "repositories", ["name"])
    op.create_index("ix_repositories_github_id", "repositories", ["github_id"])
    op.create_index(
        "ix_repositories_user_url",
        "repositories",
        ["user_id", "url"],
        unique=True,
    )

    # 3. stories (insert-only; repository link survives as NULL if the repo is deleted)
    op.create_table(
        "stories",
        sa.Column(
            "id",
            sa.Uuid(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("repository_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "insights",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Frozen statistics at generation time (StoryInsights schema)",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["repository_id"], ["repositories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_stories_id", "stories", ["id"])
    op.create_index("ix_stories_user_id", "stories", ["user_id"])
    op.create_index("ix_stories_repository_id", "stories", ["repository_id"])

    # 4. RLS helper and policies
    # Each statement must be in a separate op.execute() for asyncpg compatibility
    op.execute("""
        CREATE OR REPLACE FUNCTION app_user_id()
        RETURNS UUID AS $$
            SELECT NULLIF(current_setting('app.current_user_id', true), '')::uuid;
        $$ LANGUAGE sql STABLE
    """)

    op.execute("ALTER TABLE users ENABLE ROW LEVEL SECURITY")
    op.execute("""
        CREATE POLICY users_select_own ON users
            FOR SELECT
            USING (id = app_user_id())
    """)
    op.execute("""
        CREATE POLICY users_update_own ON users
            FOR UPDATE
            USING (id = app_user_id())
            WITH CHECK (id = app_user_id())
    """)

    op.execute("ALTER TABLE repositories ENABLE ROW LEVEL SECURITY")
    op.execute("""
        CREATE POLICY repositories_own ON repositories
            FOR ALL
            USING (user_id = app_user_id())
            WITH CHECK (user_id = app_user_id())
    """)

    op.execute("ALTER TABLE stories ENABLE ROW LEVEL SECURITY")
    op.execute("""
        CREATE POLICY stories_own ON stories
            FOR ALL
            USING (user_id = app_user_id())
            WITH CHECK (user_id = app_user_id())
    """)


def downgrade() -> None:
    op.execute("DROP POLICY IF EXISTS stories_own ON stories")
    op.execute("DROP POLICY IF EXISTS repositories_own ON repositories")
    op.execute("DROP POLICY IF EXISTS users_update_own ON users")
    op.execute("DROP POLICY IF EXISTS users_select_own ON users")

    op.drop_index("ix_stories_repository_id", table_name="stories")
    op.drop_index("ix_stories_user_id", table_name="stories")
    op.drop_index("ix_stories_id", table_name="stories")
    op.drop_table("stories")

    op.drop_index("ix_repositories_user_url", table_name="repositories")
    op.drop_index("ix_repositories_github_id", table_name="repositories")
    op.drop_index("ix_repositories_name", table_name="repositories")
    op.drop_index("ix_repositories_user_id", table_name="repositories")
    op.drop_index("ix_repositories_id", table_name="repositories")
    op.drop_table("repositories")

    op.drop_table("users")

    op.execute("DROP FUNCTION IF EXISTS app_user_id()")
