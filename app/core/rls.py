"""Row-Level Security (RLS) context management.

Sets the PostgreSQL session setting read by the RLS policies on the users,
repositories and stories tables.

- set_config(..., true) is transaction-scoped, so it works with PgBouncer pooling
- Policies compare user_id to current_setting('app.current_user_id', true)
- The service role bypasses RLS (configured in the initial migration)

Usage:
    await set_rls_user_context(session, user.id)
    # All subsequent queries in this transaction are filtered by RLS
"""

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


async def set_rls_user_context(session: AsyncSession, user_id: UUID) -> None:
    """
    Set the current user context for RLS policies.

    The setting is automatically reset when the transaction ends.

    Args:
        session: The async database session
        user_id: The authenticated user's UUID
    """
    # set_config() accepts bind parameters, SET LOCAL does not under asyncpg
    await session.execute(
        text("SELECT set_config('app.current_user_id', :user_id, true)"),
        {"user_id": str(user_id)},
    )


async def get_current_rls_user_id(session: AsyncSession) -> UUID | None:
    """
    Get the currently set RLS user ID from the session.

    Used by the integration tests to verify the context is set.
    """
    result = await session.execute(
        text("SELECT NULLIF(current_setting('app.current_user_id', true), '')::uuid")
    )
    return result.scalar_one_or_none()

