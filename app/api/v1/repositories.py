"""Repository API endpoints.

Repositories are created as a side effect of story generation; this router
only exposes them for reading. Rows are scoped to the current user.
"""

import uuid as uuid_pkg

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db_with_rls
from app.api.v1.serializers import serialize_repository
from app.core.exceptions import NotFoundError
from app.domain import repository_ops
from app.models.user import User

router = APIRouter(prefix="/repositories", tags=["repositories"])


@router.get("", response_model=list[dict])
async def list_repositories(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """List the current user's repositories, most recently added first."""
    repos = await repository_ops.get_multi_by_user(
        db, user_id=current_user.id, skip=skip, limit=limit
    )
    return [serialize_repository(r) for r in repos]


@router.get("/{repository_id}")
async def get_repository(
    repository_id: uuid_pkg.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Get a single repository owned by the current user."""
    repo = await repository_ops.get_by_user(db, user_id=current_user.id, id=repository_id)
    if not repo:
        raise NotFoundError("Repository")
    return serialize_repository(repo)
