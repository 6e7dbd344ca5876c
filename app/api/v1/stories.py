"""Story API endpoints.

POST /stories runs the whole generation workflow synchronously inside the
request. This endpoint is the single place where workflow failures are
mapped to HTTP responses.
"""

import logging
import uuid as uuid_pkg
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db_with_rls
from app.api.v1.serializers import serialize_story
from app.core.exceptions import (
    NotFoundError,
    PersistenceError,
    UpstreamServiceError,
    ValidationError,
)
from app.domain import story_ops
from app.models.user import User
from app.schemas.story import StoryCreateRequest
from app.services.export import export_story
from app.services.github import InvalidRepositoryURL, RepositoryNotFound, UpstreamError
from app.services.narrative import GenerationError
from app.services.story_generator import StoryGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stories", tags=["stories"])


def get_story_generator() -> StoryGenerator:
    """Dependency providing the story generator (overridden in tests)."""
    return StoryGenerator()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_story(
    data: StoryCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
    generator: StoryGenerator = Depends(get_story_generator),
):
    """
    Generate a story for a public GitHub repository.

    Fetches repository data, writes the narrative with Claude, and stores
    the repository and story. Nothing is stored if any step fails.
    """
    try:
        story = await generator.generate(db, user_id=current_user.id, url=data.repo_url)
    except InvalidRepositoryURL as e:
        raise ValidationError(e.message) from e
    except RepositoryNotFound as e:
        raise NotFoundError("Repository", e.message) from e
    except UpstreamError as e:
        raise UpstreamServiceError(e.message) from e
    except GenerationError as e:
        raise UpstreamServiceError("Failed to generate story") from e
    except SQLAlchemyError as e:
        logger.error(f"Failed to save story for {data.repo_url}: {e}")
        raise PersistenceError("Failed to save story") from e

    return serialize_story(story)


@router.get("", response_model=list[dict])
async def list_stories(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """List the current user's stories, newest first."""
    stories = await story_ops.list_with_repository(
        db, user_id=current_user.id, skip=skip, limit=limit
    )
    return [serialize_story(s) for s in stories]


@router.get("/{story_id}")
async def get_story(
    story_id: uuid_pkg.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Get a single story with its repository."""
    story = await story_ops.get_with_repository(db, user_id=current_user.id, id=story_id)
    if not story:
        raise NotFoundError("Story")
    return serialize_story(story)


@router.get("/{story_id}/export")
async def export_story_file(
    story_id: uuid_pkg.UUID,
    format: Literal["markdown", "text"] = Query("markdown"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Download a story as a markdown or plain-text file."""
    story = await story_ops.get_with_repository(db, user_id=current_user.id, id=story_id)
    if not story:
        raise NotFoundError("Story")

    exported = export_story(story, format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
