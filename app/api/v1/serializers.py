"""Response serialization shared by the story and repository endpoints."""

from app.models.repository import Repository
from app.models.story import Story


def serialize_repository(r: Repository) -> dict:
    """Serialize a repository to a dict response."""
    return {
        "id": str(r.id),
        "name": r.name,
        "full_name": r.full_name,
        "url": r.url,
        "description": r.description,
        "language": r.language,
        "stars_count": r.stars_count,
        "forks_count": r.forks_count,
        "is_private": r.is_private,
        "github_id": r.github_id,
        "last_analyzed_at": r.last_analyzed_at.isoformat(),
        "created_at": r.created_at.isoformat(),
        "updated_at": r.updated_at.isoformat(),
    }


def serialize_story(s: Story) -> dict:
    """Serialize a story with its repository (None if the repository was deleted)."""
    return {
        "id": str(s.id),
        "title": s.title,
        "content": s.content,
        "insights": s.insights,
        "repository_id": str(s.repository_id) if s.repository_id else None,
        "repository": serialize_repository(s.repository) if s.repository else None,
        "created_at": s.created_at.isoformat(),
        "updated_at": s.updated_at.isoformat(),
    }
