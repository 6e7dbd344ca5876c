from app.models.repository import Repository, RepositoryCreate
from app.models.story import Story, StoryCreate
from app.models.user import User

__all__ = [
    "User",
    "Repository",
    "RepositoryCreate",
    "Story",
    "StoryCreate",
]
