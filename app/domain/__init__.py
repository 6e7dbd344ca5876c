from app.domain.repository_operations import repository_ops
from app.domain.story_operations import story_ops

__all__ = [
    "repository_ops",
    "story_ops",
]
