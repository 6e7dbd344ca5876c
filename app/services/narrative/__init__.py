"""Narrative generation for repository stories.

Quick start:
    from app.services.narrative import StoryNarrator

    narrator = StoryNarrator()
    content = await narrator.narrate(analysis)
"""

from .base import BaseInterpreter
from .exceptions import GenerationError
from .narrator import StoryNarrator

__all__ = [
    "BaseInterpreter",
    "GenerationError",
    "StoryNarrator",
]
