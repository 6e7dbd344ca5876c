"""Pydantic schemas for API request/response validation."""

from app.schemas.story import StoryCreateRequest, StoryInsights, StoryProgress

__all__ = [
    "StoryCreateRequest",
    "StoryInsights",
    "StoryProgress",
]
