# Services package

from app.services.export import ExportedStory, export_story
from app.services.insights import RepositoryAnalysis, build_analysis, build_insights
from app.services.story_generator import StoryGenerator

__all__ = [
    # Story workflow
    "StoryGenerator",
    # Aggregation
    "RepositoryAnalysis",
    "build_analysis",
    "build_insights",
    # Export
    "ExportedStory",
    "export_story",
]
