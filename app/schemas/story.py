"""Pydantic schemas for story generation.

StoryInsights defines the structure of the `insights` JSONB column on the
stories table. It is written once at generation time and never updated.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class StoryInsights(BaseModel):
    """Frozen statistics captured alongside a generated story."""

    total_commits: int = Field(ge=0, description="Authoritative or estimated commit total")
    commits_source: Literal["authoritative", "estimated"] = Field(
        description="Where total_commits came from: weekly stats sum or age-based estimate",
    )
    contributors: int = Field(ge=0, description="Number of contributors returned by GitHub")
    languages: list[str] = Field(
        default_factory=list,
        description="Top language names by byte count, largest first",
    )
    timespan: str = Field(description="Human-readable development period, e.g. '1 year, 2 months'")


class StoryCreateRequest(BaseModel):
    """Request body for POST /stories."""

    repo_url: str = Field(
        min_length=1,
        max_length=500,
        description="Public GitHub repository URL, e.g. 'https://github.com/owner/repo'",
    )

    @field_validator("repo_url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()


class StoryProgress(BaseModel):
    """Progress update during story generation.

    Reported through the generator's on_progress callback. Percentages follow
    the pipeline stages; 0 means the run failed.
    """

    stage: Literal[
        "parsing_url",
        "fetching_repository",
        "generating_story",
        "saving_repository",
        "completed",
        "failed",
    ] = Field(description="Current stage of the generation workflow")

    percent: int = Field(ge=0, le=100, description="Completion percentage")

    message: str | None = Field(
        default=None,
        description="Human-readable status message, e.g., 'Fetching repository from GitHub...'",
    )
