"""
Story narrator.

Builds a deterministic prompt from a RepositoryAnalysis and asks Claude for
an 800-1000 word narrative of the project's development journey.
"""

from app.config import settings
from app.services.insights import (
    RepositoryAnalysis,
    format_timespan,
    get_top_languages,
    parse_github_timestamp,
)

from .base import BaseInterpreter

MAX_PROMPT_CONTRIBUTORS = 5

STORY_PROMPT = """Analyze this GitHub repository and create a compelling story about its development journey:

Repository: {full_name}
Description: {description}
Primary Language: {language}
Stars: {stars}
Forks: {forks}
Contributors: {contributor_count}
Total Commits{commits_label}: {total_commits}
Languages Used: {languages}
Active Development Period: {timespan}
Created: {created}
Last Updated: {last_updated}

Top Contributors:
{contributors}

Create an engaging narrative that includes:
- The project's origin story and motivation based on the description and early commits
- Key development milestones and challenges overcome
- The evolution of the codebase from {size} KB across {language_count} languages
- Notable contributions from the {contributor_count} developers involved
- The impact shown by {stars} stars and {forks} forks
- Future potential based on recent activity and {open_issues} open issues

Make it read like a captivating story about the human journey behind the code, using the real data to support the narrative. Keep it around 800-1000 words."""


def _format_date(timestamp: str) -> str:
    return parse_github_timestamp(timestamp).date().isoformat()


class StoryNarrator(BaseInterpreter[RepositoryAnalysis, str]):
    """Generate the narrative text for one analyzed repository."""

    def __init__(self, *args, top_languages: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.model = settings.story_model
        self.max_tokens = settings.story_max_tokens
        self.top_languages = top_languages or settings.top_languages_limit

    def format_input(self, input_data: RepositoryAnalysis) -> str:
        metadata = input_data.metadata
        top_languages = get_top_languages(input_data.languages, self.top_languages)
        duration_days = input_data.timespan.duration_days if input_data.timespan else 0

        contributor_lines = "\n".join(
            f"- {c.login} ({c.contributions} contributions)"
            for c in input_data.contributors[:MAX_PROMPT_CONTRIBUTORS]
        )

        return STORY_PROMPT.format(
            full_name=metadata.full_name,
            description=metadata.description or "No description provided",
            language=metadata.language or "Multiple languages",
            stars=metadata.stars_count,
            forks=metadata.forks_count,
            contributor_count=len(input_data.contributors),
            commits_label=" (estimated)" if input_data.commits.is_estimated else "",
            total_commits=input_data.commits.total,
            languages=", ".join(top_languages),
            language_count=len(top_languages),
            timespan=format_timespan(duration_days),
            created=_format_date(metadata.created_at),
            last_updated=_format_date(metadata.pushed_at or metadata.updated_at),
            contributors=contributor_lines,
            size=metadata.size,
            open_issues=metadata.open_issues_count,
        )

    def parse_output(self, response_text: str) -> str:
        return response_text.strip()

    async def narrate(self, analysis: RepositoryAnalysis) -> str:
        """Return the story text. Raises GenerationError on any failure."""
        return await self.interpret(analysis)
