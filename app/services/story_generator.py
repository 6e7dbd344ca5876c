"""
Story generation workflow.

Drives one user-triggered run end to end:
1. Parse the URL (no network)
2. Fetch the repository snapshot from GitHub
3. Aggregate insights and generate the narrative with Claude
4. Find-or-create the user's repository row
5. Insert the story

Every stage runs inside the caller's database transaction. Any failure
reports progress 0 and re-raises; the request transaction rolls back, so
no repository or story row survives a failed run.
"""

import logging
import uuid as uuid_pkg
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.domain.repository_operations import repository_ops
from app.domain.story_operations import story_ops
from app.models.repository import RepositoryCreate
from app.models.story import Story, StoryCreate
from app.schemas.story import StoryProgress
from app.services.github import GitHubReadOperations, RepositoryMetadata, parse_repository_url
from app.services.insights import build_analysis, build_insights
from app.services.narrative import StoryNarrator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[StoryProgress], Awaitable[None]]

STORY_TITLE_TEMPLATE = "The Story of {name}"


def build_repository_data(url: str, metadata: RepositoryMetadata) -> RepositoryCreate:
    """Map GitHub metadata onto the stored repository fields."""
    return RepositoryCreate(
        name=metadata.name,
        full_name=metadata.full_name,
        url=url,
        description=metadata.description or "No description provided",
        language=metadata.language or "Multiple",
        is_private=metadata.is_private,
        github_id=metadata.github_id,
        stars_count=metadata.stars_count,
        forks_count=metadata.forks_count,
    )


class StoryGenerator:
    """
    Generates and persists a story for one repository URL.

    Collaborators are injected so tests can substitute fakes for the GitHub
    client and the narrator.
    """

    def __init__(
        self,
        github: GitHubReadOperations | None = None,
        narrator: StoryNarrator | None = None,
    ) -> None:
        self.github = github or GitHubReadOperations()
        self.narrator = narrator or StoryNarrator()

    async def generate(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        url: str,
        on_progress: ProgressCallback | None = None,
    ) -> Story:
        """
        Run the full workflow and return the persisted story.

        Args:
            db: Request-scoped session (RLS context already set)
            user_id: Owner of the new rows
            url: Submitted repository URL
            on_progress: Optional async callback receiving StoryProgress updates

        Raises:
            InvalidRepositoryURL: URL is not a GitHub repository URL
            RepositoryNotFound: GitHub returned 404 for the repository
            UpstreamError: GitHub metadata call failed otherwise
            GenerationError: Claude failed or returned nothing
            SQLAlchemyError: Persistence failed
        """
        repo_url = url.strip()

        async def report(progress: StoryProgress) -> None:
            logger.debug(f"Story progress {progress.percent}%: {progress.stage}")
            if on_progress is not None:
                await on_progress(progress)

        try:
            owner, repo = parse_repository_url(repo_url)
            logger.info(f"Generating story for {owner}/{repo}")
            await report(
                StoryProgress(
                    stage="parsing_url", percent=10, message=f"Looking up {owner}/{repo}..."
                )
            )

            snapshot = await self.github.fetch_repository(repo_url)
            if snapshot.errors:
                logger.info(
                    f"Partial data for {snapshot.metadata.full_name}: "
                    f"degraded {', '.join(snapshot.errors)}"
                )
            await report(
                StoryProgress(
                    stage="fetching_repository",
                    percent=30,
                    message=f"Fetched {snapshot.metadata.full_name} from GitHub",
                )
            )

            analysis = build_analysis(snapshot)
            insights = build_insights(analysis, settings.top_languages_limit)
            content = await self.narrator.narrate(analysis)
            await report(
                StoryProgress(stage="generating_story", percent=70, message="Story written")
            )

            repository = await repository_ops.find_or_create(
                db,
                user_id=user_id,
                data=build_repository_data(repo_url, snapshot.metadata),
            )
            await report(
                StoryProgress(stage="saving_repository", percent=85, message="Saving repository...")
            )

            story = await story_ops.create(
                db,
                obj_in=StoryCreate(
                    title=STORY_TITLE_TEMPLATE.format(name=snapshot.metadata.name),
                    content=content,
                    repository_id=repository.id,
                    insights=insights.model_dump(),
                ).model_dump(),
                user_id=user_id,
            )
            await report(StoryProgress(stage="completed", percent=100, message="Story saved"))

        except Exception as e:
            logger.warning(f"Story generation failed for {repo_url}: {type(e).__name__}: {e}")
            await report(StoryProgress(stage="failed", percent=0, message=str(e) or None))
            raise

        logger.info(
            f"Generated story {story.id} for {snapshot.metadata.full_name} "
            f"({insights.total_commits} commits, {insights.commits_source})"
        )
        return story
