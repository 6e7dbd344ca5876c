"""Story export as markdown or plain text downloads."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from app.models.story import Story

ExportFormat = Literal["markdown", "text"]

UNKNOWN_REPOSITORY = "Unknown Repository"

_EXTENSIONS: dict[str, str] = {
    "markdown": "md",
    "text": "txt",
}


@dataclass(frozen=True)
class ExportedStory:
    """Rendered export ready to be served as an attachment."""

    filename: str
    content: str
    media_type: str = "text/plain"


def _format_date(value: datetime) -> str:
    return value.date().isoformat()


def render_markdown(title: str, content: str, url: str, generated: str) -> str:
    return (
        f"# {title}\n\n{content}\n\n---\n\n"
        f"**Repository:** {url}\n**Generated:** {generated}"
    )


def render_text(title: str, content: str, url: str, generated: str) -> str:
    return f"{title}\n\n{content}\n\nRepository: {url}\nGenerated: {generated}"


def export_story(story: Story, format: ExportFormat = "markdown") -> ExportedStory:
    """
    Render a story for download.

    The story's repository must be loaded (see story_ops.get_with_repository).
    A story whose repository was deleted exports as "Unknown Repository".

    Raises:
        ValueError: Unsupported format
    """
    if format not in _EXTENSIONS:
        raise ValueError(f"Unsupported export format: {format}")

    repository = story.repository
    repo_name = repository.name if repository else UNKNOWN_REPOSITORY
    repo_url = repository.url if repository else ""
    generated = _format_date(story.created_at)

    render = render_markdown if format == "markdown" else render_text
    return ExportedStory(
        filename=f"{repo_name}-story.{_EXTENSIONS[format]}",
        content=render(story.title, story.content, repo_url, generated),
    )
