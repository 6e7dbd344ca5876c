"""Unit tests for story export rendering."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.services.export import export_story

from tests.helpers.mock_factories import make_mock_repository, make_mock_story


def _story(**overrides):
    repo = overrides.pop(
        "repository",
        make_mock_repository(name="react", url="https://github.com/facebook/react"),
    )
    return make_mock_story(
        title="The Story of react",
        content="It began with a view layer.",
        repository=repo,
        created_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        **overrides,
    )


class TestExportStory:
    def test_markdown(self):
        exported = export_story(_story(), "markdown")

        assert exported.filename == "react-story.md"
        assert exported.media_type == "text/plain"
        assert exported.content == (
            "# The Story of react\n\n"
            "It began with a view layer.\n\n"
            "---\n\n"
            "**Repository:** https://github.com/facebook/react\n"
            "**Generated:** 2026-03-01"
        )

    def test_text(self):
        exported = export_story(_story(), "text")

        assert exported.filename == "react-story.txt"
        assert exported.content == (
            "The Story of react\n\n"
            "It began with a view layer.\n\n"
            "Repository: https://github.com/facebook/react\n"
            "Generated: 2026-03-01"
        )

    def test_defaults_to_markdown(self):
        assert export_story(_story()).filename.endswith(".md")

    def test_story_without_repository(self):
        exported = export_story(_story(repository=None), "text")

        assert exported.filename == "Unknown Repository-story.txt"
        assert "Repository: \n" in exported.content

    def test_rejects_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported export format"):
            export_story(_story(), "pdf")  # type: ignore[arg-type]
