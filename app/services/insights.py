"""
Insight aggregation for repository stories.

Turns the raw GitHub results into a RepositoryAnalysis and the frozen
StoryInsights snapshot stored with each story. Pure transformation: no
network or database access.

Commit counts come from two places:
- authoritative: the sum of the weekly /stats/commit_activity buckets
- estimated: max(ceil(age_in_days / 7) * 2, 10) when GitHub has no data
The provenance is kept on CommitCount so the two are never blended silently.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from app.schemas.story import StoryInsights
from app.services.github.types import (
    CommitActivityWeek,
    ContributorRecord,
    RepositoryMetadata,
    RepositorySnapshot,
)

CommitSource = Literal["authoritative", "estimated"]

SECONDS_PER_DAY = 86_400

# Estimation: roughly two commits per active week, never fewer than ten
ESTIMATED_COMMITS_PER_WEEK = 2
MIN_ESTIMATED_COMMITS = 10

DEFAULT_TOP_LANGUAGES = 5


@dataclass(frozen=True)
class Timespan:
    """Active development window of a repository."""

    first_seen: datetime  # created_at
    last_seen: datetime  # pushed_at, or updated_at if never pushed
    duration_days: int


@dataclass(frozen=True)
class CommitCount:
    """Total commits and where the number came from."""

    total: int
    source: CommitSource

    @property
    def is_estimated(self) -> bool:
        return self.source == "estimated"


@dataclass
class RepositoryAnalysis:
    """Normalized analysis record for one repository."""

    metadata: RepositoryMetadata
    contributors: list[ContributorRecord]
    languages: dict[str, int]
    commit_activity: list[CommitActivityWeek] = field(default_factory=list)
    commits: CommitCount = field(default_factory=lambda: CommitCount(0, "estimated"))
    timespan: Timespan | None = None

    @property
    def total_commits(self) -> int:
        return self.commits.total


def parse_github_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as returned by GitHub ("2024-01-15T10:00:00Z")."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def compute_timespan(
    created_at: str,
    pushed_at: str | None,
    updated_at: str | None,
) -> Timespan:
    """Compute the development timespan from repository timestamps.

    Duration is the floor of the difference in whole days.
    """
    created = parse_github_timestamp(created_at)
    last = parse_github_timestamp(pushed_at or updated_at or created_at)
    delta_seconds = (last - created).total_seconds()
    duration_days = math.floor(delta_seconds / SECONDS_PER_DAY)
    return Timespan(first_seen=created, last_seen=last, duration_days=duration_days)


def estimate_commit_count(duration_days: int) -> int:
    """Estimate total commits from repository age."""
    weeks_active = math.ceil(duration_days / 7)
    return max(weeks_active * ESTIMATED_COMMITS_PER_WEEK, MIN_ESTIMATED_COMMITS)


def count_commits(
    weeks: list[CommitActivityWeek] | None,
    duration_days: int,
) -> CommitCount:
    """Sum weekly buckets, falling back to the age-based estimate.

    A missing list, an empty list and a year of all-zero buckets all count
    as "no data" and produce an estimate.
    """
    total = sum(week.total for week in weeks) if weeks else 0
    if total > 0:
        return CommitCount(total=total, source="authoritative")
    return CommitCount(total=estimate_commit_count(duration_days), source="estimated")


def get_top_languages(languages: dict[str, int], limit: int = DEFAULT_TOP_LANGUAGES) -> list[str]:
    """Return the names of the `limit` largest languages by byte count.

    Ties keep the mapping's insertion order (sorted() is stable).
    """
    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:limit]]


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def format_timespan(days: int) -> str:
    """Format a duration in days as a human-readable string.

    Examples:
        12  -> "12 days"
        30  -> "1 month"
        364 -> "12 months"
        365 -> "1 year"
        400 -> "1 year, 1 month"
    """
    if days < 30:
        return f"{days} days"
    if days < 365:
        return _plural(days // 30, "month")

    years = days // 365
    months = (days % 365) // 30
    if months > 0:
        return f"{_plural(years, 'year')}, {_plural(months, 'month')}"
    return _plural(years, "year")


def build_analysis(snapshot: RepositorySnapshot) -> RepositoryAnalysis:
    """Combine the fetched GitHub data into a RepositoryAnalysis."""
    metadata = snapshot.metadata
    timespan = compute_timespan(metadata.created_at, metadata.pushed_at, metadata.updated_at)
    commits = count_commits(snapshot.commit_activity, timespan.duration_days)

    return RepositoryAnalysis(
        metadata=metadata,
        contributors=list(snapshot.contributors),
        languages=dict(snapshot.languages),
        commit_activity=list(snapshot.commit_activity or []),
        commits=commits,
        timespan=timespan,
    )


def build_insights(
    analysis: RepositoryAnalysis,
    top_n: int = DEFAULT_TOP_LANGUAGES,
) -> StoryInsights:
    """Freeze the statistics stored alongside a generated story."""
    duration_days = analysis.timespan.duration_days if analysis.timespan else 0
    return StoryInsights(
        total_commits=analysis.commits.total,
        commits_source=analysis.commits.source,
        contributors=len(analysis.contributors),
        languages=get_top_languages(analysis.languages, top_n),
        timespan=format_timespan(duration_days),
    )
