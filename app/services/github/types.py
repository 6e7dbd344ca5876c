"""Data types for GitHub API responses."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RepositoryMetadata:
    """Normalized repository metadata from GET /repos/{owner}/{repo}."""

    github_id: int
    name: str
    owner: str
    full_name: str
    description: str | None
    language: str | None
    size: int  # KB, as reported by GitHub
    stars_count: int
    forks_count: int
    open_issues_count: int
    created_at: str
    updated_at: str
    pushed_at: str | None
    is_private: bool
    html_url: str | None = None
    default_branch: str = "main"
    topics: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContributorRecord:
    """Contributor information."""

    login: str
    contributions: int  # Number of commits
    avatar_url: str | None = None
    type: str = "User"


@dataclass(frozen=True)
class CommitActivityWeek:
    """One weekly bucket from /stats/commit_activity."""

    week: int  # Unix timestamp of the week start (Sunday)
    total: int


@dataclass
class RepositorySnapshot:
    """Raw results of the four GitHub calls for one repository.

    commit_activity is None when GitHub had no authoritative data
    (202 "computing", error status, or a malformed body).
    """

    owner: str
    repo: str
    metadata: RepositoryMetadata
    contributors: list[ContributorRecord] = field(default_factory=list)
    languages: dict[str, int] = field(default_factory=dict)
    commit_activity: list[CommitActivityWeek] | None = None
    errors: list[str] = field(default_factory=list)  # Degraded secondary calls
