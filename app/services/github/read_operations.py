"""
GitHub API read operations.

Provides the read-only calls needed to analyze a public repository:
- Repository metadata (required)
- Contributors, language breakdown and weekly commit activity (best effort)

Only the metadata call can fail the operation. The three secondary calls
degrade to empty or missing values on any error and are issued concurrently,
each with its own timeout.
"""

import asyncio
import logging
from typing import Any

import httpx

from app.config import settings
from app.services.github.exceptions import UpstreamError
from app.services.github.helpers import handle_metadata_response, parse_repository_url
from app.services.github.http_client import get_github_client
from app.services.github.types import (
    CommitActivityWeek,
    ContributorRecord,
    RepositoryMetadata,
    RepositorySnapshot,
)

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/vnd.github.v3+json"


def _safe_json(response: httpx.Response) -> Any:
    """Decode a best-effort response body, treating malformed JSON as missing."""
    try:
        return response.json()
    except ValueError:
        return None


class GitHubReadOperations:
    """
    Read-only operations for GitHub API.

    Uses a shared HTTP client singleton for connection pooling. The optional
    token only raises the rate limit; every call targets public data.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        secondary_timeout: float | None = None,
    ):
        self.token = token if token is not None else settings.github_token
        self.base_url = (base_url or settings.github_api_url).rstrip("/")
        self.secondary_timeout = (
            secondary_timeout
            if secondary_timeout is not None
            else settings.github_secondary_timeout
        )
        self._headers = {"Accept": ACCEPT_HEADER}
        if self.token:
            self._headers["Authorization"] = f"Bearer {self.token}"

    def _normalize_repo(self, data: dict[str, Any]) -> RepositoryMetadata:
        """Convert GitHub API response to RepositoryMetadata dataclass."""
        owner = data.get("owner") or {}
        return RepositoryMetadata(
            github_id=data["id"],
            name=data["name"],
            owner=owner.get("login", ""),
            full_name=data["full_name"],
            description=data.get("description"),
            language=data.get("language"),
            size=data.get("size", 0),
            stars_count=data.get("stargazers_count", 0),
            forks_count=data.get("forks_count", 0),
            open_issues_count=data.get("open_issues_count", 0),
            created_at=data["created_at"],
            updated_at=data.get("updated_at") or data["created_at"],
            pushed_at=data.get("pushed_at"),
            is_private=data.get("private", False),
            html_url=data.get("html_url"),
            default_branch=data.get("default_branch", "main"),
            topics=tuple(data.get("topics") or ()),
        )

    async def _get_secondary(
        self,
        path: str,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response | None:
        """GET a best-effort endpoint. Returns None on transport error or timeout."""
        client = get_github_client()
        try:
            return await asyncio.wait_for(
                client.get(
                    f"{self.base_url}{path}",
                    headers=self._headers,
                    params=params,
                ),
                timeout=self.secondary_timeout,
            )
        except (httpx.HTTPError, TimeoutError) as e:
            logger.warning(f"GitHub request {path} failed: {type(e).__name__}: {e}")
            return None

    async def get_repo_details(self, owner: str, repo: str) -> RepositoryMetadata:
        """
        Fetch metadata for a specific repository.

        Args:
            owner: Repository owner (username or org)
            repo: Repository name

        Returns:
            RepositoryMetadata with full repository details

        Raises:
            RepositoryNotFound: On 404 (missing or private repository)
            UpstreamError: On any other non-200 status, a transport failure or
                timeout, or a 200 whose body is not a repository object
        """
        full_name = f"{owner}/{repo}"
        client = get_github_client()
        try:
            response = await client.get(
                f"{self.base_url}/repos/{full_name}",
                headers=self._headers,
            )
        except (httpx.TimeoutException, httpx.RequestError) as e:
            logger.warning(f"GitHub metadata call for {full_name} failed: {type(e).__name__}: {e}")
            raise UpstreamError(f"GitHub API unreachable: {type(e).__name__}") from e

        handle_metadata_response(response, full_name)

        try:
            return self._normalize_repo(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Unparseable metadata for {full_name}: {type(e).__name__}: {e}")
            raise UpstreamError("GitHub API returned an invalid repository response", 200) from e

    async def get_repo_contributors(
        self,
        owner: str,
        repo: str,
        per_page: int | None = None,
    ) -> list[ContributorRecord]:
        """
        Fetch top contributors for a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            per_page: Maximum number of contributors to request (default: 30)

        Returns:
            List of ContributorRecord in GitHub's order (contributions descending),
            or an empty list if the call fails
        """
        limit = per_page or settings.github_contributors_per_page
        response = await self._get_secondary(
            f"/repos/{owner}/{repo}/contributors",
            params={"per_page": limit},
        )

        if response is None or response.status_code != 200:
            if response is not None:
                logger.warning(
                    f"Contributors for {owner}/{repo} unavailable: {response.status_code}"
                )
            return []

        data = _safe_json(response)
        if not isinstance(data, list):
            return []

        try:
            return [
                ContributorRecord(
                    login=str(contrib.get("login") or ""),
                    contributions=int(contrib.get("contributions") or 0),
                    avatar_url=contrib.get("avatar_url"),
                    type=contrib.get("type") or "User",
                )
                for contrib in data
                if isinstance(contrib, dict)
            ]
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed contributors for {owner}/{repo}: {e}")
            return []

    async def get_repo_languages(self, owner: str, repo: str) -> dict[str, int]:
        """
        Fetch language breakdown for a repository.

        Returns:
            Mapping of language name to byte count, or an empty dict on failure
        """
        response = await self._get_secondary(f"/repos/{owner}/{repo}/languages")

        if response is None or response.status_code != 200:
            if response is not None:
                logger.warning(
                    f"Languages for {owner}/{repo} unavailable: {response.status_code}"
                )
            return {}

        data = _safe_json(response)
        if not isinstance(data, dict):
            return {}

        try:
            return {str(name): int(count) for name, count in data.items()}
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed languages for {owner}/{repo}: {e}")
            return {}

    async def get_commit_activity(
        self,
        owner: str,
        repo: str,
    ) -> list[CommitActivityWeek] | None:
        """
        Fetch the last year of weekly commit counts.

        GitHub answers 202 while it computes statistics for a repository that
        has not been queried recently. That, any other non-200 status and a
        non-list body all mean "no authoritative data".

        Returns:
            List of weekly buckets, or None when no authoritative data is available
        """
        response = await self._get_secondary(f"/repos/{owner}/{repo}/stats/commit_activity")

        if response is None:
            return None
        if response.status_code == 202:
            logger.info(f"Commit activity for {owner}/{repo} is still being computed")
            return None
        if response.status_code != 200:
            logger.warning(
                f"Commit activity for {owner}/{repo} unavailable: {response.status_code}"
            )
            return None

        data = _safe_json(response)
        if not isinstance(data, list):
            return None

        try:
            return [
                CommitActivityWeek(
                    week=int(week.get("week") or 0),
                    total=int(week.get("total") or 0),
                )
                for week in data
                if isinstance(week, dict)
            ]
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed commit activity for {owner}/{repo}: {e}")
            return None

    async def fetch_repository(self, url: str) -> RepositorySnapshot:
        """
        Fetch everything needed to analyze a repository.

        This is the main entry point. The URL is parsed before any network
        call. Metadata is fetched first and is required; contributors,
        languages and commit activity are then fetched concurrently.

        Args:
            url: Repository URL, e.g. "https://github.com/owner/repo"

        Returns:
            RepositorySnapshot with all gathered information

        Raises:
            InvalidRepositoryURL: URL is not github.com/<owner>/<repo>
            RepositoryNotFound: Repository is missing or private
            UpstreamError: Metadata call failed, timed out, returned another
                non-200 status or an unparseable body
        """
        owner, repo = parse_repository_url(url)
        logger.info(f"Fetching GitHub repository {owner}/{repo}")

        metadata = await self.get_repo_details(owner, repo)

        results = await asyncio.gather(
            self.get_repo_contributors(owner, repo),
            self.get_repo_languages(owner, repo),
            self.get_commit_activity(owner, repo),
            return_exceptions=True,
        )
        fields: list = []
        for name, result, default in zip(
            ("contributors", "languages", "commit_activity"), results, ([], {}, None)
        ):
            if isinstance(result, Exception):
                logger.warning(f"Fetching {name} for {owner}/{repo} failed: {result}")
                result = default
            elif isinstance(result, BaseException):
                raise result
            fields.append(result)
        contributors, languages, commit_activity = fields

        errors: list[str] = []
        if not contributors:
            errors.append("contributors")
        if not languages:
            errors.append("languages")
        if commit_activity is None:
            errors.append("commit_activity")

        return RepositorySnapshot(
            owner=owner,
            repo=repo,
            metadata=metadata,
            contributors=contributors,
            languages=languages,
            commit_activity=commit_activity,
            errors=errors,
        )
