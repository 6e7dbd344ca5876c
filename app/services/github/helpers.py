"""
GitHub API helper utilities.

Provides URL parsing, rate limit handling and error response processing
for GitHub API calls.
"""

import logging
import re

import httpx

from app.services.github.exceptions import (
    InvalidRepositoryURL,
    RepositoryNotFound,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# github.com/<owner>/<repo>, optionally followed by more path, query or fragment
_REPO_URL_PATTERN = re.compile(r"github\.com/([^/\s?#]+)/([^/\s?#]+)", re.IGNORECASE)


class RateLimitInfo:
    """Rate limit information from GitHub API response."""

    def __init__(self, response: httpx.Response) -> None:
        self.remaining = response.headers.get("X-RateLimit-Remaining")
        self.reset = response.headers.get("X-RateLimit-Reset")

    @property
    def reset_timestamp(self) -> int | None:
        """Get reset timestamp as integer, or None if not available."""
        return int(self.reset) if self.reset else None

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining is not None and int(self.remaining) == 0


def parse_repository_url(url: str) -> tuple[str, str]:
    """
    Extract owner and repository name from a GitHub URL.

    Accepts URLs such as:
        https://github.com/owner/repo
        https://github.com/owner/repo.git
        github.com/owner/repo/tree/main

    Args:
        url: User-submitted repository URL

    Returns:
        Tuple of (owner, repo) with any trailing ".git" removed

    Raises:
        InvalidRepositoryURL: If the URL does not contain github.com/<owner>/<repo>
    """
    match = _REPO_URL_PATTERN.search(url.strip()) if url else None
    if not match:
        raise InvalidRepositoryURL(url)

    owner, repo = match.group(1), match.group(2)
    repo = re.sub(r"\.git$", "", repo)
    if not repo:
        raise InvalidRepositoryURL(url)

    return owner, repo


def handle_metadata_response(response: httpx.Response, repo_name: str) -> None:
    """
    Raise for any non-200 response from the repository metadata call.

    Args:
        response: The HTTP response from GitHub API
        repo_name: Repository name for error context (format: "owner/repo")

    Raises:
        RepositoryNotFound: Repository is missing or private (404)
        UpstreamError: Any other non-200 status
    """
    if response.status_code == 200:
        return

    if response.status_code == 404:
        raise RepositoryNotFound(repo_name)

    rate_info = RateLimitInfo(response)
    if response.status_code in (403, 429) and rate_info.is_exhausted:
        raise UpstreamError(
            f"GitHub API rate limit exceeded: {response.status_code}",
            response.status_code,
            rate_limit_reset=rate_info.reset_timestamp,
        )

    logger.warning(f"GitHub metadata call for {repo_name} returned {response.status_code}")
    raise UpstreamError(
        f"GitHub API error: {response.status_code}", response.status_code
    )
