"""
GitHub service package.

Re-exports all public types and classes.
Usage: `from app.services.github import GitHubReadOperations, RepositorySnapshot`

Module structure:
- read_operations.py: Repository metadata and best-effort secondary calls
- helpers.py: URL parsing, rate limit handling and error utilities
- types.py: Data types for API responses
- exceptions.py: Custom exceptions
- http_client.py: Shared pooled HTTP client
"""

from app.services.github.exceptions import (
    GitHubAPIError,
    InvalidRepositoryURL,
    RepositoryNotFound,
    UpstreamError,
)
from app.services.github.helpers import (
    RateLimitInfo,
    handle_metadata_response,
    parse_repository_url,
)
from app.services.github.http_client import close_github_client
from app.services.github.read_operations import GitHubReadOperations
from app.services.github.types import (
    CommitActivityWeek,
    ContributorRecord,
    RepositoryMetadata,
    RepositorySnapshot,
)

__all__ = [
    # Operations (main entry point)
    "GitHubReadOperations",
    # HTTP client lifecycle
    "close_github_client",
    # Utilities
    "parse_repository_url",
    "handle_metadata_response",
    "RateLimitInfo",
    # Exceptions
    "GitHubAPIError",
    "InvalidRepositoryURL",
    "RepositoryNotFound",
    "UpstreamError",
    # Types
    "CommitActivityWeek",
    "ContributorRecord",
    "RepositoryMetadata",
    "RepositorySnapshot",
]
