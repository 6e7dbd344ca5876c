"""Exceptions for GitHub service."""


class GitHubAPIError(Exception):
    """Error from GitHub API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_reset: int | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message)


class InvalidRepositoryURL(GitHubAPIError):
    """The submitted URL does not look like github.com/<owner>/<repo>.

    Raised before any network call is made.
    """

    def __init__(self, url: str):
        self.url = url
        super().__init__("Invalid GitHub repository URL", status_code=None)


class RepositoryNotFound(GitHubAPIError):
    """Repository does not exist or is not public (404 on the metadata call)."""

    def __init__(self, full_name: str):
        self.full_name = full_name
        super().__init__(
            "Repository not found. Please check the URL and ensure the repository is public.",
            status_code=404,
        )


class UpstreamError(GitHubAPIError):
    """Non-404, non-200 response from the repository metadata call."""
