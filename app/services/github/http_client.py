"""
Pooled HTTP client for GitHub API calls.

Each story run makes one metadata call followed by three concurrent secondary
calls against the same host, so a single process-wide AsyncClient keeps those
connections (and their TLS sessions) warm between runs.
"""

import logging

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "repo-storyteller"

# One run opens at most four concurrent requests
MAX_CONNECTIONS = 20
MAX_KEEPALIVE_CONNECTIONS = 10
CONNECT_TIMEOUT = 5.0

_client: httpx.AsyncClient | None = None


def get_github_client() -> httpx.AsyncClient:
    """
    Return the shared GitHub client, creating it on first use or after close.

    The client carries no credentials. GitHubReadOperations sends its own
    Accept and Authorization headers with every request.
    """
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.github_timeout, connect=CONNECT_TIMEOUT),
            limits=httpx.Limits(
                max_connections=MAX_CONNECTIONS,
                max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            ),
            headers={"User-Agent": USER_AGENT},
            http2=True,
        )
        logger.debug(f"Opened GitHub HTTP client (timeout {settings.github_timeout}s)")
    return _client


async def close_github_client() -> None:
    """Close the shared client. Called from the app lifespan on shutdown."""
    global _client
    if _client is None:
        return
    if not _client.is_closed:
        await _client.aclose()
        logger.debug("Closed GitHub HTTP client")
    _client = None
