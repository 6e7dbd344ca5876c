"""Unit tests for the shared GitHub HTTP client singleton."""

from __future__ import annotations

import httpx

from app.config import settings
from app.services.github import http_client
from app.services.github.http_client import close_github_client, get_github_client


class TestGitHubClient:
    """Tests for client reuse and shutdown."""

    async def test_returns_same_instance(self):
        try:
            first = get_github_client()
            second = get_github_client()
            assert first is second
            assert isinstance(first, httpx.AsyncClient)
        finally:
            await close_github_client()

    async def test_close_resets_singleton(self):
        client = get_github_client()
        await close_github_client()

        assert client.is_closed
        assert http_client._client is None

        replacement = get_github_client()
        assert replacement is not client
        await close_github_client()

    async def test_close_without_client_is_noop(self):
        await close_github_client()
        await close_github_client()
        assert http_client._client is None

    async def test_client_sends_user_agent_and_uses_configured_timeout(self):
        try:
            client = get_github_client()
            assert client.headers["User-Agent"] == http_client.USER_AGENT
            assert client.timeout.read == settings.github_timeout
            assert client.timeout.connect == http_client.CONNECT_TIMEOUT
        finally:
            await close_github_client()
