"""
repoguard async GitHub client.

Provides the async interface to the GitHub REST API used for reading and
correcting repository settings.
"""

from typing import Any

from repoguard.clients import AsyncReposClient, AsyncTeamsClient
from repoguard.config import Settings
from repoguard.transport import AsyncHTTPTransport, RetryConfig


class AsyncGitHubClient:
    """
    Async client for the GitHub REST API.

    Aggregates the resource clients the reconciler needs and handles
    token authentication.

    Example:
        ```python
        import asyncio
        from repoguard.github import AsyncGitHubClient

        async def main():
            async with AsyncGitHubClient(token="ghp_...") as github:
                grants = await github.teams.list_for_repo("acme", "widgets")

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the async GitHub client.

        Args:
            token: GitHub API token
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            headers={
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=timeout,
            retry_config=retry_config,
        )

        self.teams = AsyncTeamsClient(self._transport)
        self.repos = AsyncReposClient(self._transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AsyncGitHubClient":
        """
        Create a client from resolved settings.

        Raises:
            ConfigurationError: If GITHUB_API_TOKEN is not set
        """
        return cls(
            token=settings.require("github_token"),
            base_url=settings.github_api_url,
            timeout=settings.timeout,
            retry_config=settings.retry_config,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncGitHubClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
