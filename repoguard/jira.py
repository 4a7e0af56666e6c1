"""
repoguard async Jira client.

Files audit issues through the Jira REST API v2 using basic auth.
"""

from typing import Any

from repoguard.clients import AsyncIssuesClient
from repoguard.config import Settings
from repoguard.transport import AsyncHTTPTransport, RetryConfig


class AsyncJiraClient:
    """
    Async client for the Jira REST API.

    Example:
        ```python
        async with AsyncJiraClient("acme.atlassian.net", "bot@acme.io", "token") as jira:
            issue = await jira.issues.create("OPS", "Summary", "Body", "Task")
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the async Jira client.

        Args:
            host: Jira host name; "https://" is prepended when no scheme is given
            username: Atlassian account used for basic auth
            password: Atlassian API token
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
        """
        if "://" not in host:
            host = f"https://{host}"
        self.base_url = host
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=host,
            headers={"Accept": "application/json"},
            auth=(username, password),
            timeout=timeout,
            retry_config=retry_config,
        )

        self.issues = AsyncIssuesClient(self._transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AsyncJiraClient":
        """
        Create a client from resolved settings.

        Raises:
            ConfigurationError: If the Jira host or credentials are not set
        """
        return cls(
            host=settings.require("jira_host"),
            username=settings.require("jira_user"),
            password=settings.require("jira_token"),
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

    async def __aenter__(self) -> "AsyncJiraClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
