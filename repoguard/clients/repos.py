"""Async GitHub repository resource client."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from repoguard.transport import AsyncHTTPTransport


class AsyncReposClient:
    """Async client for repository settings."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async repos client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def update(
        self,
        owner: str,
        repo: str,
        private: bool | None = None,
    ) -> dict[str, Any]:
        """
        Update repository settings.

        Args:
            owner: Repository owner
            repo: Repository name
            private: New visibility; omitted from the request when None

        Returns:
            The updated repository as returned by GitHub
        """
        body: dict[str, Any] = {}
        if private is not None:
            body["private"] = private

        return await self.transport.request(
            method="PATCH",
            path=f"/repos/{owner}/{repo}",
            body=body,
        )
