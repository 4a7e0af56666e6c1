"""Async Jira issue resource client."""

from typing import TYPE_CHECKING

from repoguard.types.issues import Issue

if TYPE_CHECKING:
    from repoguard.transport import AsyncHTTPTransport


class AsyncIssuesClient:
    """Async client for Jira issues (REST API v2)."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async issues client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def create(
        self,
        project_key: str,
        summary: str,
        description: str,
        issue_type: str,
    ) -> Issue:
        """
        Create an issue.

        Args:
            project_key: Key of the project to file the issue in
            summary: Issue title
            description: Issue body (Jira wiki markup)
            issue_type: Name of the issue type (e.g., "Task")

        Returns:
            The created Issue with its id, key and API link

        Raises:
            ValidationError: If Jira rejects the fields
        """
        response = await self.transport.request(
            method="POST",
            path="/rest/api/2/issue",
            body={
                "fields": {
                    "project": {"key": project_key},
                    "summary": summary,
                    "description": description,
                    "issuetype": {"name": issue_type},
                }
            },
        )

        return Issue(
            issue_id=str(response.get("id", "")),
            key=response["key"],
            url=response.get("self", ""),
        )
