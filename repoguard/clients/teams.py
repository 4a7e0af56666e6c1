"""Async GitHub team permission resource client."""

from typing import TYPE_CHECKING, Any

from repoguard.exceptions import ServerError
from repoguard.types.repos import TeamGrant

if TYPE_CHECKING:
    from repoguard.transport import AsyncHTTPTransport

PAGE_SIZE = 100


def _grant_from_team(team: Any, owner: str, repo: str) -> TeamGrant:
    if not isinstance(team, dict) or not isinstance(team.get("name"), str):
        raise ServerError(
            "INVALID_RESPONSE", f"Team listing for {owner}/{repo} has an entry without a name"
        )
    return TeamGrant(
        name=team["name"],
        slug=team.get("slug", ""),
        permission=team.get("permission", ""),
    )


class AsyncTeamsClient:
    """Async client for team access to organization repositories."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async teams client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def list_for_repo(self, owner: str, repo: str) -> list[TeamGrant]:
        """
        List every team with access to a repository.

        Follows pagination until a short page is returned.

        Args:
            owner: Repository owner (the organization)
            repo: Repository name

        Returns:
            List of TeamGrant objects with name, slug and permission

        Raises:
            NotFoundError: If the repository does not exist
            ServerError: If GitHub returns a malformed listing
        """
        grants: list[TeamGrant] = []
        page = 1
        while True:
            response = await self.transport.request(
                method="GET",
                path=f"/repos/{owner}/{repo}/teams",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            if not isinstance(response, list):
                raise ServerError(
                    "INVALID_RESPONSE", f"Team listing for {owner}/{repo} is not a list"
                )
            teams = response
            grants.extend(_grant_from_team(team, owner, repo) for team in teams)
            if len(teams) < PAGE_SIZE:
                return grants
            page += 1

    async def add_or_update_repo(
        self,
        org: str,
        team_slug: str,
        owner: str,
        repo: str,
        permission: str,
    ) -> None:
        """
        Grant a team a permission on a repository, or change an existing grant.

        Setting a permission the team already has is a no-op on GitHub.

        Args:
            org: Organization that owns the team
            team_slug: The team's slug
            owner: Repository owner
            repo: Repository name
            permission: "pull", "triage", "push", "maintain" or "admin"

        Raises:
            AuthorizationError: If the token cannot administer the team
            NotFoundError: If the team or repository does not exist
        """
        await self.transport.request(
            method="PUT",
            path=f"/orgs/{org}/teams/{team_slug}/repos/{owner}/{repo}",
            body={"permission": permission},
        )
