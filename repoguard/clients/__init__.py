"""repoguard async resource clients."""

from repoguard.clients.issues import AsyncIssuesClient
from repoguard.clients.repos import AsyncReposClient
from repoguard.clients.teams import AsyncTeamsClient

__all__ = [
    "AsyncTeamsClient",
    "AsyncReposClient",
    "AsyncIssuesClient",
]
