"""Repository-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryRef:
    """The repository a webhook delivery is about."""

    name: str
    private: bool


@dataclass(frozen=True)
class TeamGrant:
    """A team's permission on a repository, as reported by GitHub."""

    name: str
    slug: str
    permission: str  # "pull", "triage", "push", "maintain", "admin"
