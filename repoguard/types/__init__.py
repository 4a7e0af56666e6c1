"""repoguard type definitions.

This module exports the value types exchanged with GitHub and Jira.
"""

from repoguard.types.issues import Issue
from repoguard.types.repos import RepositoryRef, TeamGrant

__all__ = [
    # Repository types
    "RepositoryRef",
    "TeamGrant",
    # Issue tracker types
    "Issue",
]
