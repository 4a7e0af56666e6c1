"""repoguard testing utilities.

Provides mock clients and fixtures for testing the reconciliation pipeline
without GitHub or Jira.
"""

from repoguard.testing.fixtures import (
    create_payload,
    create_policies,
    create_settings,
    create_signed_delivery,
)
from repoguard.testing.mock import MockCall, MockGitHubClient, MockJiraClient, MockResponse

__all__ = [
    # Mock clients
    "MockGitHubClient",
    "MockJiraClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_payload",
    "create_policies",
    "create_settings",
    "create_signed_delivery",
]
