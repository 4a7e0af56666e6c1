"""
Pytest fixtures for repoguard testing.

Provides policies, settings, mock clients and signed-delivery helpers for
tests of code built on repoguard.
"""

import json
from typing import Any, Generator

import pytest

from repoguard.config import Settings
from repoguard.events import DELIVERY_HEADER, EVENT_HEADER, SIGNATURE_HEADER
from repoguard.policies import AccessPolicy, PolicySet, TeamPolicy, VisibilityPolicy
from repoguard.signing import sign_request_body
from repoguard.testing.mock import MockGitHubClient, MockJiraClient

TEST_SECRET = "test-webhook-secret"
TEST_ORG = "acme"


# ============================================================================
# Helper functions
# ============================================================================


def create_payload(
    name: str = "widgets",
    private: bool = True,
    action: str | None = "created",
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create a repository webhook payload.

    Args:
        name: Repository name
        private: Repository's current visibility
        action: Payload action; omitted from the payload when None
        **kwargs: Additional top-level payload fields

    Returns:
        Payload dict
    """
    payload: dict[str, Any] = {
        "repository": {"name": name, "full_name": f"{TEST_ORG}/{name}", "private": private},
        "organization": {"login": TEST_ORG},
    }
    if action is not None:
        payload["action"] = action
    payload.update(kwargs)
    return payload


def create_signed_delivery(
    payload: dict[str, Any] | None = None,
    secret: str = TEST_SECRET,
    event_type: str = "repository",
    delivery_id: str = "72d3162e-cc78-11e3-81ab-4c9367dc0958",
) -> tuple[dict[str, str], bytes]:
    """
    Create headers and body for a correctly signed delivery.

    Returns:
        Tuple of (headers, body)
    """
    body = json.dumps(payload if payload is not None else create_payload()).encode("utf-8")
    headers = {
        SIGNATURE_HEADER: sign_request_body(secret, body),
        EVENT_HEADER: event_type,
        DELIVERY_HEADER: delivery_id,
        "Content-Type": "application/json",
    }
    return headers, body


def create_policies(
    teams: list[tuple[str, str, str]] | None = None,
    access_exceptions: list[str] | None = None,
    default_visibility: str = "private",
    visibility_exceptions: list[str] | None = None,
) -> PolicySet:
    """
    Create a PolicySet.

    Args:
        teams: (name, slug, permission) triples in policy order
        access_exceptions: Repositories exempt from the access policy
        default_visibility: "private" or "public"
        visibility_exceptions: Repositories with the inverse visibility

    Returns:
        PolicySet
    """
    if teams is None:
        teams = [
            ("Developers", "developers", "push"),
            ("Security", "security", "pull"),
        ]
    return PolicySet(
        access=AccessPolicy(
            teams=tuple(TeamPolicy(name, slug, permission) for name, slug, permission in teams),
            exception_repositories=frozenset(access_exceptions or []),
        ),
        visibility=VisibilityPolicy(
            default=default_visibility,
            exception_repositories=frozenset(visibility_exceptions or []),
        ),
    )


def create_settings(**kwargs: Any) -> Settings:
    """Create fully populated Settings, with overrides."""
    values: dict[str, Any] = {
        "webhook_secret": TEST_SECRET,
        "github_token": "test-github-token",
        "github_org": TEST_ORG,
        "jira_host": "jira.example.com",
        "jira_user": "bot@example.com",
        "jira_token": "test-jira-token",
        "jira_project_key": "OPS",
        "jira_issue_type": "Task",
    }
    values.update(kwargs)
    return Settings(**values)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Provide fully populated Settings."""
    return create_settings()


@pytest.fixture
def policies() -> PolicySet:
    """Provide the default test policies (two teams, private by default)."""
    return create_policies()


@pytest.fixture
def mock_github() -> Generator[MockGitHubClient, None, None]:
    """
    Provide a MockGitHubClient that knows the default policy teams.

    Example:
        ```python
        def test_my_feature(mock_github):
            mock_github.teams.configure_list_for_repo(error=NotFoundError(...))
            ...
            assert mock_github.was_called("teams.list_for_repo")
        ```
    """
    client = MockGitHubClient(team_names={"developers": "Developers", "security": "Security"})
    yield client
    client.reset()


@pytest.fixture
def mock_jira() -> Generator[MockJiraClient, None, None]:
    """Provide a MockJiraClient."""
    client = MockJiraClient()
    yield client
    client.reset()


@pytest.fixture
def signed_delivery() -> tuple[dict[str, str], bytes]:
    """Provide headers and body for a signed 'created' delivery for 'widgets'."""
    return create_signed_delivery()
