"""
Property-based tests for resource clients.

Feature: repoguard
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from repoguard.clients import AsyncIssuesClient, AsyncReposClient, AsyncTeamsClient
from repoguard.exceptions import ConfigurationError, ServerError
from repoguard.github import AsyncGitHubClient
from repoguard.jira import AsyncJiraClient
from repoguard.testing import create_settings
from repoguard.types.repos import TeamGrant

name_strategy = st.text(
    min_size=1,
    max_size=50,
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="-_"),
)
permission_strategy = st.sampled_from(["pull", "triage", "push", "maintain", "admin"])


def make_transport(response: Any = None) -> MagicMock:
    transport = MagicMock()
    transport.request = AsyncMock(return_value=response)
    return transport


def make_team(name: str, permission: str = "push") -> dict[str, Any]:
    return {"name": name, "slug": name.lower(), "permission": permission, "id": 1}


# ============================================================================
# Teams
# ============================================================================


@given(teams=st.lists(st.tuples(name_strategy, permission_strategy), max_size=10))
@settings(max_examples=100)
def test_team_listing_extracts_name_slug_and_permission(
    teams: list[tuple[str, str]],
) -> None:
    """
    For any teams payload, list_for_repo SHALL return one TeamGrant per
    team carrying its name, slug and permission.
    """
    transport = make_transport([make_team(n, p) for n, p in teams])
    client = AsyncTeamsClient(transport)

    grants = asyncio.run(client.list_for_repo("acme", "widgets"))

    assert grants == [TeamGrant(n, n.lower(), p) for n, p in teams]


def test_team_listing_follows_pages() -> None:
    first = [make_team(f"team-{i}") for i in range(100)]
    second = [make_team("last")]
    transport = MagicMock()
    transport.request = AsyncMock(side_effect=[first, second])
    client = AsyncTeamsClient(transport)

    grants = asyncio.run(client.list_for_repo("acme", "widgets"))

    assert len(grants) == 101
    assert grants[-1].name == "last"
    pages = [c.kwargs["params"]["page"] for c in transport.request.await_args_list]
    assert pages == [1, 2]
    assert transport.request.await_args_list[0].kwargs["path"] == "/repos/acme/widgets/teams"
    assert transport.request.await_args_list[0].kwargs["params"]["per_page"] == 100


def test_team_listing_of_empty_repo() -> None:
    client = AsyncTeamsClient(make_transport([]))

    assert asyncio.run(client.list_for_repo("acme", "widgets")) == []


@pytest.mark.parametrize(
    "response",
    [
        {"message": "unexpected object"},
        [{"slug": "developers", "permission": "push"}],
        ["developers"],
    ],
)
def test_malformed_team_listing_is_server_error(response: Any) -> None:
    client = AsyncTeamsClient(make_transport(response))

    with pytest.raises(ServerError) as exc_info:
        asyncio.run(client.list_for_repo("acme", "widgets"))

    assert exc_info.value.code == "INVALID_RESPONSE"


@given(slug=name_strategy, repo=name_strategy, permission=permission_strategy)
@settings(max_examples=100)
def test_add_or_update_repo_request(slug: str, repo: str, permission: str) -> None:
    """
    A grant SHALL be a PUT on the org team repository path with the
    permission as the only body field.
    """
    transport = make_transport({})
    client = AsyncTeamsClient(transport)

    asyncio.run(client.add_or_update_repo("acme", slug, "acme", repo, permission))

    call = transport.request.await_args
    assert call.kwargs["method"] == "PUT"
    assert call.kwargs["path"] == f"/orgs/acme/teams/{slug}/repos/acme/{repo}"
    assert call.kwargs["body"] == {"permission": permission}


# ============================================================================
# Repos
# ============================================================================


@pytest.mark.parametrize("private", [True, False])
def test_repo_update_sends_visibility(private: bool) -> None:
    transport = make_transport({"name": "widgets", "private": private})
    client = AsyncReposClient(transport)

    result = asyncio.run(client.update("acme", "widgets", private=private))

    call = transport.request.await_args
    assert call.kwargs["method"] == "PATCH"
    assert call.kwargs["path"] == "/repos/acme/widgets"
    assert call.kwargs["body"] == {"private": private}
    assert result["private"] is private


def test_repo_update_omits_unset_fields() -> None:
    transport = make_transport({})
    client = AsyncReposClient(transport)

    asyncio.run(client.update("acme", "widgets"))

    assert transport.request.await_args.kwargs["body"] == {}


# ============================================================================
# Issues
# ============================================================================


def test_issue_create_request_and_response() -> None:
    transport = make_transport({
        "id": "10042",
        "key": "OPS-7",
        "self": "https://acme.atlassian.net/rest/api/2/issue/10042",
    })
    client = AsyncIssuesClient(transport)

    issue = asyncio.run(client.create("OPS", "Summary", "Body", "Task"))

    call = transport.request.await_args
    assert call.kwargs["method"] == "POST"
    assert call.kwargs["path"] == "/rest/api/2/issue"
    assert call.kwargs["body"] == {
        "fields": {
            "project": {"key": "OPS"},
            "summary": "Summary",
            "description": "Body",
            "issuetype": {"name": "Task"},
        }
    }
    assert issue.key == "OPS-7"
    assert issue.issue_id == "10042"
    assert issue.url.endswith("/issue/10042")


def test_issue_create_tolerates_minimal_response() -> None:
    client = AsyncIssuesClient(make_transport({"key": "OPS-1", "id": 5}))

    issue = asyncio.run(client.create("OPS", "s", "d", "Task"))

    assert issue.issue_id == "5"
    assert issue.url == ""


# ============================================================================
# Top-level clients
# ============================================================================


def test_github_client_headers() -> None:
    github = AsyncGitHubClient(token="ghp_example", base_url="https://github.example.com/api/v3")
    headers = github.transport._client.headers

    assert headers["Authorization"] == "token ghp_example"
    assert headers["Accept"] == "application/vnd.github+json"
    assert github.transport.base_url == "https://github.example.com/api/v3"
    assert isinstance(github.teams, AsyncTeamsClient)
    assert isinstance(github.repos, AsyncReposClient)

    asyncio.run(github.close())


def test_github_client_from_settings_requires_token() -> None:
    with pytest.raises(ConfigurationError, match="GITHUB_API_TOKEN"):
        AsyncGitHubClient.from_settings(create_settings(github_token=None))


def test_jira_client_prefixes_scheme_and_uses_basic_auth() -> None:
    jira = AsyncJiraClient("acme.atlassian.net", "bot@acme.io", "secret-token")

    assert jira.base_url == "https://acme.atlassian.net"
    assert jira.transport._client.auth is not None
    assert isinstance(jira.issues, AsyncIssuesClient)

    asyncio.run(jira.close())


def test_jira_client_keeps_explicit_scheme() -> None:
    jira = AsyncJiraClient("http://localhost:8080", "bot", "token")

    assert jira.base_url == "http://localhost:8080"

    asyncio.run(jira.close())


@pytest.mark.parametrize(
    "missing,env_name",
    [
        ("jira_host", "JIRA_FQDN"),
        ("jira_user", "ATLASSIAN_API_USER"),
        ("jira_token", "ATLASSIAN_API_TOKEN"),
    ],
)
def test_jira_client_from_settings_requires_credentials(missing: str, env_name: str) -> None:
    settings = create_settings(**{missing: None})

    with pytest.raises(ConfigurationError, match=env_name):
        AsyncJiraClient.from_settings(settings)
