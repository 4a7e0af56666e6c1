"""
Policy reconciliation for a single repository.

Compares a repository's live team grants and visibility against the
declared policies, applies the corrective writes, and files one audit
issue describing every change that was actually applied.

Reconcilers never share state: each returns its own ``ReconcileOutcome``
and the engine concatenates them in order (access grants, then
visibility) before deciding whether an audit issue is needed.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from repoguard.config import Settings
from repoguard.events import InboundEvent
from repoguard.exceptions import ConfigurationError, RepoGuardError
from repoguard.logging import get_logger
from repoguard.policies import AccessPolicy, PolicySet, VisibilityPolicy
from repoguard.types.issues import Issue
from repoguard.types.repos import RepositoryRef

if TYPE_CHECKING:
    from repoguard.github import AsyncGitHubClient
    from repoguard.jira import AsyncJiraClient

logger = get_logger("reconcile")


@dataclass
class ReconcileOutcome:
    """What one reconciler did."""

    changes: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    skipped: bool = False


@dataclass
class ReconciliationResult:
    """What a full reconciliation of one delivery did."""

    repository: str
    delivery_id: str
    changes: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    issue: Issue | None = None
    skipped_access: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def grant_change_record(team_name: str, repository: str, permission: str) -> str:
    return f"{team_name} team added to {repository} with {permission} permission."


def visibility_change_record(repository: str, private: bool) -> str:
    visibility = "private" if private else "public"
    return f"{repository} visibility set to {visibility}"


async def reconcile_access(
    github: "AsyncGitHubClient",
    org: str,
    repository: RepositoryRef,
    policy: AccessPolicy,
) -> ReconcileOutcome:
    """
    Bring a repository's team grants up to the access policy.

    Exempt repositories are not evaluated at all. Otherwise the live grants
    are fetched once and every policy team, in declared order, whose grant
    is missing or has a different permission is (re)granted. Grants the
    policy does not mention are left alone.

    Args:
        github: GitHub client
        org: Organization owning the repository and the teams
        repository: The repository being reconciled
        policy: Access policy to enforce

    Returns:
        ReconcileOutcome with one change record per applied grant
    """
    outcome = ReconcileOutcome()

    if policy.is_exempt(repository.name):
        logger.info("%s is exempt from the access policy", repository.name)
        outcome.skipped = True
        return outcome

    try:
        live_grants = await github.teams.list_for_repo(org, repository.name)
    except RepoGuardError as e:
        logger.error("Could not list teams for %s: %s", repository.name, e)
        outcome.failures.append(f"list teams for {repository.name}: {e}")
        return outcome

    permissions = {grant.name: grant.permission for grant in live_grants}

    for team in policy.teams:
        if permissions.get(team.name) == team.permission:
            continue

        try:
            await github.teams.add_or_update_repo(
                org=org,
                team_slug=team.slug,
                owner=org,
                repo=repository.name,
                permission=team.permission,
            )
        except RepoGuardError as e:
            logger.error(
                "Could not grant %s %s on %s: %s",
                team.name, team.permission, repository.name, e,
            )
            outcome.failures.append(f"grant {team.name} on {repository.name}: {e}")
            continue

        change = grant_change_record(team.name, repository.name, team.permission)
        outcome.changes.append(change)
        logger.info(change)

    return outcome


async def reconcile_visibility(
    github: "AsyncGitHubClient",
    org: str,
    repository: RepositoryRef,
    policy: VisibilityPolicy,
) -> ReconcileOutcome:
    """
    Bring a repository's visibility in line with the visibility policy.

    Uses the visibility reported in the delivery; no read is made.

    Args:
        github: GitHub client
        org: Organization owning the repository
        repository: The repository being reconciled
        policy: Visibility policy to enforce

    Returns:
        ReconcileOutcome with at most one change record
    """
    outcome = ReconcileOutcome()

    desired_private = policy.desired_private(repository.name)
    if repository.private == desired_private:
        return outcome

    try:
        await github.repos.update(org, repository.name, private=desired_private)
    except RepoGuardError as e:
        logger.error("Could not update visibility of %s: %s", repository.name, e)
        outcome.failures.append(f"set visibility of {repository.name}: {e}")
        return outcome

    change = visibility_change_record(repository.name, desired_private)
    outcome.changes.append(change)
    logger.info(change)
    return outcome


def audit_summary(repository: str) -> str:
    return f'GitHub Repository "{repository}" Configuration Updated'


def audit_description(changes: list[str]) -> str:
    lines = ["Changes made to the repository:\n"]
    lines.extend(f"* {change}\n" for change in changes)
    return "".join(lines)


async def emit_audit(
    jira: "AsyncJiraClient | None",
    settings: Settings,
    repository: str,
    changes: list[str],
) -> Issue | None:
    """
    File one audit issue listing the applied changes.

    Nothing is sent when there are no changes. A failure to file the issue
    is logged and leaves the applied changes as they are.

    Args:
        jira: Jira client, or None when Jira is not configured
        settings: Settings holding the project key and issue type
        repository: Name of the reconciled repository
        changes: Change records, in the order they were applied

    Returns:
        The created Issue, or None if nothing was filed
    """
    if not changes:
        return None

    try:
        if jira is None:
            raise ConfigurationError("Jira client is not configured")
        issue = await jira.issues.create(
            project_key=settings.require("jira_project_key"),
            summary=audit_summary(repository),
            description=audit_description(changes),
            issue_type=settings.require("jira_issue_type"),
        )
    except (RepoGuardError, KeyError) as e:
        logger.error(
            "Changes applied to %s but no audit issue was filed: %s", repository, e
        )
        return None

    logger.info("Created Jira Issue: %s (see %s)", issue.key, issue.url)
    return issue


class ReconciliationEngine:
    """
    Runs the access, visibility and audit steps for a delivery.

    All collaborators are injected; the engine reads no environment.
    """

    def __init__(
        self,
        settings: Settings,
        policies: PolicySet,
        github: "AsyncGitHubClient | None",
        jira: "AsyncJiraClient | None" = None,
    ) -> None:
        self.settings = settings
        self.policies = policies
        self.github = github
        self.jira = jira

    async def run(self, event: InboundEvent) -> ReconciliationResult:
        """
        Reconcile the repository named in a delivery.

        Args:
            event: The authenticated delivery

        Returns:
            ReconciliationResult with the applied changes, failures and audit issue
        """
        repository = event.repository
        result = ReconciliationResult(
            repository=repository.name, delivery_id=event.delivery_id
        )

        try:
            org = self.settings.require("github_org")
            if self.github is None:
                raise ConfigurationError("GitHub client is not configured")
        except ConfigurationError as e:
            logger.error("Cannot reconcile %s: %s", repository.name, e)
            result.failures.append(str(e))
            return result

        access = await reconcile_access(
            self.github, org, repository, self.policies.access
        )
        visibility = await reconcile_visibility(
            self.github, org, repository, self.policies.visibility
        )

        result.skipped_access = access.skipped
        result.changes = access.changes + visibility.changes
        result.failures = access.failures + visibility.failures
        logger.info(
            "%s: %d change(s), %d failure(s) for delivery %s",
            repository.name, len(result.changes), len(result.failures), event.delivery_id,
        )

        result.issue = await emit_audit(
            self.jira, self.settings, repository.name, result.changes
        )
        return result
