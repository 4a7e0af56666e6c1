"""
repoguard configuration.

All settings are resolved once, from the environment or explicitly, into a
single ``Settings`` value that is passed to the application and the
reconciliation engine.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from repoguard.exceptions import ConfigurationError
from repoguard.transport import RetryConfig


@dataclass(frozen=True)
class Settings:
    """
    Resolved repoguard configuration.

    Only ``webhook_secret`` is checked on every delivery; its absence is
    reported to the caller. Every other setting is checked lazily with
    ``require()`` when reconciliation first needs it.
    """

    webhook_secret: str | None = None
    github_token: str | None = None
    github_org: str | None = None
    github_api_url: str = "https://api.github.com"
    jira_host: str | None = None
    jira_user: str | None = None
    jira_token: str | None = None
    jira_project_key: str | None = None
    jira_issue_type: str | None = None
    policy_dir: Path = Path("policies")
    log_level: str = "INFO"
    timeout: float = 30.0
    retry_config: RetryConfig = field(default_factory=RetryConfig)

    # Environment variable backing each optional setting, used in error messages
    ENV_NAMES = {
        "webhook_secret": "GITHUB_WEBHOOK_SECRET",
        "github_token": "GITHUB_API_TOKEN",
        "github_org": "GITHUB_ORG",
        "jira_host": "JIRA_FQDN",
        "jira_user": "ATLASSIAN_API_USER",
        "jira_token": "ATLASSIAN_API_TOKEN",
        "jira_project_key": "JIRA_PROJECT_KEY",
        "jira_issue_type": "JIRA_ISSUETYPE_NAME",
    }

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Environment variables:
            GITHUB_WEBHOOK_SECRET: Shared secret for X-Hub-Signature
            GITHUB_API_TOKEN: Token for the GitHub REST API
            GITHUB_ORG: Organization that owns the repositories
            GITHUB_API_URL: GitHub API base URL (default: https://api.github.com)
            JIRA_FQDN: Jira host name, without scheme
            ATLASSIAN_API_USER: Jira user for basic auth
            ATLASSIAN_API_TOKEN: Jira API token for basic auth
            JIRA_PROJECT_KEY: Project that audit issues are filed in
            JIRA_ISSUETYPE_NAME: Issue type name for audit issues
            REPOGUARD_POLICY_DIR: Directory holding permissions.json and visibility.json
            REPOGUARD_LOG_LEVEL: Log level name (default: INFO)

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            Settings with empty values treated as unset
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(name) or None

        return cls(
            webhook_secret=get("GITHUB_WEBHOOK_SECRET"),
            github_token=get("GITHUB_API_TOKEN"),
            github_org=get("GITHUB_ORG"),
            github_api_url=get("GITHUB_API_URL") or cls.github_api_url,
            jira_host=get("JIRA_FQDN"),
            jira_user=get("ATLASSIAN_API_USER"),
            jira_token=get("ATLASSIAN_API_TOKEN"),
            jira_project_key=get("JIRA_PROJECT_KEY"),
            jira_issue_type=get("JIRA_ISSUETYPE_NAME"),
            policy_dir=Path(get("REPOGUARD_POLICY_DIR") or "policies"),
            log_level=(get("REPOGUARD_LOG_LEVEL") or "INFO").upper(),
        )

    def require(self, name: str) -> str:
        """
        Return a setting's value or raise if it is unset.

        Raises:
            ConfigurationError: If the setting is None or empty
        """
        value = getattr(self, name)
        if not value:
            env_name = self.ENV_NAMES.get(name, name.upper())
            raise ConfigurationError(f"{env_name} environment variable not set")
        return value
