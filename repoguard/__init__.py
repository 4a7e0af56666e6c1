"""repoguard - enforces GitHub repository access and visibility policy from webhooks."""

__version__ = "0.1.0"

from repoguard.config import Settings
from repoguard.events import InboundEvent, parse_delivery, should_reconcile
from repoguard.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    NotFoundError,
    PolicyError,
    RateLimitedError,
    RepoGuardError,
    ServerError,
    ValidationError,
    WebhookRejectedError,
)
from repoguard.github import AsyncGitHubClient
from repoguard.jira import AsyncJiraClient
from repoguard.logging import configure_logging, get_logger
from repoguard.policies import AccessPolicy, PolicySet, TeamPolicy, VisibilityPolicy, load_policies
from repoguard.reconcile import ReconciliationEngine, ReconciliationResult
from repoguard.signing import sign_request_body, verify_signature
from repoguard.transport import AsyncHTTPTransport, RetryConfig
from repoguard.worker import ReconciliationWorker

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    # Clients
    "AsyncGitHubClient",
    "AsyncJiraClient",
    # Events
    "InboundEvent",
    "parse_delivery",
    "should_reconcile",
    # Policies
    "AccessPolicy",
    "TeamPolicy",
    "VisibilityPolicy",
    "PolicySet",
    "load_policies",
    # Reconciliation
    "ReconciliationEngine",
    "ReconciliationResult",
    "ReconciliationWorker",
    # Exceptions
    "RepoGuardError",
    "ConfigurationError",
    "PolicyError",
    "WebhookRejectedError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    # Signing
    "sign_request_body",
    "verify_signature",
    # Transport
    "AsyncHTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
