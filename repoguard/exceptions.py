"""repoguard exception classes."""


class RepoGuardError(Exception):
    """Base exception for all repoguard errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(RepoGuardError):
    """Raised when required configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class PolicyError(ConfigurationError):
    """Raised when a policy document cannot be loaded or is malformed."""

    pass


class WebhookRejectedError(RepoGuardError):
    """Raised when an inbound delivery fails authentication or validation."""

    def __init__(self, code: str, message: str, status_code: int) -> None:
        super().__init__(code, message)
        self.status_code = status_code


class AuthenticationError(RepoGuardError):
    """Raised when a remote API rejects our credentials."""

    pass


class AuthorizationError(RepoGuardError):
    """Raised when access is denied."""

    pass


class NotFoundError(RepoGuardError):
    """Raised when a resource is not found."""

    pass


class RateLimitedError(RepoGuardError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(RepoGuardError):
    """Raised on validation errors."""

    pass


class ServerError(RepoGuardError):
    """Raised on server errors (5xx)."""

    pass
