"""
repoguard logging utilities.

Provides configurable logging for webhook deliveries, outbound HTTP calls and
reconciliation. Ensures no sensitive data (webhook secrets, API tokens, full
signatures) is logged.
"""

import logging
import re
from typing import Any

# Create repoguard loggers
_root_logger = logging.getLogger("repoguard")
_http_logger = logging.getLogger("repoguard.http")
_webhook_logger = logging.getLogger("repoguard.webhook")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # HMAC webhook signatures
    (re.compile(r"sha(1|256)=[a-fA-F0-9]{40,64}"), r"sha\1=[SIGNATURE_REDACTED]"),
    # Authorization header values
    (re.compile(r"(Bearer|Basic|token)\s+[A-Za-z0-9_\-.=+/]{8,}"), r"\1 [REDACTED]"),
    # GitHub token formats
    (re.compile(r"\b(ghp|gho|ghu|ghs|ghr|github_pat)_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

# Maximum length for signature display (show first/last few chars)
_SIGNATURE_PREVIEW_LENGTH = 8

_DEFAULT_SENSITIVE_KEYS = {
    "signature", "x-hub-signature", "authorization",
    "secret", "token", "password", "api_key",
}


def configure_logging(
    level: int | str = logging.INFO,
    http_level: int | str | None = None,
    webhook_level: int | str | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure repoguard logging.

    Args:
        level: Default log level for all repoguard loggers (default: INFO)
        http_level: Log level for outbound HTTP logging (default: same as level)
        webhook_level: Log level for inbound delivery logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from repoguard.logging import configure_logging

        # Show every GitHub and Jira request
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _webhook_logger.setLevel(webhook_level if webhook_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a repoguard logger.

    Args:
        name: Logger name suffix (e.g., "http", "reconcile"). If None, returns the root repoguard logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"repoguard.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces signatures, bearer/basic credentials, GitHub tokens and
    secret-looking assignments with redacted placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def truncate_signature(signature: str) -> str:
    """
    Truncate a signature for safe logging.

    Shows only the first and last few characters of a signature.

    Args:
        signature: Full signature string

    Returns:
        Truncated signature like "sha1=abc...xyz"
    """
    if len(signature) <= _SIGNATURE_PREVIEW_LENGTH * 2:
        return "[SIGNATURE_REDACTED]"

    return f"{signature[:_SIGNATURE_PREVIEW_LENGTH]}...{signature[-_SIGNATURE_PREVIEW_LENGTH:]}"


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: signature headers, authorization, secret, token, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            if isinstance(value, str) and "signature" in key_lower:
                result[key] = truncate_signature(value)
            else:
                result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """
    Log an outbound HTTP request at DEBUG level with sensitive data masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers (optional)
        body: Request body (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    body: dict[str, Any] | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level with sensitive data masked.

    Args:
        status_code: HTTP status code
        url: Request URL
        body: Response body (optional)
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_webhook_delivery(
    event_type: str,
    delivery_id: str,
    headers: dict[str, str],
    body: str,
) -> None:
    """
    Log an accepted webhook delivery.

    The event type and delivery id are logged at INFO; the headers and raw
    payload at DEBUG, with the signature truncated.

    Args:
        event_type: Value of ``X-GitHub-Event``
        delivery_id: Value of ``X-GitHub-Delivery``
        headers: Request headers
        body: Raw request body
    """
    _webhook_logger.info("Github-Event: %r delivery=%s", event_type, delivery_id)

    if not _webhook_logger.isEnabledFor(logging.DEBUG):
        return

    _webhook_logger.debug("Webhook Headers %s", safe_log_dict(dict(headers)))
    _webhook_logger.debug("Payload %s", mask_sensitive_data(body))


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_signature",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_webhook_delivery",
]
