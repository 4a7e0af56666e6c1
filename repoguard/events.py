"""
Inbound webhook deliveries.

Authenticates a delivery, validates its headers, parses the payload and
decides whether it warrants a policy reconciliation.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from repoguard.exceptions import WebhookRejectedError
from repoguard.signing import verify_signature
from repoguard.types.repos import RepositoryRef

SIGNATURE_HEADER = "X-Hub-Signature"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"

# Membership-only actions; None covers payloads with no action at all.
SKIP_ACTIONS: frozenset[str | None] = frozenset({"added_to_repository", None})


@dataclass(frozen=True)
class InboundEvent:
    """An authenticated webhook delivery."""

    body: bytes
    signature: str
    event_type: str
    delivery_id: str
    repository: RepositoryRef
    action: str | None = None
    payload: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    # Starlette headers are already case-insensitive; plain dicts are not.
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    return value or None


def parse_delivery(
    headers: Mapping[str, str],
    body: bytes,
    secret: str | None,
) -> InboundEvent:
    """
    Authenticate and parse a webhook delivery.

    Checks run in a fixed order and the first failure wins:
    missing secret, missing signature, missing event type, missing
    delivery id, signature mismatch, malformed payload.

    Args:
        headers: Request headers
        body: Raw request body, exactly as received
        secret: Webhook shared secret from configuration

    Returns:
        The parsed InboundEvent

    Raises:
        WebhookRejectedError: With the HTTP status the caller should receive
    """
    if not isinstance(secret, str) or not secret:
        raise WebhookRejectedError(
            "MISSING_SECRET",
            "Must provide a 'GITHUB_WEBHOOK_SECRET' env variable",
            401,
        )

    signature = _header(headers, SIGNATURE_HEADER)
    if signature is None:
        raise WebhookRejectedError(
            "MISSING_SIGNATURE", "No X-Hub-Signature found on request", 401
        )

    event_type = _header(headers, EVENT_HEADER)
    if event_type is None:
        raise WebhookRejectedError(
            "MISSING_EVENT", "No X-Github-Event found on request", 422
        )

    delivery_id = _header(headers, DELIVERY_HEADER)
    if delivery_id is None:
        raise WebhookRejectedError(
            "MISSING_DELIVERY", "No X-Github-Delivery found on request", 401
        )

    if not verify_signature(body, signature, secret):
        raise WebhookRejectedError(
            "SIGNATURE_MISMATCH",
            "X-Hub-Signature incorrect. Github webhook token doesn't match",
            401,
        )

    payload = _decode_payload(body)
    return InboundEvent(
        body=body,
        signature=signature,
        event_type=event_type,
        delivery_id=delivery_id,
        repository=_repository_from_payload(payload),
        action=payload.get("action"),
        payload=payload,
    )


def should_reconcile(event: InboundEvent) -> bool:
    """Whether the delivery's action warrants a policy reconciliation."""
    return event.action not in SKIP_ACTIONS


def _decode_payload(body: bytes) -> dict[str, Any]:
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise WebhookRejectedError(
            "MALFORMED_PAYLOAD", f"Request body is not valid JSON: {e}", 400
        ) from e

    if not isinstance(payload, dict):
        raise WebhookRejectedError(
            "MALFORMED_PAYLOAD", "Request body must be a JSON object", 400
        )
    return payload


def _repository_from_payload(payload: dict[str, Any]) -> RepositoryRef:
    repository = payload.get("repository")
    if not isinstance(repository, dict):
        raise WebhookRejectedError(
            "MALFORMED_PAYLOAD", "Payload has no repository object", 400
        )

    name = repository.get("name")
    private = repository.get("private")
    if not isinstance(name, str) or not name or not isinstance(private, bool):
        raise WebhookRejectedError(
            "MALFORMED_PAYLOAD",
            "Payload repository must have a name and a boolean private flag",
            400,
        )
    return RepositoryRef(name=name, private=private)
