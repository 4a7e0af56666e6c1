"""
Webhook signature computation for repoguard.

GitHub signs each delivery with HMAC-SHA1 over the raw request body, keyed
with the webhook's shared secret, and sends it as ``X-Hub-Signature``.
"""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha1="


def sign_request_body(secret: str, body: bytes | str) -> str:
    """
    Compute the ``X-Hub-Signature`` value for a request body.

    Args:
        secret: The webhook shared secret
        body: Raw request body (str bodies are encoded as UTF-8)

    Returns:
        Signature string of the form ``sha1=<hex digest>``
    """
    if isinstance(body, str):
        body = body.encode("utf-8")

    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(body: bytes | str, signature: str, secret: str) -> bool:
    """
    Check a delivery's signature header against the body.

    The comparison is constant-time so a mismatch leaks nothing about the
    expected value.

    Args:
        body: Raw request body
        signature: Value of the ``X-Hub-Signature`` header
        secret: The webhook shared secret

    Returns:
        True if the signature matches exactly
    """
    expected = sign_request_body(secret, body)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
