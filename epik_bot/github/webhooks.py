"""GitHub webhook request validation.

Checks the delivery headers and verifies the payload signature. The
webhook secret is shared between GitHub and this app; it must never be
logged or exposed.

Signature verification uses HMAC-SHA256 as specified by GitHub:
https://docs.github.com/en/webhooks/using-webhooks/validating-webhook-deliveries
"""

import hashlib
import hmac
from typing import Mapping, Optional

REQUIRED_HEADERS = ("x-github-delivery", "x-github-event", "x-hub-signature-256")


class WebhookValidationError(Exception):
    """A webhook request rejected before its payload is looked at."""

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)


def validate_webhook_request(method: str, headers: Mapping[str, str]) -> None:
    """Reject anything that is not a POST carrying all GitHub delivery headers.

    Raises:
        WebhookValidationError: 405 for other methods, 400 for missing headers.
    """
    if method.upper() != "POST":
        raise WebhookValidationError("Method not allowed", 405)

    lowered = {key.lower(): value for key, value in headers.items()}
    if not all(lowered.get(name) for name in REQUIRED_HEADERS):
        raise WebhookValidationError("Missing GitHub webhook headers", 400)


def verify_webhook_signature(
    payload_body: bytes, signature_header: str, secret: str
) -> bool:
    """Verify that a webhook payload was signed by GitHub.

    Args:
        payload_body: Raw request body bytes.
        signature_header: Value of the X-Hub-Signature-256 header.
        secret: The webhook secret configured on the GitHub App.

    Returns:
        True if the signature is valid, False otherwise.
    """
    if not secret:
        raise ValueError("GITHUB_WEBHOOK_SECRET not configured")

    if not signature_header or not signature_header.startswith("sha256="):
        return False

    expected_signature = hmac.new(
        secret.encode("utf-8"),
        payload_body,
        hashlib.sha256,
    ).hexdigest()

    received_signature = signature_header.removeprefix("sha256=")

    # Constant-time comparison to prevent timing attacks
    return hmac.compare_digest(expected_signature, received_signature)


def event_key(event_name: str, payload: dict) -> str:
    """``"issue_comment.created"``-style key, or the bare event name."""
    action = payload.get("action")
    return f"{event_name}.{action}" if action else event_name


def installation_id_of(payload: dict) -> Optional[int]:
    return (payload.get("installation") or {}).get("id")
