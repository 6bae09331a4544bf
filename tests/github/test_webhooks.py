"""Tests for webhook header validation and signature verification."""

import hashlib
import hmac

import pytest

from epik_bot.github.webhooks import (
    WebhookValidationError,
    event_key,
    installation_id_of,
    validate_webhook_request,
    verify_webhook_signature,
)

MOCK_SECRET = "test-webhook-secret-123"

ALL_HEADERS = {
    "x-github-delivery": "abc-123",
    "x-github-event": "ping",
    "x-hub-signature-256": "sha256=validhash",
}


class TestValidateWebhookRequest:
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_non_post_is_405(self, method):
        with pytest.raises(WebhookValidationError, match="(?i)method not allowed") as exc_info:
            validate_webhook_request(method, {})
        assert exc_info.value.status_code == 405

    @pytest.mark.parametrize("missing", sorted(ALL_HEADERS))
    def test_missing_header_is_400(self, missing):
        headers = {k: v for k, v in ALL_HEADERS.items() if k != missing}
        with pytest.raises(WebhookValidationError, match="(?i)missing") as exc_info:
            validate_webhook_request("POST", headers)
        assert exc_info.value.status_code == 400

    def test_empty_header_counts_as_missing(self):
        headers = {**ALL_HEADERS, "x-github-delivery": ""}
        with pytest.raises(WebhookValidationError):
            validate_webhook_request("POST", headers)

    def test_header_names_are_case_insensitive(self):
        headers = {
            "X-GitHub-Delivery": "abc-123",
            "X-GitHub-Event": "ping",
            "X-Hub-Signature-256": "sha256=validhash",
        }
        validate_webhook_request("POST", headers)

    def test_valid_request_passes(self):
        validate_webhook_request("POST", ALL_HEADERS)


class TestVerifyWebhookSignature:
    """Webhook signatures use HMAC-SHA256 as specified by GitHub."""

    def _sign(self, payload: bytes) -> str:
        sig = hmac.new(MOCK_SECRET.encode("utf-8"), payload, hashlib.sha256).hexdigest()
        return f"sha256={sig}"

    def test_valid_signature_passes(self):
        payload = b'{"action":"created"}'
        assert verify_webhook_signature(payload, self._sign(payload), MOCK_SECRET) is True

    def test_invalid_signature_fails(self):
        assert verify_webhook_signature(b'{"action":"created"}', "sha256=bad", MOCK_SECRET) is False

    def test_missing_prefix_fails(self):
        assert verify_webhook_signature(b"{}", "no-prefix", MOCK_SECRET) is False

    def test_empty_signature_fails(self):
        assert verify_webhook_signature(b"body", "", MOCK_SECRET) is False

    def test_tampered_payload_fails(self):
        signature = self._sign(b'{"action":"created"}')
        assert verify_webhook_signature(b'{"action":"deleted"}', signature, MOCK_SECRET) is False

    def test_missing_secret_raises(self):
        with pytest.raises(ValueError, match="GITHUB_WEBHOOK_SECRET"):
            verify_webhook_signature(b"body", "sha256=abc", "")


class TestPayloadHelpers:
    def test_event_key_with_action(self):
        assert event_key("issue_comment", {"action": "created"}) == "issue_comment.created"

    def test_event_key_without_action(self):
        assert event_key("push", {}) == "push"

    def test_installation_id(self):
        assert installation_id_of({"installation": {"id": 12345}}) == 12345
        assert installation_id_of({}) is None
