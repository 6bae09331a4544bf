"""Integration tests for the GitHub webhook endpoint."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from epik_bot.core.config import Settings
from epik_bot.main import create_app

WEBHOOK_URL = "/api/webhook"


def _comment_payload(body: str, issue_number: int = 42) -> bytes:
    return json.dumps(
        {
            "action": "created",
            "comment": {"body": body, "performed_via_github_app": None},
            "issue": {"number": issue_number},
            "repository": {
                "full_name": "acme/widgets",
                "owner": {"login": "acme"},
                "name": "widgets",
            },
            "installation": {"id": 12345},
        }
    ).encode()


def _headers(body: bytes, sign, event: str = "issue_comment") -> dict[str, str]:
    return {
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-GitHub-Event": event,
        "X-Hub-Signature-256": sign(body),
        "Content-Type": "application/json",
    }


class TestWebhookEndpoint:
    async def test_get_is_not_allowed(self, client):
        response = await client.get(WEBHOOK_URL)
        assert response.status_code == 405
        assert response.json()["detail"] == "Method not allowed"

    async def test_missing_headers_rejected(self, client):
        response = await client.post(WEBHOOK_URL, content=b"{}")
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing GitHub webhook headers"

    async def test_missing_signature_header_rejected(self, client, sign):
        body = _comment_payload("@epik help")
        headers = _headers(body, sign)
        del headers["X-Hub-Signature-256"]

        response = await client.post(WEBHOOK_URL, content=body, headers=headers)
        assert response.status_code == 400

    async def test_invalid_signature_rejected(self, client, sign, issue_client):
        body = _comment_payload("@epik help")
        headers = _headers(body, sign)
        headers["X-Hub-Signature-256"] = "sha256=" + "0" * 64

        response = await client.post(WEBHOOK_URL, content=body, headers=headers)

        assert response.status_code == 400
        assert "signature does not match" in response.json()["detail"]
        issue_client.create_comment.assert_not_awaited()

    async def test_signed_mention_gets_a_reply(self, client, sign, issue_client):
        body = _comment_payload("@epik help")

        response = await client.post(WEBHOOK_URL, content=body, headers=_headers(body, sign))

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "event": "issue_comment",
            "action": "replied",
        }
        issue_client.create_comment.assert_awaited_once()

    async def test_repeat_mention_is_rate_limited(self, client, sign, issue_client):
        body = _comment_payload("@epik help")

        await client.post(WEBHOOK_URL, content=body, headers=_headers(body, sign))
        response = await client.post(WEBHOOK_URL, content=body, headers=_headers(body, sign))

        assert response.status_code == 200
        assert response.json()["action"] == "rate_limited"
        assert issue_client.create_comment.await_count == 1

    async def test_unknown_event_acknowledged(self, client, sign):
        body = b'{"ref": "refs/heads/main"}'

        response = await client.post(
            WEBHOOK_URL, content=body, headers=_headers(body, sign, event="push")
        )

        assert response.status_code == 200
        assert response.json()["action"] == "ignored"

    async def test_handler_failure_returns_400(self, client, sign, issue_client):
        issue_client.create_comment.side_effect = RuntimeError("GitHub is down")
        body = _comment_payload("@epik help")

        response = await client.post(WEBHOOK_URL, content=body, headers=_headers(body, sign))

        assert response.status_code == 400
        assert response.json()["detail"] == "GitHub is down"

    async def test_request_id_follows_delivery_id(self, client, sign):
        body = b"{}"

        response = await client.post(
            WEBHOOK_URL, content=body, headers=_headers(body, sign, event="ping")
        )

        assert response.headers["x-request-id"] == "72d3162e-cc78-11e3-81ab-4c9367dc0958"


class TestUnconfiguredApp:
    @pytest.fixture
    async def unconfigured_client(self):
        settings = Settings(
            _env_file=None,
            github_app_id="",
            github_private_key="",
            github_webhook_secret="",
            sentry_dsn="",
            debug=False,
        )
        transport = ASGITransport(app=create_app(settings))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    async def test_missing_credentials_return_500(self, unconfigured_client, sign):
        body = _comment_payload("@epik help")

        response = await unconfigured_client.post(
            WEBHOOK_URL, content=body, headers=_headers(body, sign)
        )

        assert response.status_code == 500
        assert "GITHUB_APP_ID" in response.json()["detail"]

    async def test_health_still_ok(self, unconfigured_client):
        response = await unconfigured_client.get("/api/health")
        assert response.status_code == 200
