"""Shared test fixtures for the epik-bot test suite.

The GitHub App is a real `GitHubApp` whose `installation_client` is
replaced by an AsyncMock returning a mock client, so no test touches the
network. Endpoint tests run against the ASGI app through httpx.
"""

import hashlib
import hmac
import time
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from epik_bot.core.config import Settings
from epik_bot.github.app import GitHubApp
from epik_bot.main import create_app

TEST_APP_ID = "4242"
TEST_WEBHOOK_SECRET = "test-webhook-secret"
TEST_BUILD_EVENT_SECRET = "test-build-event-secret"


def _sign(body: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


@pytest.fixture
def sign():
    """Return a function producing a valid X-Hub-Signature-256 for a body."""
    return _sign


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_app_id=TEST_APP_ID,
        github_private_key="unused-in-tests",
        github_webhook_secret=TEST_WEBHOOK_SECRET,
        build_event_secret=TEST_BUILD_EVENT_SECRET,
        sentry_dsn="",
        debug=False,
    )


@pytest.fixture
def issue_client() -> MagicMock:
    """Stand-in for an InstallationClient."""
    client = MagicMock()
    client.create_comment = AsyncMock(return_value={"id": 1})
    client.get_issue = AsyncMock(return_value={"state": "open", "title": "Test issue"})
    client.add_assignees = AsyncMock(return_value={})
    client.remove_assignees = AsyncMock(return_value={})
    return client


@pytest.fixture
def github_app(issue_client) -> GitHubApp:
    gh = GitHubApp(
        app_id=TEST_APP_ID,
        private_key="unused-in-tests",
        webhook_secret=TEST_WEBHOOK_SECRET,
    )
    gh.installation_client = AsyncMock(return_value=issue_client)
    return gh


@pytest.fixture
def app(settings, github_app):
    """FastAPI app with test settings and the mocked GitHub App installed."""
    test_app = create_app(settings)
    test_app.state.github_app = github_app
    return test_app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class FakeClock:
    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock(monkeypatch) -> FakeClock:
    """Freeze wall-clock and monotonic time; advance it by hand.

    Only for synchronous tests: the asyncio event loop also reads the
    monotonic clock.
    """
    clock = FakeClock(time.time())
    monkeypatch.setattr(time, "time", clock)
    monkeypatch.setattr(time, "monotonic", clock)
    return clock
