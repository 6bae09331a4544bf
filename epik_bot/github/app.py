"""The GitHub App identity used by every endpoint.

One `GitHubApp` is built per process from `Settings` the first time an
endpoint needs it, then kept on ``app.state``. Building it validates the
configuration, so a missing credential surfaces as a `ConfigurationError`
on the request that needed it instead of killing the process.
"""

import logging

from epik_bot.core.config import Settings
from epik_bot.github import client as github_client
from epik_bot.github.auth import create_app_jwt

logger = logging.getLogger(__name__)


class GitHubApp:
    def __init__(
        self,
        app_id: str,
        private_key: str,
        webhook_secret: str,
        api_base: str = github_client.GITHUB_API_BASE,
    ) -> None:
        self.app_id = app_id
        self.webhook_secret = webhook_secret
        self.api_base = api_base
        self._private_key = private_key

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubApp":
        """Build the app from settings; raises ConfigurationError if incomplete."""
        settings.require_github_app()
        return cls(
            app_id=settings.github_app_id,
            private_key=settings.github_private_key,
            webhook_secret=settings.github_webhook_secret,
            api_base=settings.github_api_url.rstrip("/"),
        )

    def is_own_app(self, app_id: object) -> bool:
        """True if ``app_id`` (from a webhook payload) is this app."""
        return app_id is not None and str(app_id) == str(self.app_id)

    async def installation_client(
        self, installation_id: int
    ) -> github_client.InstallationClient:
        """Return a client authenticated as the given installation."""
        app_jwt = create_app_jwt(self.app_id, self._private_key)
        token = await github_client.get_installation_token(
            app_jwt, installation_id, api_base=self.api_base
        )
        logger.debug("Obtained installation token for installation %s", installation_id)
        return github_client.InstallationClient(token, api_base=self.api_base)
