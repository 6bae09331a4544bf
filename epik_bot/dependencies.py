"""Process-lifetime components handed to request handlers.

`create_app()` puts the settings and the rate limiter on ``app.state``. The `GitHubApp` is
built lazily on first use so a missing credential only fails the requests
that need it. Tests replace either by assigning to ``app.state``.
"""

import logging

from fastapi import Request

from epik_bot.core.config import Settings
from epik_bot.core.limiter import MentionRateLimiter
from epik_bot.github.app import GitHubApp

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rate_limiter(request: Request) -> MentionRateLimiter:
    return request.app.state.rate_limiter


def resolve_github_app(request: Request, settings: Settings) -> GitHubApp:
    """Return the process-wide GitHubApp, building it on first use.

    Raises:
        ConfigurationError: a required GitHub App setting is missing.
    """
    github_app = getattr(request.app.state, "github_app", None)
    if github_app is None:
        github_app = GitHubApp.from_settings(settings)
        request.app.state.github_app = github_app
        logger.info("GitHub App %s initialised", github_app.app_id)
    return github_app
