"""Route verified GitHub webhook events to their handlers.

Handlers are keyed by ``"<event>.<action>"`` (falling back to the bare
event name) and each returns a short action label that ends up in the
webhook response and the logs.

issue_comment.created
    Ignore the app's own comments, parse a mention command, obtain an
    installation client, apply the per-thread cooldown, then reply.
issues.opened, pull_request
    Logged only. Planning and review agents will hook in here.
"""

import logging
from typing import Awaitable, Callable, Optional

from epik_bot.commands.parser import parse_mention_command
from epik_bot.commands.responses import handle_mention_command
from epik_bot.commands.types import CommandContext
from epik_bot.core.limiter import MentionRateLimiter, mention_key
from epik_bot.github.app import GitHubApp
from epik_bot.github.webhooks import event_key, installation_id_of

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict], Awaitable[str]]


class WebhookEventRouter:
    """Dispatch webhook payloads; one instance per request."""

    def __init__(self, github_app: GitHubApp, rate_limiter: MentionRateLimiter) -> None:
        self.github_app = github_app
        self.rate_limiter = rate_limiter
        self._handlers: dict[str, EventHandler] = {
            "issue_comment.created": self._on_issue_comment_created,
            "issues.opened": self._on_issue_opened,
            "pull_request": self._on_pull_request,
        }

    def _resolve(self, event_name: str, payload: dict) -> Optional[EventHandler]:
        return self._handlers.get(event_key(event_name, payload)) or self._handlers.get(
            event_name
        )

    async def route(self, event_name: str, payload: dict) -> str:
        """Run the handler for this event and return its action label.

        Handler errors are logged and re-raised for the endpoint to report.
        """
        handler = self._resolve(event_name, payload)
        if handler is None:
            return "ignored"
        try:
            return await handler(payload)
        except Exception as exc:
            logger.error("Webhook handler for %s failed: %s", event_key(event_name, payload), exc)
            raise

    async def _on_issue_comment_created(self, payload: dict) -> str:
        comment = payload.get("comment") or {}
        issue = payload.get("issue") or {}
        repository = payload.get("repository") or {}

        via_app = comment.get("performed_via_github_app") or {}
        if self.github_app.is_own_app(via_app.get("id")):
            return "self_comment"

        command = parse_mention_command(comment.get("body") or "")
        if command is None:
            return "no_command"

        ctx = CommandContext(
            owner=repository["owner"]["login"],
            repo=repository["name"],
            issue_number=issue["number"],
        )
        # The cooldown is only recorded once a reply can actually be sent.
        client = await self.github_app.installation_client(installation_id_of(payload))

        key = mention_key(ctx.owner, ctx.repo, ctx.issue_number)
        if not self.rate_limiter.is_allowed(key):
            logger.info("Rate limited: skipping reply on %s", key)
            return "rate_limited"

        logger.info(
            "Mentioned in %s: %r",
            key,
            (comment.get("body") or "")[:80],
        )
        await handle_mention_command(command, ctx, client)
        return "replied"

    async def _on_issue_opened(self, payload: dict) -> str:
        issue = payload.get("issue") or {}
        repository = payload.get("repository") or {}
        logger.info(
            "New issue in %s#%s: %r",
            repository.get("full_name"),
            issue.get("number"),
            issue.get("title"),
        )
        return "logged"

    async def _on_pull_request(self, payload: dict) -> str:
        pull_request = payload.get("pull_request") or {}
        repository = payload.get("repository") or {}
        logger.info(
            "Pull request %s in %s#%s: %r",
            payload.get("action"),
            repository.get("full_name"),
            pull_request.get("number"),
            pull_request.get("title"),
        )
        return "logged"
