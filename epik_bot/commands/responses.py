"""Replies to parsed @epik mention commands.

Every command produces exactly one comment, posted on the thread where the
mention was made (``ctx.issue_number``). ``status #N`` first reads issue N
so the reply reflects its state at that moment; the reply still goes to
the originating thread, not to issue N.

Build state is not persisted anywhere, so repo-wide status is a fixed
placeholder.
"""

import logging
from typing import assert_never

from epik_bot.commands.types import (
    CommandContext,
    HelpCommand,
    MentionCommand,
    StatusCommand,
    UnknownCommand,
)
from epik_bot.github.client import IssueCommentingClient

logger = logging.getLogger(__name__)

HELP_TEXT = "\n".join(
    [
        "**@epik-agent commands:**",
        "",
        "- `@epik-agent status` — show build status for this repo",
        "- `@epik-agent status #N` — show status of a specific issue",
        "- `@epik-agent help` — show this message",
    ]
)

REPO_STATUS_TEXT = "\n".join(
    [
        "**Build status** — no active builds tracked in this instance.",
        "",
        "> 💡 Build tracking requires a persistent store integration.",
        "> For now, check the GitHub Actions tab or project board for current status.",
    ]
)


async def handle_mention_command(
    command: MentionCommand,
    ctx: CommandContext,
    client: IssueCommentingClient,
) -> None:
    """Post the reply for ``command`` on the thread described by ``ctx``."""
    if isinstance(command, StatusCommand):
        if command.issue_number is None:
            body = REPO_STATUS_TEXT
        else:
            body = await _issue_status_body(command.issue_number, ctx, client)
    elif isinstance(command, HelpCommand):
        body = HELP_TEXT
    elif isinstance(command, UnknownCommand):
        body = unknown_command_body(command.raw)
    else:
        assert_never(command)

    await client.create_comment(ctx.owner, ctx.repo, ctx.issue_number, body)
    logger.info(
        "Replied to %s on %s/%s#%d",
        type(command).__name__,
        ctx.owner,
        ctx.repo,
        ctx.issue_number,
    )


def unknown_command_body(raw: str) -> str:
    return "\n".join([f"Unknown command: `{raw}`", "", HELP_TEXT])


def issue_status_body(issue_number: int, title: str, state: str) -> str:
    state_label = "✅ closed / done" if state == "closed" else "🔵 open"
    return "\n".join(
        [
            f"**Status of #{issue_number}: {title}**",
            "",
            f"- State: {state_label}",
        ]
    )


async def _issue_status_body(
    target_issue_number: int,
    ctx: CommandContext,
    client: IssueCommentingClient,
) -> str:
    issue = await client.get_issue(ctx.owner, ctx.repo, target_issue_number)
    return issue_status_body(
        target_issue_number,
        title=issue.get("title", ""),
        state=issue.get("state", ""),
    )
