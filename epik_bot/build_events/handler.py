"""Apply a build lifecycle event to GitHub.

Each event becomes a small sequence of issue calls:

  build_start       assign the bot, then post the acceptance checklist
  pr_created        post a link to the new pull request
  feature_complete  per issue, concurrently: unassign, then post completion
  build_failed      unassign, then post the quoted failure reason

There is no partial-failure handling: the first GitHub error propagates and
the endpoint reports it.
"""

import asyncio
import logging
from typing import assert_never

from epik_bot.build_events.comments import (
    format_build_failed_comment,
    format_build_start_comment,
    format_feature_complete_comment,
    format_pr_summary_comment,
)
from epik_bot.build_events.schemas import (
    BuildEvent,
    BuildFailedEvent,
    BuildStartEvent,
    FeatureCompleteEvent,
    PrCreatedEvent,
)
from epik_bot.core.config import DEFAULT_BOT_ASSIGNEE
from epik_bot.github.client import IssueAssigningClient

logger = logging.getLogger(__name__)


async def handle_build_event(
    event: BuildEvent,
    client: IssueAssigningClient,
    assignee: str = DEFAULT_BOT_ASSIGNEE,
) -> None:
    """Post comments and manage assignees for ``event``."""
    logger.info(
        "Handling %s for %s/%s", event.type, event.owner, event.repo
    )

    if isinstance(event, BuildStartEvent):
        await client.add_assignees(
            event.owner, event.repo, event.issue_number, [assignee]
        )
        await client.create_comment(
            event.owner,
            event.repo,
            event.issue_number,
            format_build_start_comment(event.acceptance_criteria),
        )
    elif isinstance(event, PrCreatedEvent):
        await client.create_comment(
            event.owner,
            event.repo,
            event.issue_number,
            format_pr_summary_comment(event.pr_number, event.pr_url),
        )
    elif isinstance(event, FeatureCompleteEvent):
        body = format_feature_complete_comment(event.total_issues)
        await asyncio.gather(
            *(
                _close_out_issue(client, event.owner, event.repo, number, body, assignee)
                for number in event.issue_numbers
            )
        )
    elif isinstance(event, BuildFailedEvent):
        await client.remove_assignees(
            event.owner, event.repo, event.issue_number, [assignee]
        )
        await client.create_comment(
            event.owner,
            event.repo,
            event.issue_number,
            format_build_failed_comment(event.reason),
        )
    else:
        assert_never(event)


async def _close_out_issue(
    client: IssueAssigningClient,
    owner: str,
    repo: str,
    issue_number: int,
    body: str,
    assignee: str,
) -> None:
    await client.remove_assignees(owner, repo, issue_number, [assignee])
    await client.create_comment(owner, repo, issue_number, body)
