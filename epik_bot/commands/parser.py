"""Parse @epik mention commands out of GitHub comment text.

A command is a keyword that immediately follows an ``@epik`` mention at
the very start of the comment (leading whitespace ignored). Accepted
mention forms, case-insensitive:

    @epik  @epik-agent  @epik[bot]  @epik-agent[bot]

Conversational mentions ("thanks @epik!", "hey @epik nice work") and a
bare mention with nothing after it return None: the bot stays quiet.
"""

import re
from typing import Optional

from epik_bot.commands.types import (
    HelpCommand,
    MentionCommand,
    StatusCommand,
    UnknownCommand,
)

# Group 1 = command word and everything after it
_MENTION_COMMAND_RE = re.compile(
    r"^@epik(?:-agent)?(?:\[bot\])?\s+(\S.*)",
    re.IGNORECASE | re.DOTALL,
)

_ISSUE_NUMBER_RE = re.compile(r"^#?([0-9]+)$")


def parse_mention_command(comment_body: str) -> Optional[MentionCommand]:
    """Return the command in ``comment_body``, or None if there is none."""
    match = _MENTION_COMMAND_RE.match(comment_body.strip())
    if not match:
        return None

    command_word, *args = match.group(1).split()
    command = command_word.lower()

    if command == "status":
        return StatusCommand(issue_number=_parse_issue_number(" ".join(args)))

    if command == "help":
        return HelpCommand()

    return UnknownCommand(raw=" ".join([command_word, *args]))


def _parse_issue_number(arg: str) -> Optional[int]:
    """Extract an issue number from "#42" or "42".

    Anything else, including several tokens, yields None: a malformed
    number falls back to repo-wide status rather than an error.
    """
    if not arg:
        return None
    match = _ISSUE_NUMBER_RE.match(arg.strip())
    if not match:
        return None
    number = int(match.group(1))
    return number if number > 0 else None
