"""Types for @epik mention commands."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class StatusCommand:
    """``@epik status [#N]``.

    ``issue_number`` is None for repo-wide status.
    """

    issue_number: Optional[int] = None


@dataclass(frozen=True)
class HelpCommand:
    """``@epik help``."""


@dataclass(frozen=True)
class UnknownCommand:
    """Any other command word; ``raw`` is echoed back to the user."""

    raw: str


MentionCommand = Union[StatusCommand, HelpCommand, UnknownCommand]


@dataclass(frozen=True)
class CommandContext:
    """Where a command reply is posted: the thread the mention came from."""

    owner: str
    repo: str
    issue_number: int
