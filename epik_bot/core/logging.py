"""Structured logging via structlog.

`configure_structlog()` runs once from `create_app()`. Modules keep logging
through ``logging.getLogger(__name__)``; the stdlib root handler is set up
here as well so both paths reach stdout.

debug=True renders with `ConsoleRenderer`, debug=False with `JSONRenderer`.

Every structlog event carries the delivery context set by
`epik_bot.core.middleware`: ``request_id`` (the GitHub delivery ID for
webhook calls) and ``github_event``.
"""

from __future__ import annotations

import logging
import sys

import structlog

from epik_bot.core.middleware import get_github_event, get_request_id

# Third-party loggers that log every outbound call at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def _inject_delivery_context(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: add request_id and github_event when known."""
    for key, value in (
        ("request_id", get_request_id()),
        ("github_event", get_github_event()),
    ):
        if value:
            event_dict.setdefault(key, value)
    return event_dict


def _processors(debug: bool) -> list:
    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_delivery_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_structlog(debug: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Calling it again replaces the previous configuration, so each test app
    can pick its own mode.
    """
    level = logging.DEBUG if debug else logging.INFO

    structlog.configure(
        processors=_processors(debug),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
