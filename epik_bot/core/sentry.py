"""Sentry SDK integration for epik-bot.

Errors from the webhook and build-event endpoints are reported with the
GitHub delivery attached as tags, and with secrets redacted. Nothing is
initialised when SENTRY_DSN is empty (local dev, CI).
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from epik_bot.core.middleware import get_github_event, get_request_id

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Substrings of dict keys whose values never leave the process.
_SENSITIVE_KEYS = frozenset(
    {"secret", "token", "private_key", "authorization", "signature", "dsn"}
)


def _before_send(event: dict[str, Any], hint: Any) -> dict[str, Any]:
    """Sentry before_send hook: tag the delivery, then redact secrets."""
    tags = event.setdefault("tags", {})
    request_id = get_request_id()
    if request_id:
        tags.setdefault("github_delivery", request_id)
    github_event = get_github_event()
    if github_event:
        tags.setdefault("github_event", github_event)
    return _scrub_secrets(event)


def _scrub_secrets(event: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive keys in ``extra``, ``request.data`` and ``request.headers``."""
    sections = [event.get("extra")]
    request = event.get("request") or {}
    sections += [request.get("data"), request.get("headers")]
    for section in sections:
        if isinstance(section, dict):
            _scrub_dict(section)
    return event


def _scrub_dict(d: dict[str, Any]) -> None:
    """Recursively redact sensitive values in-place."""
    for key, value in d.items():
        if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
            d[key] = REDACTED
        elif isinstance(value, dict):
            _scrub_dict(value)


def init_sentry(dsn: str, environment: str = "development") -> None:
    """Initialise the Sentry SDK; a blank ``dsn`` disables it."""
    if not dsn.strip():
        logger.debug("Sentry DSN not configured, skipping initialisation")
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
        before_send=_before_send,
    )
    logger.info("Sentry initialised (environment=%s)", environment)
