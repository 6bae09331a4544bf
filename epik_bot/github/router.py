"""GitHub webhook endpoint.

Public (no auth dependency) but every delivery must carry GitHub's
delivery headers and a valid X-Hub-Signature-256.

Status codes:
  405  not a POST
  400  missing delivery headers, bad signature, or a handler failure
  500  the GitHub App is not configured
  200  delivery accepted
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from epik_bot.core.config import ConfigurationError, Settings
from epik_bot.core.limiter import MentionRateLimiter
from epik_bot.dependencies import get_app_settings, get_rate_limiter, resolve_github_app
from epik_bot.github.events import WebhookEventRouter
from epik_bot.github.schemas import WebhookResponse
from epik_bot.github.webhooks import (
    WebhookValidationError,
    validate_webhook_request,
    verify_webhook_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["github"])


# Every method is routed here so the method check lives in one place
# alongside the header checks.
@router.api_route(
    "/webhook",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=WebhookResponse,
)
async def handle_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    rate_limiter: MentionRateLimiter = Depends(get_rate_limiter),
) -> WebhookResponse:
    """Verify a GitHub delivery and route it to the event handlers."""
    try:
        validate_webhook_request(request.method, request.headers)
    except WebhookValidationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    try:
        github_app = resolve_github_app(request, settings)
    except ConfigurationError as exc:
        logger.error("Webhook rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    body = await request.body()
    if not verify_webhook_signature(
        body, request.headers["x-hub-signature-256"], github_app.webhook_secret
    ):
        logger.warning(
            "Webhook signature mismatch for delivery %s",
            request.headers["x-github-delivery"],
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="signature does not match event payload and secret",
        )

    event_name = request.headers["x-github-event"]
    try:
        payload = json.loads(body)
        action = await WebhookEventRouter(github_app, rate_limiter).route(
            event_name, payload
        )
    except Exception as exc:
        logger.error("Webhook verification/handling failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return WebhookResponse(event=event_name, action=action)
