"""POST /api/build-event

The local build tool calls this endpoint to report build lifecycle events;
the bot then comments on and (un)assigns the affected issues.

Authentication: the caller sends the shared build-event secret as a Bearer
token. This keeps arbitrary callers from posting comments as the app.

Status codes:
  405  not a POST (FastAPI default)
  401  missing or wrong bearer token
  400  body is not a JSON object, ``type`` missing / not a string, or the
       event fails validation
  500  configuration missing, or GitHub rejected a call
  200  event applied
"""

import hmac
import json
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from epik_bot.build_events.handler import handle_build_event
from epik_bot.build_events.schemas import BuildEventResponse, parse_build_event
from epik_bot.core.config import ConfigurationError, Settings
from epik_bot.dependencies import get_app_settings, resolve_github_app

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["build-events"])


def _check_bearer(authorization: str, secret: str) -> None:
    if not secret:
        raise ConfigurationError("Missing environment variables: BUILD_EVENT_SECRET")
    if not hmac.compare_digest(authorization.encode(), f"Bearer {secret}".encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


@router.post("/build-event", response_model=BuildEventResponse)
async def receive_build_event(
    request: Request,
    authorization: str = Header(default=""),
    settings: Settings = Depends(get_app_settings),
) -> BuildEventResponse:
    """Validate, authenticate and apply one build event."""
    try:
        _check_bearer(authorization, settings.effective_build_event_secret)
    except ConfigurationError as exc:
        logger.error("Build event rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    try:
        payload = json.loads(await request.body())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Body must be a JSON object",
        ) from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("type"), str):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing event type",
        )

    try:
        event = parse_build_event(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {payload['type']} event: {exc.error_count()} validation error(s)",
        ) from exc

    try:
        github_app = resolve_github_app(request, settings)
        client = await github_app.installation_client(event.installation_id)
        await handle_build_event(event, client, assignee=settings.bot_assignee)
    except Exception as exc:
        logger.error("Build event handling failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return BuildEventResponse(ok=True, type=event.type)
