"""ASGI middleware for the epik-bot API.

  RequestIdMiddleware        request ID and GitHub event name, in ContextVars
  SecurityHeadersMiddleware  fixed security headers on every response

GitHub sends a unique ``X-GitHub-Delivery`` header with every webhook
delivery. Using it as the request ID lets a log line or a Sentry event be
matched against the delivery shown in the App's "Recent Deliveries" page.
"""

import uuid
from contextvars import ContextVar
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")
_github_event_var: ContextVar[str] = ContextVar("github_event", default="")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def get_request_id() -> str:
    """Return the current request's ID, or an empty string outside a request."""
    return _request_id_var.get()


def get_github_event() -> str:
    """``X-GitHub-Event`` of the delivery being handled, if any."""
    return _github_event_var.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Resolve a request ID and make it available for the request lifetime.

    Precedence: ``X-Request-ID`` from the caller, then ``X-GitHub-Delivery``,
    then a fresh UUID4. The ID is always echoed back as ``X-Request-ID``.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-GitHub-Delivery")
            or str(uuid.uuid4())
        )

        id_token = _request_id_var.set(request_id)
        event_token = _github_event_var.set(request.headers.get("X-GitHub-Event", ""))
        try:
            response = await call_next(request)
        finally:
            _github_event_var.reset(event_token)
            _request_id_var.reset(id_token)

        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach `SECURITY_HEADERS` to every response.

    The API only ever returns JSON to GitHub and the build tool, so nothing
    is cacheable and nothing should be framed.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
