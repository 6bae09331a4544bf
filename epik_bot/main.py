from typing import Optional

from fastapi import FastAPI

from epik_bot.build_events.router import router as build_events_router
from epik_bot.core.config import Settings, get_settings
from epik_bot.core.limiter import MentionRateLimiter
from epik_bot.core.middleware import RequestIdMiddleware, SecurityHeadersMiddleware
from epik_bot.github.router import router as github_router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    _app = FastAPI(
        title="epik-bot",
        description="GitHub App that answers @epik mentions and reports build events",
        version="0.1.0",
    )

    # ---------------------------------------------------------------------------
    # Process-lifetime state. The GitHub App is built on first use (see
    # epik_bot.dependencies) so missing credentials don't stop the process.
    # ---------------------------------------------------------------------------
    _app.state.settings = settings
    _app.state.rate_limiter = MentionRateLimiter(settings.mention_cooldown_seconds)
    _app.state.github_app = None

    # ---------------------------------------------------------------------------
    # Middleware (registered outermost → innermost; executed innermost → outermost)
    # ---------------------------------------------------------------------------

    # Security headers on every response
    _app.add_middleware(SecurityHeadersMiddleware)

    # Request ID (X-Request-ID or X-GitHub-Delivery) and GitHub event name
    _app.add_middleware(RequestIdMiddleware)

    # ---------------------------------------------------------------------------
    # Sentry, initialised before the routers so startup errors are captured
    # ---------------------------------------------------------------------------
    from epik_bot.core.sentry import init_sentry

    init_sentry(
        dsn=settings.sentry_dsn,
        environment="development" if settings.debug else "production",
    )

    # ---------------------------------------------------------------------------
    # Logging: configure structlog before any router logs anything
    # ---------------------------------------------------------------------------
    from epik_bot.core.logging import configure_structlog

    configure_structlog(debug=settings.debug)

    # ---------------------------------------------------------------------------
    # Routes
    # ---------------------------------------------------------------------------

    service_name = settings.service_name

    @_app.get("/api/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok", "service": service_name}

    _app.include_router(github_router)
    _app.include_router(build_events_router)

    return _app


app = create_app()
