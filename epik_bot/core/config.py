from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BOT_ASSIGNEE = "epik-agent"


class ConfigurationError(RuntimeError):
    """Raised when a required environment value is missing.

    Endpoints translate this into a 500 response so the process, and the
    health check, stay up while the deployment is misconfigured.
    """


def _restore_newlines(value: str) -> str:
    """Turn literal ``\\n`` sequences back into newlines.

    Hosting dashboards usually store a PEM private key on a single line with
    escaped newlines. PyJWT needs the real multi-line PEM.
    """
    return value.replace("\\n", "\n")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Each GitHub value accepts both the ``GITHUB_*`` name and the short name
    used by the earlier serverless deployment (``APP_ID``, ``PRIVATE_KEY``,
    ``WEBHOOK_SECRET``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub App: required for webhook handling and posting comments.
    # Private key is the PEM contents (not a file path).
    github_app_id: str = Field(
        default="",
        validation_alias=AliasChoices("github_app_id", "app_id"),
    )
    github_private_key: str = Field(
        default="",
        validation_alias=AliasChoices("github_private_key", "private_key"),
    )
    github_webhook_secret: str = Field(
        default="",
        validation_alias=AliasChoices("github_webhook_secret", "webhook_secret"),
    )

    @field_validator("github_private_key", mode="before")
    @classmethod
    def restore_private_key_newlines(cls, v: str) -> str:
        return _restore_newlines(v) if isinstance(v, str) else v

    # Bearer token the local build tool sends to /api/build-event.
    # Empty means "same as the webhook secret".
    build_event_secret: str = ""

    github_api_url: str = "https://api.github.com"

    # Identity the bot assigns to issues while a build is running.
    bot_assignee: str = DEFAULT_BOT_ASSIGNEE
    service_name: str = "epik-bot"

    # Cooldown between two replies on the same issue thread.
    mention_cooldown_seconds: int = Field(default=30, ge=1)

    # Sentry: leave blank to disable error capture.
    sentry_dsn: str = ""

    # App
    debug: bool = True

    @property
    def effective_build_event_secret(self) -> str:
        return self.build_event_secret or self.github_webhook_secret

    def require_github_app(self) -> None:
        """Raise ConfigurationError listing every missing GitHub App value."""
        missing = [
            name
            for name, value in (
                ("GITHUB_APP_ID", self.github_app_id),
                ("GITHUB_PRIVATE_KEY", self.github_private_key),
                ("GITHUB_WEBHOOK_SECRET", self.github_webhook_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}"
            )


def get_settings() -> Settings:
    return Settings()
