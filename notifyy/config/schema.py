"""Configuration schema using Pydantic settings."""

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

from notifyy.channels.telegram import DEFAULT_API_BASE
from notifyy.delivery.gate import DEFAULT_RETENTION_SECONDS, DEFAULT_TICK_SECONDS
from notifyy.storage.cloudant import DEFAULT_DATABASE_NAME, DEFAULT_DATABASE_URL

DEFAULT_PORT = 4321
MIN_TELEGRAM_TOKEN_LENGTH = 45


class Settings(BaseSettings):
    """Root configuration, read from the process environment.

    The bot token, database credentials and port keep their historical
    unprefixed variable names; everything else lives under ``NOTIFYY_``.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, env_prefix="NOTIFYY_")

    telegram_token: str = Field(validation_alias="TELEGRAM_TOKEN")
    database_user: str = Field(validation_alias="DATABASE_USER", min_length=1)
    database_password: str = Field(validation_alias="DATABASE_PASSWORD", min_length=1)
    port: int = Field(default=DEFAULT_PORT, validation_alias="PORT", ge=1, le=65535)

    host: str = "0.0.0.0"
    database_url: str = DEFAULT_DATABASE_URL
    database_name: str = DEFAULT_DATABASE_NAME
    retention_seconds: float = Field(default=DEFAULT_RETENTION_SECONDS, ge=1)
    tick_seconds: float = Field(default=DEFAULT_TICK_SECONDS, gt=0)
    telegram_api_base: str = DEFAULT_API_BASE
    telegram_poll_timeout: int = Field(default=30, ge=0)
    metrics: bool = False

    @field_validator("telegram_token")
    @classmethod
    def _validate_telegram_token(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_TELEGRAM_TOKEN_LENGTH:
            raise ValueError(f"token must be at least {MIN_TELEGRAM_TOKEN_LENGTH} characters")
        return value


def mask_secret(value: str, visible: int = 4) -> str:
    """Render a secret for display, keeping only its first characters."""
    if not value:
        return ""
    return value[:visible] + "…" if len(value) > visible else "…"
