"""Settings loading with readable startup errors."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from notifyy.config.schema import Settings
from notifyy.core.errors import ConfigurationError

_UNPREFIXED = frozenset({"TELEGRAM_TOKEN", "DATABASE_USER", "DATABASE_PASSWORD", "PORT"})


def load_settings(**overrides: Any) -> Settings:
    """
    Load settings from the environment.

    Args:
        overrides: Field values that take precedence over the environment.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: one line per missing or invalid value.
    """
    try:
        return Settings(**overrides)
    except PydanticValidationError as e:
        lines = [_describe(err) for err in e.errors()]
        raise ConfigurationError("\n".join(lines)) from e


def _describe(err: dict[str, Any]) -> str:
    field = str(err["loc"][0]) if err.get("loc") else "settings"
    env_name = field if field in _UNPREFIXED else f"NOTIFYY_{field.upper()}"
    if err.get("type") == "missing":
        return f"Missing {env_name}. Please add the environment variable {env_name}."
    return f"Invalid {env_name}: {err.get('msg', 'invalid value')}"
