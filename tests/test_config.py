import pytest
from typer.testing import CliRunner

from notifyy.cli.commands import app
from notifyy.config.loader import load_settings
from notifyy.config.schema import mask_secret
from notifyy.core.errors import ConfigurationError
from tests.fakes import TELEGRAM_TOKEN

ENV_KEYS = (
    "TELEGRAM_TOKEN",
    "DATABASE_USER",
    "DATABASE_PASSWORD",
    "PORT",
    "NOTIFYY_RETENTION_SECONDS",
    "NOTIFYY_TICK_SECONDS",
    "NOTIFYY_METRICS",
)


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TELEGRAM_TOKEN", TELEGRAM_TOKEN)
    monkeypatch.setenv("DATABASE_USER", "notifyy")
    monkeypatch.setenv("DATABASE_PASSWORD", "secret")
    return monkeypatch


def test_defaults_from_environment(env: pytest.MonkeyPatch) -> None:
    settings = load_settings()
    assert settings.telegram_token == TELEGRAM_TOKEN
    assert settings.port == 4321
    assert settings.retention_seconds == 3600
    assert settings.tick_seconds == 1.0
    assert settings.database_name == "notifyy-users"
    assert settings.metrics is False


def test_environment_overrides(env: pytest.MonkeyPatch) -> None:
    env.setenv("PORT", "8080")
    env.setenv("NOTIFYY_RETENTION_SECONDS", "600")
    env.setenv("NOTIFYY_TICK_SECONDS", "0.5")
    env.setenv("NOTIFYY_METRICS", "true")

    settings = load_settings()

    assert settings.port == 8080
    assert settings.retention_seconds == 600
    assert settings.tick_seconds == 0.5
    assert settings.metrics is True


def test_explicit_overrides_win(env: pytest.MonkeyPatch) -> None:
    assert load_settings(port=9000).port == 9000


def test_missing_token_is_a_configuration_error(env: pytest.MonkeyPatch) -> None:
    env.delenv("TELEGRAM_TOKEN")
    with pytest.raises(ConfigurationError, match="Missing TELEGRAM_TOKEN"):
        load_settings()


def test_short_token_is_rejected(env: pytest.MonkeyPatch) -> None:
    env.setenv("TELEGRAM_TOKEN", "x" * 44)
    with pytest.raises(ConfigurationError, match="Invalid TELEGRAM_TOKEN"):
        load_settings()


def test_all_problems_are_reported(env: pytest.MonkeyPatch) -> None:
    env.delenv("DATABASE_USER")
    env.delenv("DATABASE_PASSWORD")
    with pytest.raises(ConfigurationError) as excinfo:
        load_settings()
    lines = str(excinfo.value).splitlines()
    assert any("DATABASE_USER" in line for line in lines)
    assert any("DATABASE_PASSWORD" in line for line in lines)


def test_mask_secret() -> None:
    assert mask_secret("abcdefgh") == "abcd…"
    assert mask_secret("abc") == "…"
    assert mask_secret("") == ""


def test_check_config_command(env: pytest.MonkeyPatch) -> None:
    result = CliRunner().invoke(app, ["check-config"])
    assert result.exit_code == 0
    assert "Configuration is valid" in result.output
    assert TELEGRAM_TOKEN not in result.output


def test_check_config_command_fails_without_credentials(env: pytest.MonkeyPatch) -> None:
    env.delenv("DATABASE_PASSWORD")
    result = CliRunner().invoke(app, ["check-config"])
    assert result.exit_code == 1
    assert "DATABASE_PASSWORD" in result.output
