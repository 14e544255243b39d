"""CLI commands for notifyy."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from notifyy import __logo__, __version__
from notifyy.config.loader import load_settings
from notifyy.config.schema import Settings, mask_secret
from notifyy.core.errors import ConfigurationError

app = typer.Typer(
    name="notifyy",
    help=f"{__logo__} notifyy - relay HTTP notifications to Telegram",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} notifyy v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
    """notifyy - relay HTTP notifications to Telegram."""


def _settings_or_exit(**overrides: object) -> Settings:
    try:
        return load_settings(**{k: v for k, v in overrides.items() if v is not None})
    except ConfigurationError as e:
        for line in str(e).splitlines():
            console.print(f"[red]{line}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Listen address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Listen port"),
) -> None:
    """Start the HTTP front door and the Telegram bot."""
    from notifyy.app.bootstrap import build_runtime
    from notifyy.app.bootstrap import serve as serve_runtime

    settings = _settings_or_exit(host=host, port=port)
    console.print(f"{__logo__} Starting notifyy on {settings.host}:{settings.port}...")

    runtime = build_runtime(settings)
    try:
        asyncio.run(serve_runtime(runtime))
    except KeyboardInterrupt:
        console.print("\nGoodbye!")


@app.command("check-config")
def check_config() -> None:
    """Validate the environment and print the effective settings."""
    settings = _settings_or_exit()

    table = Table(title="notifyy settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("telegram_token", mask_secret(settings.telegram_token))
    table.add_row("database_user", settings.database_user)
    table.add_row("database_password", mask_secret(settings.database_password, visible=0))
    table.add_row("database", f"{settings.database_url}/{settings.database_name}")
    table.add_row("listen", f"{settings.host}:{settings.port}")
    table.add_row("retention_seconds", str(settings.retention_seconds))
    table.add_row("tick_seconds", str(settings.tick_seconds))
    table.add_row("metrics", "enabled" if settings.metrics else "disabled")

    console.print(table)
    console.print("[green]✓[/green] Configuration is valid")
