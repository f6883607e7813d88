"""
Helpers shared by the CLI commands.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from tarjouspalvelu.core.config.loader import ConfigError, load_app_config
from tarjouspalvelu.core.config.models import AppConfig
from tarjouspalvelu.core.backends.base import BackendError
from tarjouspalvelu.core.errors import TarjouspalveluError
from tarjouspalvelu.core.logging import setup_logging

console = Console()
err_console = Console(stderr=True)

# Errors reported as a message instead of a traceback
PORTAL_ERRORS = (TarjouspalveluError, BackendError)

# Set by the main callback
state: dict[str, Any] = {"config_path": None, "verbose": False}


def load_settings() -> AppConfig:
    """Load the app configuration and set up logging from it."""
    try:
        config = load_app_config(state["config_path"])
    except ConfigError as e:
        err_console.print(f"[red]Error loading configuration:[/red] {e}")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    setup_logging(config.logging, verbose=state["verbose"])
    return config


def require_credentials(config: AppConfig) -> tuple[str, str]:
    """Get login credentials or exit with a hint."""
    credentials = config.credentials
    if not credentials.is_complete:
        err_console.print(
            "[red]Login required.[/red] Set [yellow]TP_USERNAME[/yellow] and "
            "[yellow]TP_PASSWORD[/yellow] or the credentials section of the config file."
        )
        raise typer.Exit(1)
    return credentials.username, credentials.password


def fail(error: Exception) -> None:
    """Report a portal error and exit."""
    err_console.print(f"[red]{type(error).__name__}:[/red] {error}")
    raise typer.Exit(1)


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False, default=str))


def write_output(data: Any, output: Path | None) -> bool:
    """Write JSON to a file if requested."""
    if output is None:
        return False
    output.write_text(json.dumps(data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")
    return True
