"""
Tarjouspalvelu CLI - Main entry point.

Browse companies and notices of tarjouspalvelu.fi from the terminal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.traceback import install as install_rich_traceback

from tarjouspalvelu import __app_name__, __version__

from .commands import _shared

# Credentials are usually kept in .env as TP_USERNAME / TP_PASSWORD
load_dotenv()

install_rich_traceback(show_locals=False, width=120)

console = Console()

app = typer.Typer(
    name=__app_name__,
    help="Session and scraping client for tarjouspalvelu.fi",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (default: ./tarjouspalvelu.yaml if present)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log every portal request",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Tarjouspalvelu - procurement portal client."""
    _shared.state["config_path"] = config
    _shared.state["verbose"] = verbose


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import companies, notices, tenders  # noqa: E402

app.add_typer(companies.app, name="companies", help="List companies and resolve company slugs")
app.add_typer(notices.app, name="notices", help="List and show notices")
app.add_typer(tenders.app, name="tenders", help="Manage tenders in progress")


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
