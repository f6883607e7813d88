"""
Notice commands.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from tarjouspalvelu.client import TarjouspalveluClient
from tarjouspalvelu.core.models import Language

from ._shared import (
    PORTAL_ERRORS,
    console,
    fail,
    load_settings,
    print_json,
    require_credentials,
    write_output,
)

app = typer.Typer(
    help="List and show notices",
    no_args_is_help=True,
)


def _format_deadline(original: str | None) -> str:
    return original or "[dim]-[/dim]"


@app.command("list")
def list_notices(
    slug: str = typer.Argument(..., help="Company slug"),
    language: Optional[Language] = typer.Option(
        None,
        "--language",
        "-l",
        help="Language to render the notices in",
    ),
    login: bool = typer.Option(
        False,
        "--login",
        help="Log in before listing",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON to this file",
    ),
) -> None:
    """List the open notices and dynamic purchasing systems of a company."""
    config = load_settings()
    username, password = require_credentials(config) if login else (None, None)

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            company_id, session = await tp.open_session(slug, username, password, language)
            return await tp.get_notices(company_id, session)

    try:
        result = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    if write_output(result.to_dict(), output):
        return

    if format == "json":
        print_json(result.to_dict())
        return

    table = Table(title=f"Notices ({result.language.value})", show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Ref", style="cyan", no_wrap=True)
    table.add_column("Unit")
    table.add_column("Title")
    table.add_column("Flags", style="dim")
    table.add_column("Deadline", justify="right")

    for notice in result.notices:
        title = notice.title
        if notice.is_being_corrected:
            title += " [red](being corrected)[/red]"
        table.add_row(
            str(notice.id),
            notice.custom_id,
            notice.unit,
            title,
            ", ".join(notice.flags),
            _format_deadline(notice.original_deadline),
        )

    console.print(table)

    if result.dynamic_purchasing_systems:
        dps_table = Table(title="Dynamic purchasing systems", show_header=True, header_style="bold magenta")
        dps_table.add_column("ID", justify="right")
        dps_table.add_column("Ref", style="cyan", no_wrap=True)
        dps_table.add_column("Unit")
        dps_table.add_column("Title")
        dps_table.add_column("Deadline", justify="right")

        for dps in result.dynamic_purchasing_systems:
            dps_table.add_row(
                str(dps.id),
                dps.custom_id,
                dps.unit,
                dps.title,
                _format_deadline(dps.original_deadline),
            )

        console.print(dps_table)


@app.command("show")
def show_notice(
    slug: str = typer.Argument(..., help="Company slug"),
    notice_id: int = typer.Argument(..., help="Notice id"),
    language: Optional[Language] = typer.Option(
        None,
        "--language",
        "-l",
        help="Language to render the notice in",
    ),
    format: str = typer.Option(
        "panel",
        "--format",
        "-f",
        help="Output format (panel, json)",
    ),
) -> None:
    """Show a single notice with its attachments. Requires login."""
    config = load_settings()
    username, password = require_credentials(config)

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            company_id, session = await tp.open_session(slug, username, password, language)
            return await tp.get_notice(company_id, notice_id, session)

    try:
        notice = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    if format == "json":
        print_json(notice.to_dict())
        return

    lines = [
        f"[bold]Reference:[/bold] {notice.custom_id}",
        f"[bold]Unit:[/bold] {notice.unit}",
        f"[bold]Authority type:[/bold] {notice.authority_type or '-'}",
        f"[bold]Category:[/bold] {notice.category or '-'}",
        f"[bold]Published:[/bold] {notice.original_published or '-'}",
        f"[bold]Deadline:[/bold] {notice.original_deadline or '-'}",
        f"[bold]Flags:[/bold] {', '.join(notice.flags) or '-'}",
        f"[bold]Types:[/bold] {', '.join(notice.types) or '-'}",
    ]
    if notice.attachments:
        lines.append("")
        lines.append("[bold]Attachments:[/bold]")
        lines.extend(f"  - {a.file_name} [dim]{a.url}[/dim]" for a in notice.attachments)
    if notice.links:
        lines.append("")
        lines.append("[bold]Links:[/bold]")
        lines.extend(f"  - {link}" for link in notice.links)

    console.print(Panel.fit("\n".join(lines), title=f"[bold]{notice.title}[/bold]", border_style="cyan"))
