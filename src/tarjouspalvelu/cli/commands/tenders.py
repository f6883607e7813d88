"""
Commands for tenders in progress.
"""

from __future__ import annotations

import asyncio

import typer

from tarjouspalvelu.client import TarjouspalveluClient

from ._shared import PORTAL_ERRORS, console, fail, load_settings, require_credentials

app = typer.Typer(
    help="Manage tenders in progress",
    no_args_is_help=True,
)


@app.command("remove")
def remove_tender(
    slug: str = typer.Argument(..., help="Company slug"),
    notice_id: int = typer.Argument(..., help="Notice the tender was started for"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Do not ask for confirmation",
    ),
) -> None:
    """Remove the tender in progress of a notice. Requires login."""
    config = load_settings()
    username, password = require_credentials(config)

    if not yes:
        typer.confirm(f"Remove the tender in progress for notice {notice_id}?", abort=True)

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            company_id, session = await tp.open_session(slug, username, password)
            tender_id = await tp.get_tender_id(company_id, notice_id, session)
            await tp.remove_tender(company_id, tender_id, session)
            return tender_id

    try:
        tender_id = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    console.print(f"[green]Removed tender[/green] {tender_id}")
