"""
Company commands.
"""

from __future__ import annotations

import asyncio
import base64
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from tarjouspalvelu.client import TarjouspalveluClient

from ._shared import PORTAL_ERRORS, console, fail, load_settings, print_json, require_credentials

app = typer.Typer(
    help="List companies and resolve company slugs",
    no_args_is_help=True,
)


@app.command("list")
def list_companies(
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
) -> None:
    """List the companies shown on the portal front page."""
    config = load_settings()

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            return await tp.get_companies()

    try:
        companies = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    if format == "json":
        print_json([c.to_dict() for c in companies])
        return

    table = Table(title="Companies", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", justify="right")
    table.add_column("Slug", style="cyan", no_wrap=True)
    table.add_column("Name")

    for i, company in enumerate(companies, start=1):
        table.add_row(str(i), str(company.id), company.slug, company.name)

    console.print(table)


@app.command("resolve")
def resolve_slug(
    slug: str = typer.Argument(..., help="Company slug, e.g. helsinki"),
) -> None:
    """Resolve a company slug to its numeric id."""
    config = load_settings()

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            company_id = await tp.company_slug_to_id(slug)
            session = await tp.get_session(slug)
            organization_id = await tp.get_company_procurement_organization_id(company_id, session)
            return company_id, organization_id

    try:
        company_id, organization_id = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    console.print(f"[cyan]{slug}[/cyan] -> company [bold]{company_id}[/bold], "
                  f"procurement organization [bold]{organization_id}[/bold]")


@app.command("logo")
def save_logo(
    company_id: int = typer.Argument(..., help="Company id"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="File to write the image to (default: print Base64)",
    ),
) -> None:
    """Download the logo of a company."""
    config = load_settings()

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            return await tp.get_company_logo(company_id)

    try:
        logo = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    if output is None:
        console.print(logo, soft_wrap=True)
        return

    output.write_bytes(base64.b64decode(logo))
    console.print(f"[green]Wrote[/green] {output}")


@app.command("units")
def list_units(
    slug: str = typer.Argument(..., help="Company slug"),
    organization_id: Optional[int] = typer.Option(
        None,
        "--organization",
        help="Procurement organization id (default: looked up from the slug)",
    ),
) -> None:
    """List the procurement units of a company. Requires login."""
    config = load_settings()
    username, password = require_credentials(config)

    async def _run():
        async with TarjouspalveluClient(config.portal) as tp:
            company_id, session = await tp.open_session(slug, username, password)
            org_id = organization_id
            if org_id is None:
                org_id = await tp.get_company_procurement_organization_id(company_id, session)
            return await tp.get_company_procurement_units(org_id, session)

    try:
        units = asyncio.run(_run())
    except PORTAL_ERRORS as e:
        fail(e)

    for unit in units:
        console.print(unit)
