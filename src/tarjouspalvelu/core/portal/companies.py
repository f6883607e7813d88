"""
Company listing and company level lookups.
"""

from __future__ import annotations

import base64
import logging
from urllib.parse import urlsplit

from tarjouspalvelu.core.errors import RequiredFieldMissing
from tarjouspalvelu.core.extract import schemas
from tarjouspalvelu.core.extract.html import (
    HtmlElement,
    element_text,
    parse_html,
    required_attr,
    select,
    select_one,
    strip_prefix,
)
from tarjouspalvelu.core.models import SESSION_TOKEN_COOKIE, Company, Session
from tarjouspalvelu.core.portal.protocol import PortalRequester

logger = logging.getLogger(__name__)


# =============================================================================
# Company Listing
# =============================================================================


def is_company_cell(cell: HtmlElement) -> bool:
    """Check if an index page cell holds a company.

    Cells without a style, or spanning columns, only exist for layout.
    """
    return bool(cell.get("style")) and cell.get("colspan") is None


def parse_company_cell(cell: HtmlElement) -> Company:
    """Extract one company from an index page cell."""
    image = select_one(cell, "img")
    src = image.get("src") if image is not None else None
    raw_id = strip_prefix(urlsplit(src).path if src else None, schemas.COMPANY_IMAGE_PATH, "company id")
    if not raw_id.isdigit():
        raise RequiredFieldMissing("company id")

    link = select_one(cell, "a")
    href = link.get("href") if link is not None else None
    slug = urlsplit(href).path.strip("/") if href else ""
    if not slug:
        raise RequiredFieldMissing("company slug")

    return Company(
        id=int(raw_id),
        slug=slug,
        name=element_text(select_one(cell, "p")),
    )


def parse_companies(html: str) -> list[Company]:
    """Extract every company listed on the portal index page."""
    tree = parse_html(html)
    return [
        parse_company_cell(cell)
        for cell in select(tree, schemas.COMPANY_CELLS)
        if is_company_cell(cell)
    ]


async def get_companies(requester: PortalRequester) -> list[Company]:
    """Get the companies listed on the portal index page.

    Companies missing from the index page are not included.
    """
    page = await requester.get_page(requester.urls.index(), operation="companies")
    companies = parse_companies(page.html)
    logger.info(f"Found {len(companies)} companies")
    return companies


async def get_company_logo(requester: PortalRequester, company_id: int) -> str:
    """Get the logo of a company as a Base64 string."""
    page = await requester.get_page(
        requester.urls.company_image(company_id),
        operation="company logo",
    )
    if not page.content:
        raise RequiredFieldMissing("company logo")
    return base64.b64encode(page.content).decode("ascii")


# =============================================================================
# Procurement Organization
# =============================================================================


def parse_procurement_organization_id(html: str) -> int:
    """Read the procurement organization id from a company page."""
    value = required_attr(
        parse_html(html),
        schemas.PROCUREMENT_ORGANIZATION_INPUT,
        "value",
        "procurement organization id",
    )
    if not value.strip().isdigit():
        raise RequiredFieldMissing("procurement organization id")
    return int(value)


async def get_company_procurement_organization_id(
    requester: PortalRequester,
    company_id: int,
    session: Session,
) -> int:
    """Get the procurement organization id of a company.

    The procurement organization id is a separate identifier from the
    company id, used by the watch service pages.
    """
    page = await requester.get_page(
        requester.urls.company_page(company_id, session.uuid),
        operation="company page",
        cookie=session.cookie_header(),
    )
    return parse_procurement_organization_id(page.html)


async def get_company_procurement_units(
    requester: PortalRequester,
    procurement_organization_id: int,
    session: Session,
) -> list[str]:
    """Get the procurement unit names of a procurement organization.

    Requires a logged in session.
    """
    page = await requester.get_page(
        requester.urls.procurement_units(procurement_organization_id),
        operation="procurement units",
        cookie=f"{SESSION_TOKEN_COOKIE}={session.token or ''};",
    )
    tree = parse_html(page.html)
    return [span.text_content() for span in select(tree, "span")]
