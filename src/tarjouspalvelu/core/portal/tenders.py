"""
Tenders in progress.

A tender is only addressable while it is being prepared: its id is read
from the notice's tenders page and then used to remove it.
"""

from __future__ import annotations

import logging

from tarjouspalvelu.core.errors import (
    NoTenderInProgress,
    PortalRequestFailed,
    TenderRemovalFailed,
)
from tarjouspalvelu.core.extract import schemas
from tarjouspalvelu.core.extract.html import first_attr, parse_html, query_param
from tarjouspalvelu.core.models import Session
from tarjouspalvelu.core.portal.protocol import PortalRequester, expect_page

logger = logging.getLogger(__name__)

# Marker the removal endpoint embeds in an otherwise successful response
REMOVAL_ERROR_MARKER = '{"error":true}'


def parse_tender_id(html: str) -> str:
    """Read the id of the tender in progress from a tenders page.

    Raises:
        NoTenderInProgress: If the page has no tender to modify
    """
    href = first_attr(parse_html(html), schemas.TENDER_MODIFY_LINK, "href")
    tender_id = query_param(href, schemas.TENDER_ID_PARAM)
    if not tender_id:
        raise NoTenderInProgress("No tenders in progress found")
    return tender_id


async def get_tender_id(
    requester: PortalRequester,
    company_id: int,
    notice_id: int,
    session: Session,
) -> str:
    """Get the id of the tender in progress for a notice.

    Requires a logged in session.
    """
    page = await requester.get_page(
        requester.urls.notice_tenders(company_id, session.uuid, notice_id),
        operation="the tenders of the notice",
        cookie=session.cookie_header(with_token=True),
    )
    return parse_tender_id(page.html)


async def remove_tender(
    requester: PortalRequester,
    company_id: int,
    tender_id: str,
    session: Session,
) -> None:
    """Remove a tender in progress from the account's open tenders.

    Raises:
        BadSessionOrExpired: If the portal redirected instead of answering
        TenderRemovalFailed: If the portal did not accept the removal
    """
    try:
        response = await requester.post_form(
            requester.urls.remove_tender(),
            {"tarjousid": tender_id, "palvelu": company_id},
            operation="remove tender",
            cookie=session.cookie_header(with_token=True),
        )
    except PortalRequestFailed as e:
        raise TenderRemovalFailed(
            "Error removing tender",
            url=e.url,
            status_code=e.status_code,
        ) from e

    page = expect_page(response, "remove tender")

    # A 200 does not mean success, the body carries the error flag
    if REMOVAL_ERROR_MARKER in page.html.replace(" ", ""):
        raise TenderRemovalFailed(
            "Error removing tender",
            url=page.url,
            status_code=page.status_code,
        )

    logger.info("Removed tender in progress", extra={"company_id": company_id})
