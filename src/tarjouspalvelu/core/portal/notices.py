"""
Notice listing and notice detail extraction.

The notices page of a company holds two tables: dynamic purchasing systems
and regular notices. A single notice is spread over three pages that must
be loaded in order: the processing page binds the notice to the session,
and only then do the details and attachments pages show it.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from tarjouspalvelu.core.errors import RequiredFieldMissing
from tarjouspalvelu.core.extract import schemas
from tarjouspalvelu.core.extract.html import (
    HtmlElement,
    decode_flags,
    element_text,
    has_class,
    inner_html,
    int_query_param,
    parse_html,
    query_param,
    required_text,
    select,
    select_one,
    style_property,
    table_rows,
)
from tarjouspalvelu.core.extract.schemas import DPS_ROW, NOTICE_ROW, RowReader
from tarjouspalvelu.core.models import (
    DynamicPurchasingSystem,
    Language,
    Notice,
    NoticeAttachment,
    Notices,
    Session,
)
from tarjouspalvelu.core.normalize.parsing import (
    match_locale,
    parse_localized_date,
    strip_timezone_annotation,
)
from tarjouspalvelu.core.portal.protocol import PortalRequester

logger = logging.getLogger(__name__)

# Only rendered once the processing page has bound the notice to the session
REQUIRED_DETAIL_FIELDS = ("custom_id", "unit", "title")


# =============================================================================
# Field Helpers
# =============================================================================


def parse_deadline(text: str, locale: Language) -> tuple[datetime | None, str | None]:
    """Parse a deadline cell into a (datetime, raw text) pair.

    Both are None when the notice has no deadline.
    """
    raw = strip_timezone_annotation(text)
    if not raw:
        return None, None
    return parse_localized_date(raw, locale), raw


def normalize_title(title: str, *prefixes: str) -> str:
    """Remove the redundant "<unit> / " prefix the listing adds to titles."""
    for prefix in prefixes:
        if prefix and title.startswith(f"{prefix} / "):
            return title[len(prefix) + 3:].strip()
    return title


def remove_correction_marker(description: str, marker: str) -> str:
    """Remove the correction notice text from a description."""
    if not marker:
        return description.strip()
    return description.replace(marker, "", 1).strip()


def _link_id(cell: HtmlElement, entity: str) -> int:
    link = select_one(cell, "a")
    href = link.get("href") if link is not None else None
    return int_query_param(href, schemas.NOTICE_ID_PARAM, f"{entity} id")


# =============================================================================
# Notices Page
# =============================================================================


def parse_dps_row(row: HtmlElement, locale: Language) -> DynamicPurchasingSystem:
    """Extract a dynamic purchasing system from its table row."""
    cells = RowReader(row, DPS_ROW, "dynamic purchasing system")

    description_cell = cells.cell("description")
    short_description = element_text(description_cell)
    is_being_corrected = has_class(select_one(description_cell, "div"), schemas.DPS_CORRECTION_MARKER)

    additional_desc = None
    if is_being_corrected:
        marker = "".join(
            element.text_content()
            for element in select(description_cell, f".{schemas.DPS_CORRECTION_MARKER}")
        ).strip()
        additional_desc = remove_correction_marker(short_description, marker)

    deadline, original_deadline = parse_deadline(cells.text("deadline"), locale)

    return DynamicPurchasingSystem(
        id=_link_id(cells.cell("link"), "dynamic purchasing system"),
        custom_id=cells.text("custom_id"),
        unit=cells.text("unit"),
        title=cells.text("title"),
        short_description=short_description,
        is_being_corrected=is_being_corrected,
        additional_desc=additional_desc,
        deadline=deadline,
        original_deadline=original_deadline,
    )


def parse_notice_row(row: HtmlElement, locale: Language) -> Notice:
    """Extract a notice from its table row."""
    cells = RowReader(row, NOTICE_ROW, "notice")

    custom_id = cells.text("custom_id")
    unit = cells.text("unit")

    title_cell = cells.cell("title")
    title = "".join(link.text_content() for link in select(title_cell, "a")).strip()

    description_spans = select(cells.cell("description"), "span")
    short_description = "".join(span.text_content() for span in description_spans).strip()
    color = style_property(description_spans[0], "color") if description_spans else None

    deadline, original_deadline = parse_deadline(cells.text("deadline"), locale)

    return Notice(
        id=_link_id(cells.cell("link"), "notice"),
        custom_id=custom_id,
        unit=unit,
        flags=decode_flags(select(title_cell, "img")),
        title=normalize_title(title, unit, custom_id),
        types=[span.text_content() for span in select(title_cell, "span")],
        short_description=short_description,
        is_being_corrected=color == schemas.NOTICE_CORRECTION_COLOR,
        deadline=deadline,
        original_deadline=original_deadline,
    )


def parse_notices(html: str) -> Notices:
    """Extract the dynamic purchasing systems and notices of a notices page.

    One malformed row fails the whole page.
    """
    locale = match_locale(html)
    tree = parse_html(html)

    return Notices(
        dynamic_purchasing_systems=[
            parse_dps_row(row, locale) for row in table_rows(tree, schemas.DPS_TABLE)
        ],
        notices=[
            parse_notice_row(row, locale) for row in table_rows(tree, schemas.NOTICE_TABLE)
        ],
        language=locale,
    )


async def get_notices(
    requester: PortalRequester,
    company_id: int,
    session: Session,
) -> Notices:
    """Get the open dynamic purchasing systems and notices of a company.

    Supplier registers are not included. The session does not have to be
    logged in.
    """
    page = await requester.get_page(
        requester.urls.notices(company_id, session.uuid),
        operation="notices",
        cookie=session.cookie_header(with_token=session.is_authenticated),
    )
    notices = parse_notices(page.html)
    logger.info(
        f"Found {len(notices.notices)} notices and "
        f"{len(notices.dynamic_purchasing_systems)} dynamic purchasing systems",
        extra={"company_id": company_id, "language": notices.language.value},
    )
    return notices


# =============================================================================
# Notice Detail
# =============================================================================


def parse_attachment(link: HtmlElement) -> NoticeAttachment:
    href = link.get("href") or ""
    if href.startswith(schemas.ATTACHMENT_DOWNLOAD_PREFIX):
        file_uuid = href[len(schemas.ATTACHMENT_DOWNLOAD_PREFIX):]
    else:
        file_uuid = query_param(href, "id") or ""
    if not file_uuid:
        raise RequiredFieldMissing("attachment uuid")
    return NoticeAttachment(file_name=element_text(link), file_uuid=file_uuid)


def parse_notice_detail(
    notice_id: int,
    processing_html: str,
    details_html: str,
    attachments_html: str,
) -> Notice:
    """Join the three notice pages into one notice.

    Flags and type tags come from the processing page, attachments and
    links from the attachments page, everything else from the details page.

    Raises:
        RequiredFieldMissing: If the details page does not show the notice
    """
    locale = match_locale(processing_html)
    processing = parse_html(processing_html)
    details = parse_html(details_html)
    attachments = parse_html(attachments_html)

    def detail_text(field: str) -> str:
        if field in REQUIRED_DETAIL_FIELDS:
            return required_text(details, schemas.DETAIL_FIELDS[field], field)
        return element_text(select_one(details, schemas.DETAIL_FIELDS[field]))

    original_published = detail_text("published") or None
    published = parse_localized_date(original_published, locale) if original_published else None

    # The deadline element exists even when there is no deadline
    deadline, original_deadline = parse_deadline(detail_text("deadline"), locale)

    return Notice(
        id=notice_id,
        custom_id=detail_text("custom_id"),
        unit=detail_text("unit"),
        title=detail_text("title"),
        flags=decode_flags(select(processing, schemas.PROCESSING_FLAG_ICONS)),
        types=[span.text_content() for span in select(processing, schemas.PROCESSING_TYPE_TAGS)],
        published=published,
        original_published=original_published,
        deadline=deadline,
        original_deadline=original_deadline,
        description=inner_html(select_one(details, schemas.DETAIL_FIELDS["description"])),
        authority_type=detail_text("authority_type"),
        category=detail_text("category"),
        attachments=[parse_attachment(link) for link in select(attachments, schemas.ATTACHMENT_LINKS)],
        links=[
            link.get("href")
            for link in select(attachments, schemas.EXTERNAL_LINKS)
            if link.get("href")
        ],
    )


async def get_notice(
    requester: PortalRequester,
    company_id: int,
    notice_id: int,
    session: Session,
) -> Notice:
    """Get a single notice with its details and attachments.

    Requires a logged in session.
    """
    cookie = session.cookie_header(with_token=True)

    # Binds the notice to the session, the other two pages depend on it
    processing = await requester.get_page(
        requester.urls.notice_processing(company_id, session.uuid, notice_id),
        operation="notice",
        cookie=cookie,
    )

    details_task = asyncio.ensure_future(
        requester.get_page(
            requester.urls.notice_details(session.uuid, notice_id),
            operation="notice",
            cookie=cookie,
        )
    )
    attachments_task = asyncio.ensure_future(
        requester.get_page(
            requester.urls.notice_attachments(session.uuid, notice_id),
            operation="notice",
            cookie=cookie,
        )
    )
    tasks = (details_task, attachments_task)
    try:
        details, attachments = await asyncio.gather(*tasks)
    except BaseException:
        # The first failure wins, the other request is abandoned
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    logger.debug(f"Loaded notice {notice_id}", extra={"company_id": company_id, "notice_id": notice_id})
    return parse_notice_detail(notice_id, processing.html, details.html, attachments.html)
