"""Portal operations: sessions, companies, notices and tenders."""

from .companies import (
    get_companies,
    get_company_logo,
    get_company_procurement_organization_id,
    get_company_procurement_units,
    parse_companies,
)
from .notices import get_notice, get_notices, parse_notice_detail, parse_notices
from .protocol import Page, PortalRequester, Redirect
from .session import (
    company_slug_to_id,
    get_session,
    get_session_language,
    login_to_session,
    set_session_language,
)
from .tenders import get_tender_id, remove_tender
from .urls import PortalUrls, build_all_attachments_link, build_attachment_link

__all__ = [
    "get_companies",
    "get_company_logo",
    "get_company_procurement_organization_id",
    "get_company_procurement_units",
    "parse_companies",
    "get_notice",
    "get_notices",
    "parse_notice_detail",
    "parse_notices",
    "Page",
    "PortalRequester",
    "Redirect",
    "company_slug_to_id",
    "get_session",
    "get_session_language",
    "login_to_session",
    "set_session_language",
    "get_tender_id",
    "remove_tender",
    "PortalUrls",
    "build_all_attachments_link",
    "build_attachment_link",
]
