"""
High level client for the portal.

Owns the transport backend and exposes every portal operation as a
method. Slug to id resolutions are cached per client, since each one costs
a redirect round trip.
"""

from __future__ import annotations

import logging
from typing import Any

from tarjouspalvelu.core.backends.base import Backend
from tarjouspalvelu.core.backends.http_backend import HttpBackend
from tarjouspalvelu.core.config.models import PortalConfig
from tarjouspalvelu.core.models import Company, Language, Notice, Notices, Session
from tarjouspalvelu.core.portal import companies, notices, session as sessions, tenders
from tarjouspalvelu.core.portal.protocol import PortalRequester
from tarjouspalvelu.core.portal.urls import PortalUrls

logger = logging.getLogger(__name__)


class TarjouspalveluClient:
    """Async client for tarjouspalvelu.fi.

    Example:
        async with TarjouspalveluClient() as tp:
            session = await tp.get_session("helsinki")
            result = await tp.get_notices(13, session)

    Sessions are plain values passed to each call. Using one session from
    several concurrent calls that change it (login, language) is not safe.
    """

    def __init__(
        self,
        config: PortalConfig | None = None,
        backend: Backend | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Portal configuration (default: tarjouspalvelu.fi)
            backend: Transport backend (default: HttpBackend from config)
        """
        self.config = config or PortalConfig()
        self.backend = backend or HttpBackend(
            timeout=self.config.timeout_seconds,
            user_agent=self.config.user_agent,
            default_headers=self.config.default_headers,
        )
        self.urls = PortalUrls(self.config.base_url)
        self.requester = PortalRequester(self.backend, self.urls)
        self._company_ids: dict[str, int] = {}

    async def close(self) -> None:
        await self.backend.close()

    async def __aenter__(self) -> "TarjouspalveluClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # Sessions

    async def company_slug_to_id(self, slug: str) -> int:
        if slug not in self._company_ids:
            self._company_ids[slug] = await sessions.company_slug_to_id(self.requester, slug)
        return self._company_ids[slug]

    async def get_session(self, slug: str) -> Session:
        return await sessions.get_session(self.requester, slug)

    async def login_to_session(
        self,
        company_id: int,
        username: str,
        password: str,
        session: Session,
    ) -> Session:
        return await sessions.login_to_session(self.requester, company_id, username, password, session)

    async def set_session_language(self, company_id: int, language: Language, session: Session) -> Session:
        return await sessions.set_session_language(self.requester, company_id, language, session)

    async def get_session_language(self, company_id: int, session: Session) -> Language:
        return await sessions.get_session_language(self.requester, company_id, session)

    async def open_session(
        self,
        slug: str,
        username: str | None = None,
        password: str | None = None,
        language: Language | None = None,
    ) -> tuple[int, Session]:
        """Resolve a slug and set up a session for it in one go.

        Logs in when credentials are given, and switches the language when
        one is given (or configured).

        Returns:
            Company id of the slug and the ready session
        """
        company_id = await self.company_slug_to_id(slug)
        session = await self.get_session(slug)

        if username and password:
            session = await self.login_to_session(company_id, username, password, session)

        language = language or self.config.language
        if language is not None:
            session = await self.set_session_language(company_id, language, session)

        return company_id, session

    # Companies

    async def get_companies(self) -> list[Company]:
        return await companies.get_companies(self.requester)

    async def get_company_logo(self, company_id: int) -> str:
        return await companies.get_company_logo(self.requester, company_id)

    async def get_company_procurement_organization_id(self, company_id: int, session: Session) -> int:
        return await companies.get_company_procurement_organization_id(self.requester, company_id, session)

    async def get_company_procurement_units(self, procurement_organization_id: int, session: Session) -> list[str]:
        return await companies.get_company_procurement_units(
            self.requester, procurement_organization_id, session
        )

    # Notices

    async def get_notices(self, company_id: int, session: Session) -> Notices:
        return await notices.get_notices(self.requester, company_id, session)

    async def get_notice(self, company_id: int, notice_id: int, session: Session) -> Notice:
        return await notices.get_notice(self.requester, company_id, notice_id, session)

    # Tenders

    async def get_tender_id(self, company_id: int, notice_id: int, session: Session) -> str:
        return await tenders.get_tender_id(self.requester, company_id, notice_id, session)

    async def remove_tender(self, company_id: int, tender_id: str, session: Session) -> None:
        await tenders.remove_tender(self.requester, company_id, tender_id, session)

    # Links

    def build_attachment_link(self, file_uuid: str) -> str:
        return self.urls.attachment(file_uuid)

    def build_all_attachments_link(self, notice_id: int) -> str:
        return self.urls.all_attachments(notice_id)
