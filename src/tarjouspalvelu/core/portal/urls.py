"""
Portal URL table.

All portal endpoints in one place, built from the configured base URL.
"""

from __future__ import annotations

from urllib.parse import urlencode

from tarjouspalvelu.core.models import ATTACHMENT_PATH, DEFAULT_BASE_URL


class PortalUrls:
    """Builds portal URLs for a base URL."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def _url(self, path: str, **params: object) -> str:
        url = f"{self.base_url}/{path}"
        if params:
            url += "?" + urlencode(params)
        return url

    # Company routing

    def company_slug(self, slug: str) -> str:
        return self._url(slug)

    def index(self) -> str:
        return self._url("Default/Index")

    def company_image(self, company_id: int) -> str:
        return self._url(f"Default/Image/{company_id}")

    def company_page(self, company_id: int, uuid: str) -> str:
        return self._url("default.aspx", p=company_id, g=uuid)

    def procurement_units(self, procurement_organization_id: int) -> str:
        return self._url(
            "Vahtipalvelu/PalvelukohtainenVahtipalvelu/PalvelunYksikot",
            hankintaorganisaatioId=procurement_organization_id,
        )

    # Notices

    def notices(self, company_id: int, uuid: str) -> str:
        """Notices page, also hosting the login and language forms."""
        return self._url("tarjouspyynnot.aspx", p=company_id, g=uuid)

    def notice_processing(self, company_id: int, uuid: str, notice_id: int) -> str:
        return self._url("Tarjouspalvelu/tpKasittely.aspx", p=company_id, g=uuid, tpID=notice_id)

    def notice_details(self, uuid: str, notice_id: int) -> str:
        return self._url("Tarjouspalvelu/tpReferal.aspx", g=uuid, tpID=notice_id)

    def notice_attachments(self, uuid: str, notice_id: int) -> str:
        return self._url("Tarjouspalvelu/TarjousPyyntoLiitteet.aspx", g=uuid, tpID=notice_id)

    def attachment(self, file_uuid: str) -> str:
        return f"{self.base_url}/{ATTACHMENT_PATH.format(file_uuid=file_uuid)}"

    def all_attachments(self, notice_id: int) -> str:
        return self._url(f"Zip/TarjousPyynnonLiitteet/{notice_id}")

    # Tenders

    def notice_tenders(self, company_id: int, uuid: str, notice_id: int) -> str:
        return self._url("Tarjouspalvelu/TarjouspyynnonTarjoukset.aspx", p=company_id, g=uuid, tpID=notice_id)

    def remove_tender(self) -> str:
        return self._url("TarjousListaukset/PoistaKeskenerainenTarjous")


DEFAULT_URLS = PortalUrls()


def build_attachment_link(file_uuid: str) -> str:
    """Build the download link of a single notice attachment.

    Portal file links are download-only.
    """
    return DEFAULT_URLS.attachment(file_uuid)


def build_all_attachments_link(notice_id: int) -> str:
    """Build the link to a ZIP of every attachment of a notice."""
    return DEFAULT_URLS.all_attachments(notice_id)
