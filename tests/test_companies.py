"""Tests for the company listing and company lookups."""

import base64

import pytest

from tarjouspalvelu.core.errors import BadSessionOrExpired, RequiredFieldMissing
from tarjouspalvelu.core.models import Company
from tarjouspalvelu.core.portal.companies import (
    get_companies,
    get_company_logo,
    get_company_procurement_organization_id,
    get_company_procurement_units,
    parse_companies,
    parse_procurement_organization_id,
)

from .conftest import page, redirect

INDEX_HTML = """
<html>
<body>
    <table class="yritykset">
        <tr>
            <td colspan="3" style="text-align:center">Valitse organisaatio</td>
        </tr>
        <tr>
            <td>&nbsp;</td>
            <td style="width:33%">
                <a href="https://tarjouspalvelu.fi/acme"><img src="/Default/Image/42" alt="" /></a>
                <p>Acme Oy</p>
            </td>
            <td style="width:33%">
                <a href="https://tarjouspalvelu.fi/helsinki"><img src="/Default/Image/13" alt="" /></a>
                <p> Helsingin kaupunki </p>
            </td>
        </tr>
    </table>
</body>
</html>
"""

COMPANY_PAGE_HTML = """
<html>
<body>
    <form id="aspnetForm">
        <input type="hidden" name="ctl00$PageContent$HankOrgIdHidden" id="ctl00_PageContent_HankOrgIdHidden" value="14" />
    </form>
</body>
</html>
"""


class TestParseCompanies:
    def test_skips_layout_cells(self):
        companies = parse_companies(INDEX_HTML)

        assert companies == [
            Company(id=42, slug="acme", name="Acme Oy"),
            Company(id=13, slug="helsinki", name="Helsingin kaupunki"),
        ]

    def test_empty_listing(self):
        assert parse_companies("<html><body><p>Huoltokatko</p></body></html>") == []

    def test_cell_without_image_fails(self):
        html = '<table><tr><td style="width:33%"><a href="https://tarjouspalvelu.fi/acme"></a><p>Acme</p></td></tr></table>'
        with pytest.raises(RequiredFieldMissing, match="company id"):
            parse_companies(html)

    def test_cell_without_link_fails(self):
        html = '<table><tr><td style="width:33%"><img src="/Default/Image/42"><p>Acme</p></td></tr></table>'
        with pytest.raises(RequiredFieldMissing, match="company slug"):
            parse_companies(html)


class TestGetCompanies:
    @pytest.mark.asyncio
    async def test_loads_index_page(self, backend, requester):
        backend.add("GET", "/Default/Index", page(INDEX_HTML))

        companies = await get_companies(requester)

        assert [c.slug for c in companies] == ["acme", "helsinki"]

    @pytest.mark.asyncio
    async def test_logo_is_base64(self, backend, requester):
        image = b"\x89PNG\r\n\x1a\nlogo"
        backend.add("GET", "/Default/Image/42", page(content=image))

        logo = await get_company_logo(requester, 42)

        assert base64.b64decode(logo) == image


class TestProcurementOrganization:
    def test_parse(self):
        assert parse_procurement_organization_id(COMPANY_PAGE_HTML) == 14

    def test_missing_input(self):
        with pytest.raises(RequiredFieldMissing):
            parse_procurement_organization_id("<html><body></body></html>")

    @pytest.mark.asyncio
    async def test_lookup_sends_session_cookie(self, backend, requester, anonymous_session):
        backend.add("GET", "/default.aspx", page(COMPANY_PAGE_HTML))

        organization_id = await get_company_procurement_organization_id(requester, 13, anonymous_session)

        assert organization_id == 14
        request = backend.requests[0]
        assert "p=13" in request.url
        assert "g=3f1c-uuid" in request.url
        assert request.headers["Cookie"] == "ASP.NET_SessionId_TP=sess123;"

    @pytest.mark.asyncio
    async def test_lookup_with_bad_session(self, backend, requester, anonymous_session):
        backend.add("GET", "/default.aspx", redirect("/Default/Index"))

        with pytest.raises(BadSessionOrExpired):
            await get_company_procurement_organization_id(requester, 13, anonymous_session)


class TestProcurementUnits:
    @pytest.mark.asyncio
    async def test_lists_unit_names(self, backend, requester, authenticated_session):
        backend.add(
            "GET",
            "/Vahtipalvelu/PalvelukohtainenVahtipalvelu/PalvelunYksikot",
            page("<div><span>Kasvatuksen toimiala</span><span>Kaupunkiympäristö</span></div>"),
        )

        units = await get_company_procurement_units(requester, 14, authenticated_session)

        assert units == ["Kasvatuksen toimiala", "Kaupunkiympäristö"]
        request = backend.requests[0]
        assert "hankintaorganisaatioId=14" in request.url
        assert request.headers["Cookie"] == "TarjPalv=token456;"
