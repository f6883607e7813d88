"""Tests for tenders in progress."""

import pytest

from tarjouspalvelu.core.errors import BadSessionOrExpired, NoTenderInProgress, TenderRemovalFailed
from tarjouspalvelu.core.portal.tenders import get_tender_id, parse_tender_id, remove_tender

from .conftest import page, redirect

TENDERS_HTML = """
<html>
<body>
    <table id="ctl00_PageContent_GridView1">
        <tr><th>Tarjous</th><th></th></tr>
        <tr>
            <td>Keskeneräinen</td>
            <td><a id="ctl00_PageContent_GridView1_ctl02_hlModify"
                   href="TarjouksenMuokkaus.aspx?p=13&amp;tpID=502&amp;tarjID=88123">Muokkaa</a></td>
        </tr>
    </table>
</body>
</html>
"""

NO_TENDERS_HTML = """
<html>
<body>
    <table id="ctl00_PageContent_GridView1">
        <tr><th>Tarjous</th></tr>
    </table>
</body>
</html>
"""


class TestParseTenderId:
    def test_reads_tender_id(self):
        assert parse_tender_id(TENDERS_HTML) == "88123"

    def test_no_tender(self):
        with pytest.raises(NoTenderInProgress):
            parse_tender_id(NO_TENDERS_HTML)

    def test_modify_link_without_tender_id(self):
        with pytest.raises(NoTenderInProgress):
            parse_tender_id(TENDERS_HTML.replace("&amp;tarjID=88123", ""))


class TestGetTenderId:
    @pytest.mark.asyncio
    async def test_loads_tenders_page(self, backend, requester, authenticated_session):
        backend.add("GET", "/Tarjouspalvelu/TarjouspyynnonTarjoukset.aspx", page(TENDERS_HTML))

        assert await get_tender_id(requester, 13, 502, authenticated_session) == "88123"

        request = backend.requests[0]
        assert "tpID=502" in request.url
        assert request.headers["Cookie"] == "ASP.NET_SessionId_TP=sess123; TarjPalv=token456;"

    @pytest.mark.asyncio
    async def test_bad_session(self, backend, requester, authenticated_session):
        backend.add("GET", "/Tarjouspalvelu/TarjouspyynnonTarjoukset.aspx", redirect("/Default/Index"))

        with pytest.raises(BadSessionOrExpired):
            await get_tender_id(requester, 13, 502, authenticated_session)


class TestRemoveTender:
    PATH = "/TarjousListaukset/PoistaKeskenerainenTarjous"

    @pytest.mark.asyncio
    async def test_removed(self, backend, requester, authenticated_session):
        backend.add("POST", self.PATH, page('{"error":false}'))

        await remove_tender(requester, 13, "88123", authenticated_session)

        request = backend.requests[0]
        assert request.data == {"tarjousid": "88123", "palvelu": 13}
        assert request.headers["Cookie"] == "ASP.NET_SessionId_TP=sess123; TarjPalv=token456;"

    @pytest.mark.asyncio
    async def test_error_flag_in_body(self, backend, requester, authenticated_session):
        backend.add("POST", self.PATH, page('{ "error": true }'))

        with pytest.raises(TenderRemovalFailed):
            await remove_tender(requester, 13, "88123", authenticated_session)

    @pytest.mark.asyncio
    async def test_redirect_means_bad_session(self, backend, requester, authenticated_session):
        backend.add("POST", self.PATH, redirect("/Default/Index"))

        with pytest.raises(BadSessionOrExpired):
            await remove_tender(requester, 13, "88123", authenticated_session)

    @pytest.mark.asyncio
    async def test_server_error(self, backend, requester, authenticated_session):
        backend.add("POST", self.PATH, page("Server Error", status=500))

        with pytest.raises(TenderRemovalFailed) as exc_info:
            await remove_tender(requester, 13, "88123", authenticated_session)

        assert exc_info.value.status_code == 500
