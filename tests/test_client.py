"""Tests for the high level client."""

import pytest

from tarjouspalvelu import TarjouspalveluClient
from tarjouspalvelu.core.config.models import PortalConfig
from tarjouspalvelu.core.models import Language, NoticeAttachment
from tarjouspalvelu.core.portal.urls import build_attachment_link

from .conftest import page, redirect, webforms_page

SLUG_REDIRECT = redirect(
    "/tarjouspyynnot.aspx?p=13&g=3f1c-uuid",
    set_cookies=["ASP.NET_SessionId_TP=sess123; path=/"],
)


@pytest.fixture
def client(backend):
    return TarjouspalveluClient(backend=backend)


class TestTarjouspalveluClient:
    @pytest.mark.asyncio
    async def test_slug_ids_are_cached(self, backend, client):
        backend.add("HEAD", "/helsinki", SLUG_REDIRECT)

        assert await client.company_slug_to_id("helsinki") == 13
        assert await client.company_slug_to_id("helsinki") == 13
        assert len(backend.requests) == 1

    @pytest.mark.asyncio
    async def test_open_anonymous_session(self, backend, client):
        backend.add("HEAD", "/helsinki", SLUG_REDIRECT)

        company_id, session = await client.open_session("helsinki")

        assert company_id == 13
        assert session.id == "sess123"
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_open_session_logs_in_and_sets_language(self, backend, client):
        def on_post(request):
            if "__EVENTTARGET" in request.data:
                return redirect("/", set_cookies=["tarjouspalvelu.fi=culture=en-GB&Expires=x; path=/"])
            return redirect("/", set_cookies=["TarjPalv=token456; path=/"])

        backend.add("HEAD", "/helsinki", SLUG_REDIRECT)
        backend.add("GET", "/tarjouspyynnot.aspx", page(webforms_page()))
        backend.add("POST", "/tarjouspyynnot.aspx", on_post)

        company_id, session = await client.open_session("helsinki", "user", "pass", Language.EN)

        assert company_id == 13
        assert session.token == "token456"
        posts = [r for r in backend.requests if r.method == "POST"]
        assert len(posts) == 2
        assert "ctl00$header$LoginView1$LoginCtrl$UserName" in posts[0].data
        assert posts[1].data["__EVENTTARGET"] == "ctl00$header$Kieli_enGB"

    @pytest.mark.asyncio
    async def test_configured_language(self, backend):
        client = TarjouspalveluClient(PortalConfig(language=Language.SV), backend=backend)
        backend.add("HEAD", "/helsinki", SLUG_REDIRECT)
        backend.add("GET", "/tarjouspyynnot.aspx", page(webforms_page()))
        backend.add("POST", "/tarjouspyynnot.aspx", redirect("/", set_cookies=["x=culture=sv-SE&Expires=y"]))

        await client.open_session("helsinki")

        assert backend.requests[-1].data["__EVENTTARGET"] == "ctl00$header$Kieli_svSE"

    @pytest.mark.asyncio
    async def test_custom_base_url(self, backend):
        client = TarjouspalveluClient(PortalConfig(base_url="https://test.tarjouspalvelu.fi/"), backend=backend)
        backend.add("HEAD", "/helsinki", SLUG_REDIRECT)

        await client.company_slug_to_id("helsinki")

        assert backend.requests[0].url == "https://test.tarjouspalvelu.fi/helsinki"
        assert client.build_all_attachments_link(502) == (
            "https://test.tarjouspalvelu.fi/Zip/TarjousPyynnonLiitteet/502"
        )

    @pytest.mark.asyncio
    async def test_context_manager_closes_backend(self, backend):
        async with TarjouspalveluClient(backend=backend):
            pass

        assert backend.closed

    def test_link_builders(self, client):
        assert client.build_attachment_link("9b2e-44") == (
            "https://tarjouspalvelu.fi/Document/Open/?fileType=TarjPyynTied&id=9b2e-44"
        )
        assert client.build_all_attachments_link(502) == (
            "https://tarjouspalvelu.fi/Zip/TarjousPyynnonLiitteet/502"
        )

    def test_attachment_url_matches_link_builder(self, client):
        attachment = NoticeAttachment(file_name="Liite 1.xlsx", file_uuid="c0ff-ee")

        assert attachment.url == client.build_attachment_link("c0ff-ee")
        assert attachment.url == build_attachment_link("c0ff-ee")
