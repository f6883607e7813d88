"""Shared fixtures: a scripted backend and portal page builders."""

from __future__ import annotations

from typing import Callable
from urllib.parse import urlsplit

import pytest

from tarjouspalvelu.core.backends.base import Backend, FetchResult, RequestSpec
from tarjouspalvelu.core.models import Session
from tarjouspalvelu.core.portal.protocol import PortalRequester

BASE_URL = "https://tarjouspalvelu.fi"

Handler = FetchResult | Callable[[RequestSpec], FetchResult]


def page(html: str = "", status: int = 200, set_cookies: list[str] | None = None, content: bytes | None = None) -> FetchResult:
    """Build a rendered page response."""
    return FetchResult(
        url=BASE_URL,
        status_code=status,
        headers={"content-type": "text/html; charset=utf-8"},
        set_cookies=set_cookies or [],
        html=html,
        content=content if content is not None else html.encode("utf-8"),
    )


def redirect(location: str, set_cookies: list[str] | None = None, status: int = 302) -> FetchResult:
    """Build a redirect response."""
    return FetchResult(
        url=BASE_URL,
        status_code=status,
        headers={"location": location},
        set_cookies=set_cookies or [],
    )


class FakeBackend(Backend):
    """Backend answering from a route table keyed by method and path."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[RequestSpec] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    def add(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    async def fetch(self, request: RequestSpec) -> FetchResult:
        self.requests.append(request)
        handler = self.routes.get((request.method.upper(), urlsplit(request.url).path))
        if handler is None:
            return page("not found", status=404)
        if callable(handler):
            return handler(request)
        return handler

    async def close(self) -> None:
        self.closed = True

    def paths(self) -> list[str]:
        return [urlsplit(r.url).path for r in self.requests]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def requester(backend: FakeBackend) -> PortalRequester:
    return PortalRequester(backend)


@pytest.fixture
def anonymous_session() -> Session:
    return Session(uuid="3f1c-uuid", id="sess123")


@pytest.fixture
def authenticated_session(anonymous_session: Session) -> Session:
    return anonymous_session.with_token("token456")


# =============================================================================
# Page builders
# =============================================================================


def culture_script(culture: str = "fi-FI") -> str:
    return (
        '<script type="text/javascript">'
        f'Sys.CultureInfo.__cultureInfo = {{"name":"{culture}","numberFormat":{{}}}};'
        "</script>"
    )


def webforms_page(culture: str = "fi-FI", body: str = "") -> str:
    """A notices page with the hidden WebForms state fields."""
    return f"""
    <html>
    <head>{culture_script(culture)}</head>
    <body>
        <form method="post" action="./tarjouspyynnot.aspx?p=13&amp;g=3f1c-uuid" id="aspnetForm">
            <input type="hidden" name="__VIEWSTATE" id="__VIEWSTATE" value="/wEPDwUKMTY1NDU2MTA1Mg9kFgJmD2QWAgIDD2QWAgIBD2QWAg==" />
            <input type="hidden" name="__EVENTVALIDATION" id="__EVENTVALIDATION" value="/wEdAAWnBo3xZ0nV8tq+Pq8E0Q==" />
            {body}
        </form>
    </body>
    </html>
    """
