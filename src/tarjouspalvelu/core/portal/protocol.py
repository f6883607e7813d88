"""
Redirect-as-signal request helpers.

The portal never answers with structured errors. Whether a call worked is
told only by the status code and the redirect target: a page that should
render redirects when the session is bad, and a form post that should
succeed redirects when it does. This module turns raw responses into
``Page`` or ``Redirect`` values and owns the status code rules.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from tarjouspalvelu.core.backends.base import Backend, FetchResult, RequestSpec
from tarjouspalvelu.core.errors import (
    BadSessionOrExpired,
    PortalRequestFailed,
    TarjouspalveluError,
)
from tarjouspalvelu.core.extract.html import query_param
from tarjouspalvelu.core.portal.urls import PortalUrls

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

CULTURE_COOKIE = re.compile(r"culture=([^&;]+)")


# =============================================================================
# Responses
# =============================================================================


def _cookie_value(set_cookies: list[str], name: str) -> str | None:
    for header in set_cookies:
        pair = header.split(";", 1)[0]
        key, sep, value = pair.partition("=")
        if sep and key.strip() == name:
            return value.strip()
    return None


@dataclass
class Page:
    """A rendered page (2xx response)."""

    url: str
    status_code: int
    html: str
    content: bytes = b""
    set_cookies: list[str] = field(default_factory=list)

    def cookie(self, name: str) -> str | None:
        return _cookie_value(self.set_cookies, name)


@dataclass
class Redirect:
    """A 3xx response."""

    url: str
    status_code: int
    location: str
    set_cookies: list[str] = field(default_factory=list)

    def cookie(self, name: str) -> str | None:
        """Value of a cookie set by the response, by exact name."""
        return _cookie_value(self.set_cookies, name)

    def query_param(self, name: str) -> str | None:
        """Query parameter of the redirect target."""
        return query_param(self.location, name)

    def culture(self) -> str | None:
        """Culture code confirmed by the portal's language cookie."""
        for header in self.set_cookies:
            match = CULTURE_COOKIE.search(header)
            if match:
                return match.group(1)
        return None


Response = Page | Redirect


def classify(result: FetchResult, operation: str) -> Response:
    """Turn a fetch result into a Page or a Redirect.

    Raises:
        PortalRequestFailed: For any status that is neither 2xx nor 3xx
    """
    if result.ok:
        return Page(
            url=result.url,
            status_code=result.status_code,
            html=result.html,
            content=result.content,
            set_cookies=list(result.set_cookies),
        )
    if result.is_redirect:
        return Redirect(
            url=result.url,
            status_code=result.status_code,
            location=result.location or "",
            set_cookies=list(result.set_cookies),
        )
    raise PortalRequestFailed(
        f"Failed to load {operation}, portal answered {result.status_code}",
        url=result.url,
        status_code=result.status_code,
    )


def expect_page(response: Response, operation: str) -> Page:
    """Require a rendered page.

    Raises:
        BadSessionOrExpired: If the portal redirected instead
    """
    if isinstance(response, Redirect):
        raise BadSessionOrExpired(
            f"Failed to load {operation}, bad session?",
            url=response.url,
            status_code=response.status_code,
        )
    return response


def expect_redirect(
    response: Response,
    operation: str,
    failure: type[TarjouspalveluError] = BadSessionOrExpired,
    message: str | None = None,
) -> Redirect:
    """Require a redirect.

    Raises:
        failure: If the portal rendered a page instead
    """
    if isinstance(response, Page):
        raise failure(
            message or f"Failed to {operation}, invalid session?",
            url=response.url,
            status_code=response.status_code,
        )
    return response


# =============================================================================
# Requester
# =============================================================================


class PortalRequester:
    """Sends portal requests through a backend.

    Redirects are never followed so they can be read as signals.
    """

    def __init__(self, backend: Backend, urls: PortalUrls | None = None):
        self.backend = backend
        self.urls = urls or PortalUrls()

    async def _send(self, spec: RequestSpec) -> Response:
        result = await self.backend.fetch(spec)
        logger.debug(
            f"{spec.method} {spec.operation} -> {result.status_code}",
            extra={"url": spec.url, "operation": spec.operation},
        )
        return classify(result, spec.operation or spec.url)

    async def head(self, url: str, *, operation: str) -> Response:
        return await self._send(RequestSpec(url=url, method="HEAD", operation=operation))

    async def get(
        self,
        url: str,
        *,
        operation: str,
        cookie: str | None = None,
    ) -> Response:
        headers = {"Cookie": cookie} if cookie else {}
        return await self._send(RequestSpec(url=url, headers=headers, operation=operation))

    async def get_page(
        self,
        url: str,
        *,
        operation: str,
        cookie: str | None = None,
    ) -> Page:
        """GET a page that must render."""
        return expect_page(await self.get(url, operation=operation, cookie=cookie), operation)

    async def post_form(
        self,
        url: str,
        data: dict[str, Any],
        *,
        operation: str,
        cookie: str | None = None,
    ) -> Response:
        headers = {"Content-Type": FORM_CONTENT_TYPE}
        if cookie:
            headers["Cookie"] = cookie
        return await self._send(
            RequestSpec(url=url, method="POST", headers=headers, data=data, operation=operation)
        )
