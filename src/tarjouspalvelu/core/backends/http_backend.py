"""
The httpx transport behind every portal call.

Redirects are never followed unless a request asks for it, and every
Set-Cookie header of a response is kept. The client's cookie jar is emptied
before each request, so the only cookies sent are the ones a portal
operation puts in the ``Cookie`` header itself.
"""

from __future__ import annotations

import logging
import time

import httpx

from .base import Backend, FetchError, FetchResult, RequestSpec

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

SUPPORTED_METHODS = {"GET", "HEAD", "POST"}


class HttpBackend(Backend):
    """Talks to tarjouspalvelu.fi over one pooled ``httpx.AsyncClient``.

    Transport failures surface as FetchError; nothing is retried.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str | None = None,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            timeout: Request timeout in seconds
            user_agent: Overrides the browser-like default
            default_headers: Extra headers sent with every request
            transport: Optional httpx transport (e.g. a mock transport in tests)
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.transport = transport

        self.default_headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "fi-FI,fi;q=0.9,en;q=0.8",
            **(default_headers or {}),
        }

        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "http"

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Create the client lazily, and again after close()."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=False,
                headers=self.default_headers,
                transport=self.transport,
                limits=httpx.Limits(
                    max_connections=10,
                    max_keepalive_connections=5,
                ),
            )
        return self._client

    async def fetch(self, request: RequestSpec) -> FetchResult:
        """Send one portal request.

        Args:
            request: Method, URL, headers and form data

        Returns:
            The response, 3xx and error statuses included
        """
        method = request.method.upper()
        if method not in SUPPORTED_METHODS:
            raise FetchError(f"Unsupported method: {request.method}", url=request.url)

        client = await self._ensure_client()
        # Clear the client jar so only the explicit session cookies are sent
        client.cookies.clear()

        logger.debug(
            f"{method} {request.url}",
            extra={"url": request.url, "operation": request.operation},
        )

        start = time.perf_counter()
        try:
            response = await client.request(
                method,
                request.url,
                headers=request.headers,
                data=request.data if method == "POST" else None,
                follow_redirects=request.follow_redirects,
            )
        except httpx.HTTPError as e:
            raise FetchError(
                f"Transport error: {e}",
                url=request.url,
                cause=e,
            ) from e
        elapsed_ms = (time.perf_counter() - start) * 1000

        content = response.content
        return FetchResult(
            url=str(response.url),
            status_code=response.status_code,
            headers=dict(response.headers),
            set_cookies=response.headers.get_list("set-cookie"),
            html=response.text if method != "HEAD" else "",
            content=content,
            elapsed_ms=elapsed_ms,
        )

    async def close(self) -> None:
        """Drop pooled connections."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
