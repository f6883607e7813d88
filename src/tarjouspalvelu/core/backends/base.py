"""
Transport contract for the portal operations.

A backend sends one request and hands back the raw response. It never
follows redirects on its own and never raises for a status code: on this
portal a 302 is often the answer that matters, and reading it is left to
``core.portal.protocol``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class RequestSpec:
    """One portal request."""

    url: str
    method: str = "GET"  # GET, HEAD or POST
    headers: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] | None = None  # urlencoded form fields, POST only
    follow_redirects: bool = False

    # Human readable name of the portal call, used in logs and errors
    operation: str | None = None


@dataclass
class FetchResult:
    """Raw portal response."""

    url: str
    status_code: int
    headers: dict[str, str]
    set_cookies: list[str] = field(default_factory=list)  # every Set-Cookie header, in order
    html: str = ""
    content: bytes = b""

    elapsed_ms: float = 0.0
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        """True for a rendered page (2xx)."""
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        """True for a 3xx answer."""
        return 300 <= self.status_code < 400

    @property
    def location(self) -> str | None:
        """Redirect target, if any."""
        for key, value in self.headers.items():
            if key.lower() == "location":
                return value
        return None


class Backend(ABC):
    """Sends portal requests. Subclasses own their connection resources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in logs."""
        pass

    @abstractmethod
    async def fetch(self, request: RequestSpec) -> FetchResult:
        """Send a request and return whatever the portal answered.

        Args:
            request: Method, URL, headers and form data

        Returns:
            The response, including 3xx and error statuses

        Raises:
            BackendError: When no response was received at all
        """
        pass

    async def close(self) -> None:
        """Release connections. The default backend holds none."""
        pass

    async def __aenter__(self) -> "Backend":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class BackendError(Exception):
    """The transport failed before the portal answered."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class FetchError(BackendError):
    """A request could not be sent or its response not read."""
    pass
