"""
Domain records returned by the portal operations.

Sessions are immutable values: logging in returns a new, authenticated
session instead of filling in the anonymous one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any


DEFAULT_BASE_URL = "https://tarjouspalvelu.fi"

# Download path of a single notice attachment, relative to the base URL
ATTACHMENT_PATH = "Document/Open/?fileType=TarjPyynTied&id={file_uuid}"


class Language(str, Enum):
    """Languages the portal can be browsed in."""

    FI = "fi-FI"
    SV = "sv-SE"
    EN = "en-GB"
    DA = "da-DK"


# =============================================================================
# Session
# =============================================================================


SESSION_ID_COOKIE = "ASP.NET_SessionId_TP"
SESSION_TOKEN_COOKIE = "TarjPalv"


@dataclass(frozen=True)
class Session:
    """Portal session handle.

    ``uuid`` and ``id`` identify an anonymous browsing session bound to the
    company it was acquired from. ``token`` is only present after a
    successful login and works across companies.
    """

    uuid: str
    id: str
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the session carries a login token."""
        return bool(self.token)

    def with_token(self, token: str) -> "Session":
        """Escalate to an authenticated session."""
        return replace(self, token=token)

    def cookie_header(self, with_token: bool = False) -> str:
        """Render the session cookies for a request header."""
        cookie = f"{SESSION_ID_COOKIE}={self.id};"
        if with_token:
            cookie += f" {SESSION_TOKEN_COOKIE}={self.token or ''};"
        return cookie

    def __repr__(self) -> str:
        token = "<set>" if self.token else None
        return f"Session(uuid={self.uuid!r}, id=<hidden>, token={token})"


# =============================================================================
# Entities
# =============================================================================


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


@dataclass
class Company:
    """A procuring company listed on the portal."""

    id: int
    slug: str
    name: str
    logo: str | None = None  # Base64, only when fetched explicitly

    def to_dict(self) -> dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class NoticeAttachment:
    """A file attached to a notice."""

    file_name: str
    file_uuid: str

    @property
    def url(self) -> str:
        """Direct download link of the file."""
        return f"{DEFAULT_BASE_URL}/{ATTACHMENT_PATH.format(file_uuid=self.file_uuid)}"

    def to_dict(self) -> dict[str, Any]:
        return {"file_name": self.file_name, "file_uuid": self.file_uuid, "url": self.url}


@dataclass
class DynamicPurchasingSystem:
    """A standing dynamic purchasing system of a company."""

    id: int
    custom_id: str
    unit: str
    title: str
    short_description: str
    is_being_corrected: bool
    deadline: datetime | None
    original_deadline: str | None
    # Description without the correction marker, only while being corrected
    additional_desc: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class Notice:
    """A procurement notice.

    Listing pages fill the summary fields; the notice detail pages
    additionally fill publication date, description, classification,
    attachments and links.
    """

    id: int
    custom_id: str
    unit: str
    title: str
    deadline: datetime | None
    original_deadline: str | None
    flags: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)

    # Listing view
    short_description: str | None = None
    is_being_corrected: bool | None = None

    # Detail view
    published: datetime | None = None
    original_published: str | None = None
    description: str | None = None  # HTML
    authority_type: str | None = None
    category: str | None = None
    attachments: list[NoticeAttachment] = field(default_factory=list)
    links: list[str] = field(default_factory=list)

    def merge(self, detail: "Notice") -> "Notice":
        """Combine a listing record with its detail record.

        Detail values win for shared fields; listing-only fields are kept.
        """
        if detail.id != self.id:
            raise ValueError(f"Cannot merge notice {detail.id} into notice {self.id}")
        return replace(
            detail,
            short_description=self.short_description,
            is_being_corrected=self.is_being_corrected,
        )

    def to_dict(self) -> dict[str, Any]:
        data = _serialize(asdict(self))
        data["attachments"] = [a.to_dict() for a in self.attachments]
        return data


@dataclass
class Notices:
    """Snapshot of one company's notices in one language."""

    dynamic_purchasing_systems: list[DynamicPurchasingSystem]
    notices: list[Notice]
    language: Language

    def to_dict(self) -> dict[str, Any]:
        return {
            "dynamic_purchasing_systems": [d.to_dict() for d in self.dynamic_purchasing_systems],
            "notices": [n.to_dict() for n in self.notices],
            "language": self.language.value,
        }
