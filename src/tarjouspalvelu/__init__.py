"""
Tarjouspalvelu - Session and scraping client for the tarjouspalvelu.fi portal.

Acquires anonymous and authenticated portal sessions and extracts
companies, notices, dynamic purchasing systems and tenders from the
server-rendered pages.
"""

__version__ = "1.1.0"
__app_name__ = "tarjouspalvelu"

from tarjouspalvelu.client import TarjouspalveluClient  # noqa: E402
from tarjouspalvelu.core.models import (  # noqa: E402
    Company,
    DynamicPurchasingSystem,
    Language,
    Notice,
    NoticeAttachment,
    Notices,
    Session,
)

__all__ = [
    "TarjouspalveluClient",
    "Company",
    "DynamicPurchasingSystem",
    "Language",
    "Notice",
    "NoticeAttachment",
    "Notices",
    "Session",
]
