"""
Locale and format parsing for portal pages.

The portal renders dates as Helsinki wall-clock time in the layout of the
session language, and booleans as localized yes/no words.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from tarjouspalvelu.core.errors import (
    DateParseError,
    LocaleNotFound,
    UnrecognizedBooleanToken,
)
from tarjouspalvelu.core.models import Language


# The portal always renders times in Helsinki time
PORTAL_TIMEZONE = ZoneInfo("Europe/Helsinki")


# =============================================================================
# Locale Detection
# =============================================================================


CULTURE_MARKER = re.compile(r'__cultureInfo = \{"name":"(.*?)","')


def match_locale(html: str) -> Language:
    """Match the page language from its embedded culture info script.

    Args:
        html: Page HTML source

    Returns:
        Language of the page

    Raises:
        LocaleNotFound: If the marker is missing or names an unknown culture
    """
    match = CULTURE_MARKER.search(html)
    if match is None:
        raise LocaleNotFound("Failed to match the locale")

    try:
        return Language(match.group(1))
    except ValueError:
        raise LocaleNotFound(f"Failed to match the locale, unknown culture {match.group(1)!r}") from None


# =============================================================================
# Date Parsing
# =============================================================================


DATE_FORMATS: dict[Language, str] = {
    Language.FI: "%d.%m.%Y %H:%M:%S",
    Language.SV: "%Y-%m-%d %H:%M:%S",
    Language.EN: "%d/%m/%Y %H:%M:%S",
    Language.DA: "%d-%m-%Y %H:%M:%S",
}

TIMEZONE_ANNOTATION = re.compile(r"\s*\(UTC.*$", re.DOTALL)


def parse_localized_date(text: str, locale: Language) -> datetime:
    """Parse a localized portal date into an aware UTC datetime.

    Args:
        text: Date as rendered on the page, e.g. "1.2.2021 12:00:00"
        locale: Language the page was rendered in

    Returns:
        UTC datetime of the Helsinki wall-clock time

    Raises:
        DateParseError: If the text does not match the locale's layout
    """
    fmt = DATE_FORMATS[Language(locale)]
    cleaned = " ".join(text.split())

    try:
        naive = datetime.strptime(cleaned, fmt)
    except ValueError as e:
        raise DateParseError(f"Failed to parse date {cleaned!r} as {Language(locale).value}") from e

    return naive.replace(tzinfo=PORTAL_TIMEZONE).astimezone(timezone.utc)


def format_localized_date(value: datetime, locale: Language) -> str:
    """Render a datetime the way the portal shows it in the given language."""
    local = value.astimezone(PORTAL_TIMEZONE)
    if Language(locale) is Language.FI:
        # Finnish dates are not zero padded
        return f"{local.day}.{local.month}.{local.year} {local:%H:%M:%S}"
    return local.strftime(DATE_FORMATS[Language(locale)])


def strip_timezone_annotation(text: str) -> str:
    """Remove a trailing "(UTC+02:00) Helsinki, Kyiv" style annotation."""
    return TIMEZONE_ANNOTATION.sub("", text).strip()


# =============================================================================
# Boolean Parsing
# =============================================================================


YES_TOKENS = frozenset({"kyllä", "ja", "yes"})
NO_TOKENS = frozenset({"ei", "nej", "no"})


def bool_from_yes_or_no(text: str) -> bool:
    """Convert a localized yes/no word to a boolean.

    Covers Finnish, Swedish (and Danish) and English.

    Raises:
        UnrecognizedBooleanToken: For any other text
    """
    token = text.strip().lower()
    if token in YES_TOKENS:
        return True
    if token in NO_TOKENS:
        return False
    raise UnrecognizedBooleanToken(f"Failed to form a boolean from {text!r}")
