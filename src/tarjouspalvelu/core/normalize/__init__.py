"""Locale detection and value parsing."""

from .parsing import (
    DATE_FORMATS,
    PORTAL_TIMEZONE,
    bool_from_yes_or_no,
    format_localized_date,
    match_locale,
    parse_localized_date,
    strip_timezone_annotation,
)

__all__ = [
    "DATE_FORMATS",
    "PORTAL_TIMEZONE",
    "bool_from_yes_or_no",
    "format_localized_date",
    "match_locale",
    "parse_localized_date",
    "strip_timezone_annotation",
]
