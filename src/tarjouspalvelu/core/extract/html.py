"""
Generic HTML extraction helpers.

Thin wrappers over lxml and cssselect that read values at fixed structural
positions of the portal markup. Every helper that reads a required value
fails loudly with RequiredFieldMissing instead of returning an empty value.
"""

from __future__ import annotations

import html as html_lib
import re
from urllib.parse import parse_qs, urlsplit

from lxml import etree
from lxml import html as lxml_html

from tarjouspalvelu.core.errors import FlagParseError, RequiredFieldMissing

HtmlElement = lxml_html.HtmlElement


# =============================================================================
# Document Loading and Selection
# =============================================================================


def parse_html(markup: str | bytes) -> HtmlElement:
    """Load page markup into a queryable tree.

    Raises:
        RequiredFieldMissing: If the page has no content
    """
    if not markup or not markup.strip():
        raise RequiredFieldMissing("page content", "Failed to parse page, the response was empty")
    try:
        return lxml_html.document_fromstring(markup)
    except (etree.ParserError, ValueError) as e:
        raise RequiredFieldMissing("page content", "Failed to parse page markup") from e


def select(root: HtmlElement, selector: str) -> list[HtmlElement]:
    """Select elements with a CSS selector."""
    return root.cssselect(selector)


def select_one(root: HtmlElement, selector: str) -> HtmlElement | None:
    """Select the first element matching a CSS selector."""
    found = root.cssselect(selector)
    return found[0] if found else None


def table_rows(root: HtmlElement, table_selector: str) -> list[HtmlElement]:
    """Get the data rows of a table.

    Rows of nested tables and header rows without ``td`` cells are skipped.
    A missing table means there is nothing listed and yields no rows.
    """
    table = select_one(root, table_selector)
    if table is None:
        return []

    rows = []
    for row in table.iter("tr"):
        parent = row.getparent()
        if parent is not table and parent.getparent() is not table:
            continue
        if not row_cells(row):
            continue
        rows.append(row)
    return rows


def row_cells(row: HtmlElement) -> list[HtmlElement]:
    """Get the direct ``td`` cells of a table row."""
    return [child for child in row if child.tag == "td"]


# =============================================================================
# Value Readers
# =============================================================================


def element_text(element: HtmlElement | None) -> str:
    """Get the stripped text content of an element, or "" if missing."""
    if element is None:
        return ""
    return element.text_content().strip()


def first_attr(root: HtmlElement, selector: str, attribute: str) -> str | None:
    """Get an attribute of the first element matching a selector."""
    element = select_one(root, selector)
    if element is None:
        return None
    return element.get(attribute)


def required_attr(root: HtmlElement, selector: str, attribute: str, field: str) -> str:
    """Get an attribute that must be present."""
    value = first_attr(root, selector, attribute)
    if value is None:
        raise RequiredFieldMissing(field)
    return value


def required_text(root: HtmlElement, selector: str, field: str) -> str:
    """Get the text of an element that must be present.

    The element may be empty, only its absence is an error.
    """
    element = select_one(root, selector)
    if element is None:
        raise RequiredFieldMissing(field)
    return element.text_content().strip()


def inner_html(element: HtmlElement | None) -> str | None:
    """Serialize the children of an element, without the element itself."""
    if element is None:
        return None
    parts = [html_lib.escape(element.text, quote=False)] if element.text else []
    for child in element:
        parts.append(lxml_html.tostring(child, encoding="unicode"))
    return "".join(parts)


def style_property(element: HtmlElement | None, name: str) -> str | None:
    """Read a property from an element's inline style attribute."""
    if element is None:
        return None
    style = element.get("style") or ""
    for declaration in style.split(";"):
        key, sep, value = declaration.partition(":")
        if sep and key.strip().lower() == name.lower():
            return value.strip().lower()
    return None


def has_class(element: HtmlElement | None, class_name: str) -> bool:
    """Check if an element carries a CSS class."""
    if element is None:
        return False
    return class_name in (element.get("class") or "").split()


# =============================================================================
# Links
# =============================================================================


def query_param(href: str | None, name: str) -> str | None:
    """Get a query string parameter from a link.

    Links without a ``?`` are parsed as a bare query string.
    """
    if not href:
        return None
    query = urlsplit(href).query if "?" in href else href
    values = parse_qs(query).get(name)
    return values[0] if values else None


def int_query_param(href: str | None, name: str, field: str) -> int:
    """Get a non-negative integer query parameter that must be present."""
    value = query_param(href, name)
    if value is None or not value.isdigit():
        raise RequiredFieldMissing(field)
    return int(value)


def strip_prefix(value: str | None, prefix: str, field: str) -> str:
    """Remove a fixed path prefix from a link or image source."""
    if not value or not value.startswith(prefix) or len(value) == len(prefix):
        raise RequiredFieldMissing(field)
    return value[len(prefix):]


# =============================================================================
# Icon Flags
# =============================================================================


# Regular icons: .../ikoni_<flag>.gif
FLAG_PATTERN = re.compile(r"ikoni_(.*?)\.gif")
# Small procurement icon is named the other way round: images/<flag>_ikoni...
FLAG_FALLBACK_PATTERN = re.compile(r"images/(.*?)_ikoni")


def decode_flag(src: str | None) -> str:
    """Decode a classification flag from an icon filename.

    Raises:
        FlagParseError: If neither naming convention matches
    """
    if src:
        match = FLAG_PATTERN.search(src) or FLAG_FALLBACK_PATTERN.search(src)
        if match:
            return match.group(1)
    raise FlagParseError("Failed to parse flag image")


def decode_flags(images: list[HtmlElement]) -> list[str]:
    """Decode the flags of every icon image, in document order."""
    return [decode_flag(image.get("src")) for image in images]
