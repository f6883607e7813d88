"""HTML extraction helpers and page layout schemas."""

from .html import (
    decode_flag,
    decode_flags,
    element_text,
    first_attr,
    inner_html,
    int_query_param,
    parse_html,
    query_param,
    select,
    select_one,
    style_property,
    table_rows,
)
from .schemas import DPS_ROW, NOTICE_ROW, DpsRowSchema, NoticeRowSchema, RowReader

__all__ = [
    "decode_flag",
    "decode_flags",
    "element_text",
    "first_attr",
    "inner_html",
    "int_query_param",
    "parse_html",
    "query_param",
    "select",
    "select_one",
    "style_property",
    "table_rows",
    "DPS_ROW",
    "NOTICE_ROW",
    "DpsRowSchema",
    "NoticeRowSchema",
    "RowReader",
]
