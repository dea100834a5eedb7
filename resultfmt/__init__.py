"""Render query result sets as psql style tables, records, JSON and delimited text."""

from resultfmt.encode import (
    Encoder,
    ErrorEncoder,
    ExpandedEncoder,
    JSONEncoder,
    LineStyle,
    TableEncoder,
    UnalignedEncoder,
    ascii_line_style,
    default_table_summary,
    old_ascii_line_style,
    unicode_double_line_style,
    unicode_line_style,
)
from resultfmt.errors import Error
from resultfmt.format import EscapeFormatter, Formatter, format_bytes
from resultfmt.model import Align, CursorResultSet, MemoryResultSet, ResultSet, Value
from resultfmt.options import encode, encode_all, encoder_from_map, from_map
from resultfmt.view import CrosstabView, new_crosstab_view

__all__ = [
    "Align",
    "CrosstabView",
    "CursorResultSet",
    "Encoder",
    "Error",
    "ErrorEncoder",
    "EscapeFormatter",
    "ExpandedEncoder",
    "Formatter",
    "JSONEncoder",
    "LineStyle",
    "MemoryResultSet",
    "ResultSet",
    "TableEncoder",
    "UnalignedEncoder",
    "Value",
    "ascii_line_style",
    "default_table_summary",
    "encode",
    "encode_all",
    "encoder_from_map",
    "format_bytes",
    "from_map",
    "new_crosstab_view",
    "old_ascii_line_style",
    "unicode_double_line_style",
    "unicode_line_style",
]
