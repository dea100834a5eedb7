"""Result set encoders."""

from resultfmt.encode.base import NEWLINE, Encoder, ErrorEncoder, default_table_summary
from resultfmt.encode.json_ import JSONEncoder
from resultfmt.encode.style import (
    LineStyle,
    ascii_line_style,
    old_ascii_line_style,
    unicode_double_line_style,
    unicode_line_style,
)
from resultfmt.encode.table import ExpandedEncoder, TableEncoder
from resultfmt.encode.unaligned import UnalignedEncoder

__all__ = [
    "NEWLINE",
    "Encoder",
    "ErrorEncoder",
    "ExpandedEncoder",
    "JSONEncoder",
    "LineStyle",
    "TableEncoder",
    "UnalignedEncoder",
    "ascii_line_style",
    "default_table_summary",
    "old_ascii_line_style",
    "unicode_double_line_style",
    "unicode_line_style",
]
