"""Data model: Value and ResultSet."""

from resultfmt.model.resultset import CursorResultSet, MemoryResultSet, ResultSet
from resultfmt.model.value import Align, Value, tab_width

__all__ = [
    "Align",
    "CursorResultSet",
    "MemoryResultSet",
    "ResultSet",
    "Value",
    "tab_width",
]
