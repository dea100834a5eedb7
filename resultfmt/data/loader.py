"""CSV loading: parse CSV data into result sets with type inference."""

from __future__ import annotations

import csv
from decimal import Decimal, InvalidOperation
from typing import Any, TextIO

from resultfmt.model.resultset import MemoryResultSet


class LoadError(Exception):
    """Raised when data loading fails."""


def load_csv(source: TextIO) -> MemoryResultSet:
    """Read CSV data from a text stream and return a one result set MemoryResultSet.

    The first row is treated as the column names.
    Type inference is applied per column: int > Decimal > bool > str.
    Empty fields are NULL (None).
    """
    reader = csv.reader(source)
    try:
        headers = next(reader)
    except StopIteration:
        raise LoadError("no header row")

    headers = [h.strip() for h in headers]

    rows: list[list[str]] = []
    for n, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) != len(headers):
            raise LoadError(f"line {n}: expected {len(headers)} fields, got {len(row)}")
        rows.append(row)

    types = infer_types(rows, len(headers))
    return MemoryResultSet(headers, [coerce_row(row, types) for row in rows])


def infer_types(rows: list[list[str]], width: int) -> list[type]:
    """Scan column values and infer the best type per column.

    Priority: int > Decimal > bool > str.
    A column is int if every non-empty value parses as int.
    A column is Decimal if every non-empty value parses as a decimal number (but not all int).
    A column is bool if every non-empty value is 'true' or 'false' (case-insensitive).
    Otherwise str.
    """
    return [_infer_column_type([row[i] for row in rows]) for i in range(width)]


def _infer_column_type(values: list[str]) -> type:
    """Infer the type for a single column's values."""
    non_empty = [v for v in values if v != ""]
    if not non_empty:
        return str

    if all(_is_int(v) for v in non_empty):
        return int

    if all(_is_decimal(v) for v in non_empty):
        return Decimal

    if all(v.lower() in ("true", "false") for v in non_empty):
        return bool

    return str


def _is_int(s: str) -> bool:
    """Check if a string is a valid integer literal."""
    try:
        int(s)
        return True
    except ValueError:
        return False


def _is_decimal(s: str) -> bool:
    """Check if a string is a finite decimal number."""
    try:
        return Decimal(s).is_finite()
    except InvalidOperation:
        return False


def coerce_row(row: list[str], types: list[type]) -> list[Any]:
    """Convert string values in a row to their inferred types."""
    return [_coerce_value(v, t) for v, t in zip(row, types)]


def _coerce_value(value: str, target_type: type) -> Any:
    """Coerce a single string value to the target type."""
    if value == "":
        return None

    if target_type is int:
        return int(value)
    if target_type is Decimal:
        return Decimal(value)
    if target_type is bool:
        return value.lower() == "true"
    return value
