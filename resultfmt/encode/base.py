"""Encoder base class and helpers shared by every output format."""

from __future__ import annotations

import sys
from typing import BinaryIO, Callable, Mapping, Sequence

from resultfmt.errors import Error, ResultSetHasNoColumns, ResultSetIsNil
from resultfmt.format.escape import format_bytes
from resultfmt.model.resultset import ResultSet
from resultfmt.model.value import Value

NEWLINE = b"\r\n" if sys.platform == "win32" else b"\n"

# Maps an exact row count (or -1, for any other count) to the summary text.
Summary = Mapping[int, Callable[[int], str]]


def default_table_summary() -> dict[int, Callable[[int], str]]:
    """Return the psql style "(N rows)" summary."""
    return {
        1: lambda count: f"({count} row)",
        -1: lambda count: f"({count} rows)",
    }


def summarize(summary: Summary | None, count: int) -> str | None:
    """Return the summary line for count rows, or None when there is none."""
    if not summary:
        return None
    f = summary.get(count, summary.get(-1))
    if f is None:
        return None
    return f(count)


def empty_value(text: str | None) -> Value:
    """Return the value drawn in place of NULL."""
    if not text:
        return Value()
    return format_bytes(text)


def lower_names(names: Sequence[str]) -> list[str]:
    """Lower-case the column names that are entirely upper case."""
    return [n.lower() if n.upper() == n else n for n in names]


class Encoder:
    """Base class for result set encoders.

    ``encode`` renders the current result set of the result set and
    ``encode_all`` renders it and every following one.
    """

    def __init__(
        self,
        result_set: ResultSet | None,
        *,
        newline: bytes | str = NEWLINE,
        lower_column_names: bool = False,
    ) -> None:
        self.result_set = result_set
        self.newline = newline.encode("utf-8") if isinstance(newline, str) else newline
        self.lower_column_names = lower_column_names

    def encode(self, w: BinaryIO) -> None:
        raise NotImplementedError

    def separator(self) -> bytes:
        """Return the bytes written between two result sets."""
        return self.newline

    def trailer(self) -> bytes:
        """Return the bytes written after the last result set."""
        return self.newline

    def encode_all(self, w: BinaryIO) -> None:
        self.encode(w)
        while self.result_set.advance_result_set():
            w.write(self.separator())
            self.encode(w)
        w.write(self.trailer())

    def columns(self) -> list[str]:
        """Return the column names, checking the result set contract."""
        if self.result_set is None:
            raise ResultSetIsNil()
        cols = self.result_set.columns()
        if not cols:
            raise ResultSetHasNoColumns()
        if self.lower_column_names:
            cols = lower_names(cols)
        return cols

    def scan(self) -> list:
        """Return the values of the current row.

        An error reported by the result set is raised before scanning.
        """
        err = self.result_set.err()
        if err is not None:
            raise err
        return list(self.result_set.scan())

    def check(self) -> None:
        """Raise the error that ended iteration, if any."""
        err = self.result_set.err()
        if err is not None:
            raise err


class ErrorEncoder(Encoder):
    """An encoder whose only behavior is to raise a configuration error."""

    def __init__(self, result_set: ResultSet | None = None, *, err: Error, **_: object) -> None:
        super().__init__(result_set)
        self.err = err

    def encode(self, w: BinaryIO) -> None:
        raise self.err

    def encode_all(self, w: BinaryIO) -> None:
        raise self.err
