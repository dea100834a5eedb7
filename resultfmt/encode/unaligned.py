"""Unaligned (delimited text) encoder, used for the unaligned and csv formats."""

from __future__ import annotations

from typing import BinaryIO

from resultfmt.encode.base import NEWLINE, Encoder
from resultfmt.format.escape import format_bytes
from resultfmt.format.formatter import EscapeFormatter, Formatter
from resultfmt.model.resultset import ResultSet
from resultfmt.model.value import Value


class UnalignedEncoder(Encoder):
    """Writes one record per row, fields joined by ``sep``.

    Values that contain the separator, the quote character or whitespace
    are wrapped in ``quote`` when one is set.
    """

    def __init__(
        self,
        result_set: ResultSet | None,
        *,
        sep: str = "|",
        quote: str = "",
        newline: bytes | str = NEWLINE,
        formatter: Formatter | None = None,
        title: str = "",
        empty: str = "",
        skip_header: bool = False,
        lower_column_names: bool = False,
    ) -> None:
        super().__init__(result_set, newline=newline, lower_column_names=lower_column_names)
        self.sep = sep.encode("utf-8")
        self.quote = quote.encode("utf-8")
        self.formatter = formatter or EscapeFormatter(is_raw=True, sep=sep, quote=quote)
        self.title = title
        # NULL is written verbatim
        self.empty = Value(buf=empty.encode("utf-8"))
        self.skip_header = skip_header

    def trailer(self) -> bytes:
        return b""

    def encode(self, w: BinaryIO) -> None:
        cols = self.columns()
        if self.title:
            w.write(format_bytes(self.title).buf + self.newline)
        if not self.skip_header:
            self.write_record(w, self.formatter.header(cols))
        while self.result_set.advance():
            self.write_record(w, self.formatter.format(self.scan()))
        self.check()

    def write_record(self, w: BinaryIO, vals: list[Value | None]) -> None:
        buf = bytearray()
        for i, v in enumerate(vals):
            if i != 0:
                buf += self.sep
            if v is None:
                v = self.empty
            if v.quoted and self.quote:
                buf += self.quote + v.buf + self.quote
            else:
                buf += v.buf
        buf += self.newline
        w.write(bytes(buf))
