"""JSON encoder: an array with one object per row."""

from __future__ import annotations

import json
from typing import BinaryIO

from resultfmt.encode.base import NEWLINE, Encoder
from resultfmt.format.formatter import EscapeFormatter, Formatter
from resultfmt.model.resultset import ResultSet
from resultfmt.model.value import Value


class JSONEncoder(Encoder):
    """Writes rows as ``[{"column":value,...},...]``.

    Raw values (numbers, booleans, nested JSON) are written as is and
    everything else as a JSON string. NULL is written as ``null``.
    """

    def __init__(
        self,
        result_set: ResultSet | None,
        *,
        newline: bytes | str = NEWLINE,
        formatter: Formatter | None = None,
        lower_column_names: bool = False,
    ) -> None:
        super().__init__(result_set, newline=newline, lower_column_names=lower_column_names)
        self.formatter = formatter or EscapeFormatter(is_json=True)
        self.empty = Value(buf=b"null", width=4, raw=True)

    def separator(self) -> bytes:
        return b"," + self.newline

    def encode(self, w: BinaryIO) -> None:
        keys = [json.dumps(c, ensure_ascii=False).encode("utf-8") + b":" for c in self.columns()]
        w.write(b"[")
        count = 0
        while self.result_set.advance():
            vals = self.formatter.format(self.scan())
            buf = bytearray(b"," if count != 0 else b"")
            buf += b"{"
            for i, (key, v) in enumerate(zip(keys, vals)):
                if i != 0:
                    buf += b","
                if v is None:
                    v = self.empty
                buf += key
                if v.raw:
                    buf += v.buf
                else:
                    buf += b'"' + v.buf + b'"'
            buf += b"}"
            w.write(bytes(buf))
            count += 1
        self.check()
        w.write(b"]")
