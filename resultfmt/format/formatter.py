"""Formatters: turn raw row values into Values."""

from __future__ import annotations

import datetime
import json
import math
from decimal import Decimal
from typing import Any, Callable, Protocol, Sequence

from resultfmt.format.escape import format_bytes, format_float
from resultfmt.model.value import Align, Value, new_value


class Formatter(Protocol):
    """Formats header names and row values into Values."""

    def header(self, names: Sequence[str]) -> list[Value]: ...

    def format(self, values: Sequence[Any]) -> list[Value | None]: ...


class EscapeFormatter:
    """Escaping formatter for standard Python values.

    dict, list and tuple values are JSON encoded, either by ``encoder``
    when given or by the standard json module, and the result is escaped
    like any other text (or embedded raw when ``is_json`` is set).
    """

    def __init__(
        self,
        *,
        mask: str = "%d",
        time_format: str | None = None,
        time_zone: datetime.tzinfo | None = None,
        encoder: Callable[[Any], bytes | str] | None = None,
        json_indent: str | int | None = "  ",
        escape_html: bool = False,
        is_json: bool = False,
        is_raw: bool = False,
        sep: str = "",
        quote: str = "",
        invalid: str | None = None,
        header_align: Align = Align.LEFT,
        numeric_locale: bool = False,
    ) -> None:
        self.mask = mask
        self.time_format = time_format
        self.time_zone = time_zone
        self.encoder = encoder
        self.json_indent = json_indent
        self.escape_html = escape_html
        self.is_json = is_json
        self.is_raw = is_raw
        self.sep = sep
        self.quote = quote
        self.invalid = invalid
        self.header_align = header_align
        self.numeric_locale = numeric_locale

    def _escape(self, src: bytes | str, *, is_json: bool | None = None) -> Value:
        return format_bytes(
            src,
            invalid=self.invalid,
            is_json=self.is_json if is_json is None else is_json,
            is_raw=self.is_raw,
            sep=self.sep,
            quote=self.quote,
        )

    def header(self, names: Sequence[str]) -> list[Value]:
        """Format column names.

        Names that are empty after trimming are replaced by the mask, with
        ``%d`` substituted by the 1-based column number.
        """
        res = []
        for i, name in enumerate(names):
            s = name.strip()
            if not s:
                s = self.mask.replace("%d", str(i + 1))
            v = self._escape(s)
            v.align = self.header_align
            res.append(v)
        return res

    def format(self, values: Sequence[Any]) -> list[Value | None]:
        """Format a row of values; None (NULL) stays None."""
        return [self.format_value(v) for v in values]

    def format_value(self, v: Any) -> Value | None:
        if v is None:
            return None
        if isinstance(v, bool):
            return new_value("true" if v else "false", Align.LEFT, True)
        if isinstance(v, int):
            return new_value(self._number(v), Align.RIGHT, True)
        if isinstance(v, float):
            s = f"{v:,}" if self.numeric_locale and math.isfinite(v) else format_float(v)
            return new_value(s, Align.RIGHT, math.isfinite(v))
        if isinstance(v, Decimal):
            return new_value(self._number(v), Align.RIGHT, v.is_finite())
        if isinstance(v, complex):
            return new_value(str(v), Align.RIGHT, False)
        if isinstance(v, (bytes, bytearray, memoryview)):
            return self._escape(bytes(v))
        if isinstance(v, str):
            return self._escape(v)
        if isinstance(v, (datetime.datetime, datetime.date, datetime.time)):
            return new_value(self._time(v), Align.LEFT, False)
        if isinstance(v, (dict, list, tuple)):
            return self._structured(v)
        return self._escape(str(v))

    def _number(self, v: int | Decimal) -> str:
        if self.numeric_locale:
            return f"{v:,}"
        return str(v)

    def _time(self, v: datetime.date | datetime.time) -> str:
        if self.time_zone is not None and isinstance(v, datetime.datetime):
            v = v.astimezone(self.time_zone)
        if self.time_format:
            return v.strftime(self.time_format)
        return v.isoformat()

    def _structured(self, v: Any) -> Value:
        if self.encoder is not None:
            buf = self.encoder(v)
        else:
            buf = json.dumps(v, indent=self.json_indent, sort_keys=True, ensure_ascii=False, default=str)
            if self.escape_html:
                buf = buf.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
        if isinstance(buf, str):
            buf = buf.encode("utf-8")
        buf = buf.strip()
        if self.is_json:
            res = Value(buf=buf, width=len(buf))
        else:
            res = self._escape(buf, is_json=False)
        res.raw = True
        return res
