"""Build encoders from a psql style option map.

Configuration errors are not raised here: an invalid format or field
separator yields an ErrorEncoder that raises when encoding.
"""

from __future__ import annotations

import shutil
from typing import Any, BinaryIO, Callable, Mapping

from resultfmt.encode.base import NEWLINE, Encoder, ErrorEncoder
from resultfmt.encode.json_ import JSONEncoder
from resultfmt.encode.style import (
    ascii_line_style,
    old_ascii_line_style,
    unicode_double_line_style,
    unicode_line_style,
)
from resultfmt.encode.table import ExpandedEncoder, TableEncoder
from resultfmt.encode.unaligned import UnalignedEncoder
from resultfmt.errors import InvalidFieldSeparator, InvalidFormat
from resultfmt.format.formatter import EscapeFormatter
from resultfmt.model.resultset import ResultSet
from resultfmt.model.value import Align

Builder = Callable[..., Encoder]


def _on(opts: Mapping[str, str], key: str) -> bool:
    return opts.get(key) in ("on", "true")


def _positive(opts: Mapping[str, str], key: str) -> int | None:
    try:
        n = int(opts.get(key, ""))
    except ValueError:
        return None
    return n if n > 0 else None


def formatter_options(opts: Mapping[str, str]) -> dict[str, Any]:
    """Return the EscapeFormatter keyword arguments set by opts."""
    return {
        "time_format": opts.get("time") or None,
        "numeric_locale": _on(opts, "numericlocale"),
    }


def _terminal_size(opts: Mapping[str, str]) -> tuple[int, int]:
    cols, rows = shutil.get_terminal_size()
    cols = _positive(opts, "columns") or cols
    return cols, rows


def from_map(opts: Mapping[str, str]) -> tuple[Builder, dict[str, Any]]:
    """Translate an option map into an encoder class and its keyword arguments."""
    opts = dict(opts)
    fmt = opts.get("format", "")
    common = {"lower_column_names": opts.get("lower_column_names") == "true"}

    if fmt == "json":
        return JSONEncoder, {**common, "formatter": EscapeFormatter(is_json=True, **formatter_options(opts))}

    if fmt in ("csv", "unaligned"):
        sep, quote, field = "|", "", "fieldsep"
        if fmt == "csv":
            sep, quote, field = ",", '"', "csv_fieldsep"
        if field in opts:
            if len(opts[field]) != 1:
                return ErrorEncoder, {"err": InvalidFieldSeparator()}
            sep = opts[field]
        if fmt != "csv" and opts.get("fieldsep_zero") == "on":
            sep = "\x00"
        recordsep = opts.get("recordsep", NEWLINE)
        if opts.get("recordsep_zero") == "on":
            recordsep = "\x00"
        return UnalignedEncoder, {
            **common,
            "sep": sep,
            "quote": quote,
            "newline": recordsep,
            "formatter": EscapeFormatter(is_raw=True, sep=sep, quote=quote, **formatter_options(opts)),
            "title": opts.get("title", ""),
            "empty": opts.get("null", ""),
            "skip_header": opts.get("tuples_only") == "on",
        }

    if fmt != "aligned":
        return ErrorEncoder, {"err": InvalidFormat()}

    kwargs: dict[str, Any] = {**common}
    if "border" in opts:
        try:
            kwargs["border"] = int(opts["border"])
        except ValueError:
            kwargs["border"] = 0
    if opts.get("tuples_only") == "on":
        kwargs["skip_header"] = True
        opts["footer"] = "off"
    if "title" in opts:
        kwargs["title"] = opts["title"]
    if "null" in opts:
        kwargs["empty"] = opts["null"]
    if opts.get("footer") == "off":
        kwargs["summary"] = {}

    style = opts.get("linestyle")
    if style == "ascii":
        kwargs["line_style"] = ascii_line_style()
    elif style == "old-ascii":
        kwargs["line_style"] = old_ascii_line_style()
    elif style == "unicode":
        if opts.get("unicode_border_linestyle") == "double":
            kwargs["line_style"] = unicode_double_line_style()
        else:
            kwargs["line_style"] = unicode_line_style()

    pager, pager_cmd = opts.get("pager", ""), opts.get("pager_cmd", "")
    if pager and pager_cmd:
        kwargs["pager_cmd"] = pager_cmd
        if pager == "on":
            cols, rows = _terminal_size(opts)
            rows = _positive(opts, "pager_min_lines") or rows
            kwargs["min_pager_width"] = cols + 1
            kwargs["min_pager_height"] = rows + 1
        elif pager == "always":
            kwargs["min_pager_width"] = -1
            kwargs["min_pager_height"] = -1

    builder: Builder = TableEncoder
    expanded = opts.get("expanded")
    if expanded == "auto":
        cols, _ = _terminal_size(opts)
        kwargs["min_expand_width"] = cols + 1
    elif expanded == "on":
        builder = ExpandedEncoder

    # psql centers column names in aligned tables
    header_align = Align.LEFT if builder is ExpandedEncoder else Align.CENTER
    kwargs["formatter"] = EscapeFormatter(header_align=header_align, **formatter_options(opts))
    return builder, kwargs


def encoder_from_map(result_set: ResultSet | None, opts: Mapping[str, str]) -> Encoder:
    builder, kwargs = from_map(opts)
    return builder(result_set, **kwargs)


def encode(w: BinaryIO, result_set: ResultSet | None, opts: Mapping[str, str]) -> None:
    """Encode the current result set of result_set to w."""
    encoder_from_map(result_set, opts).encode(w)


def encode_all(w: BinaryIO, result_set: ResultSet | None, opts: Mapping[str, str]) -> None:
    """Encode every result set of result_set to w."""
    encoder_from_map(result_set, opts).encode_all(w)
