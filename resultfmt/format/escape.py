"""Byte escaping and display width measurement.

``format_bytes`` is the primitive every encoder builds on: it escapes a
byte string and records the position of every tab and newline, so that
the layout engine can later measure any physical line of a cell without
rescanning it.
"""

from __future__ import annotations

import math
import unicodedata
from decimal import Decimal

import wcwidth

from resultfmt.model.value import Value

_LOWERHEX = "0123456789abcdef"

# Go-style two character escapes for control characters.
_CONTROL_ESCAPES = {
    "\a": b"\\a",
    "\b": b"\\b",
    "\f": b"\\f",
    "\r": b"\\r",
    "\v": b"\\v",
}

_JSON_ESCAPES = {
    "\a": b"\\u0007",
    "\b": b"\\b",
    "\f": b"\\f",
    "\n": b"\\n",
    "\r": b"\\r",
    "\t": b"\\t",
    "\v": b"\\u000b",
    '"': b'\\"',
    "\\": b"\\\\",
}


def rune_width(ch: str) -> int:
    """Return the number of terminal cells used by a single character."""
    if not ch:
        return 0
    # wcwidth returns -1 for non-printable characters
    return max(wcwidth.wcwidth(ch), 0)


def str_width(s: str) -> int:
    """Return the number of terminal cells used by s."""
    return sum(rune_width(ch) for ch in s)


def is_graphic(ch: str) -> bool:
    """Report whether ch is a letter, mark, number, punctuation, symbol or space."""
    cat = unicodedata.category(ch)
    return cat[0] in "LMNPS" or cat == "Zs"


def _decode(src: bytes, i: int) -> tuple[str | None, int]:
    """Decode the UTF-8 sequence starting at src[i].

    Returns (character, length); character is None for an invalid byte, in
    which case length is 1.
    """
    b = src[i]
    if b < 0x80:
        return chr(b), 1
    if 0xC2 <= b <= 0xDF:
        n = 2
    elif 0xE0 <= b <= 0xEF:
        n = 3
    elif 0xF0 <= b <= 0xF4:
        n = 4
    else:
        return None, 1
    try:
        return src[i:i + n].decode("utf-8"), n
    except UnicodeDecodeError:
        return None, 1


def _hex(r: int, digits: int) -> bytes:
    return "".join(_LOWERHEX[(r >> s) & 0xF] for s in range((digits - 1) * 4, -1, -4)).encode()


def format_bytes(
    src: bytes | str,
    *,
    invalid: str | None = None,
    is_json: bool = False,
    is_raw: bool = False,
    sep: str = "",
    quote: str = "",
) -> Value:
    """Escape src into a Value, recording tab and newline positions.

    Invalid UTF-8 bytes become ``invalid`` when given, or a ``\\xHH``
    escape, and mark the value as quoted. In JSON mode the JSON special
    characters get their JSON escapes. In raw mode characters are copied
    through unchanged; the value is marked quoted when it contains ``sep``,
    ``quote`` (which is doubled) or whitespace. Otherwise printable
    characters pass through, tabs and newlines are recorded as line
    structure, and other control characters are escaped.
    """
    if isinstance(src, str):
        src = src.encode("utf-8", errors="surrogatepass")
    invalid_buf = invalid.encode("utf-8") if invalid is not None else None
    invalid_width = str_width(invalid) if invalid is not None else 0

    res = Value()
    buf = bytearray()
    line = 0
    i = 0
    while i < len(src):
        ch, n = _decode(src, i)
        start, i = i, i + n

        if ch is None:
            if invalid_buf is not None:
                buf += invalid_buf
                res.width += invalid_width
                res.quoted = True
            elif is_json:
                buf += b"\\ufffd"
                res.width += 6
            else:
                buf += b"\\x" + _hex(src[start], 2)
                res.width += 4
                res.quoted = True
            continue

        if is_json and ch in _JSON_ESCAPES:
            esc = _JSON_ESCAPES[ch]
            buf += esc
            res.width += len(esc)
            continue

        if is_raw:
            enc = src[start:i]
            buf += enc
            res.width += rune_width(ch)
            if sep and ch == sep:
                res.quoted = True
            elif quote and ch == quote:
                buf += enc
                res.width += rune_width(ch)
                res.quoted = True
            else:
                res.quoted = res.quoted or ch.isspace()
            continue

        if is_graphic(ch):
            buf += src[start:i]
            res.width += rune_width(ch)
            continue

        if ch in _CONTROL_ESCAPES:
            buf += _CONTROL_ESCAPES[ch]
            res.width += 2
        elif ch == "\t":
            res.tabs[line].append((len(buf), res.width))
            buf += b"\t"
            res.width = 0
        elif ch == "\n":
            res.newlines.append((len(buf), res.width))
            buf += b"\n"
            res.width = 0
            res.tabs.append([])
            line += 1
        else:
            r = ord(ch)
            if r < 0x20 and not is_json:
                buf += b"\\x" + _hex(r, 2)
                res.width += 4
            elif r < 0x10000:
                buf += b"\\u" + _hex(r, 4)
                res.width += 6
            else:
                buf += b"\\U" + _hex(r, 8)
                res.width += 10

    res.buf = bytes(buf)
    return res


def format_float(v: float) -> str:
    """Format v with the fewest digits that round-trip.

    Uses exponent notation when the exponent is below -4 or at least 6,
    like the %g verb with shortest precision.
    """
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "+Inf" if v > 0 else "-Inf"
    if v == 0:
        return "-0" if math.copysign(1.0, v) < 0 else "0"

    d = Decimal(repr(v))
    sign, digits, exponent = d.as_tuple()
    # strip trailing zeros kept by repr, e.g. "14.0"
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    exp = len(digits) + exponent - 1
    prefix = "-" if sign else ""
    text = "".join(str(x) for x in digits)

    if exp < -4 or exp >= 6:
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        return f"{prefix}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if exponent >= 0:
        return prefix + text + "0" * exponent
    point = len(text) + exponent
    if point > 0:
        return prefix + text[:point] + "." + text[point:]
    return prefix + "0." + "0" * -point + text
