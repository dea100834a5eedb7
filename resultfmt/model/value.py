"""Core types: Value and Align."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Align(Enum):
    """Alignment of a value inside its column."""

    LEFT = 0
    RIGHT = 1
    CENTER = 2

    def __str__(self) -> str:
        return self.name.capitalize()


# A position inside Value.buf: (byte offset, display width of the segment
# preceding it on the same physical line).
Position = tuple[int, int]


def _one_line() -> list[list[Position]]:
    return [[]]


@dataclass
class Value:
    """A formatted, pre-measured cell or header.

    ``buf`` holds the escaped bytes ready to be written. Tab and newline
    bytes are kept verbatim in ``buf``; their positions are recorded in
    ``tabs`` (one list per physical line) and ``newlines`` so that the
    width of any line can be computed without rescanning ``buf``.
    ``width`` is the display width of the segment after the last tab or
    newline.
    """

    buf: bytes = b""
    newlines: list[Position] = field(default_factory=list)
    tabs: list[list[Position]] = field(default_factory=_one_line)
    width: int = 0
    align: Align = Align.LEFT
    raw: bool = False
    quoted: bool = False

    def __str__(self) -> str:
        return self.buf.decode("utf-8", errors="replace")

    @property
    def line_count(self) -> int:
        """Return the number of physical lines in the value."""
        return len(self.newlines) + 1

    def line(self, n: int) -> bytes:
        """Return the bytes of physical line n, without its line break."""
        start = self.newlines[n - 1][0] + 1 if n > 0 else 0
        end = self.newlines[n][0] if n < len(self.newlines) else len(self.buf)
        return self.buf[start:end]

    def line_width(self, n: int, offset: int, tab: int) -> int:
        """Return the display width of line n.

        Tabs expand to the next multiple of ``tab`` relative to the screen
        column ``offset`` the value starts at.
        """
        width = 0
        if n < len(self.newlines):
            width += self.newlines[n][1]
        if n < len(self.tabs) and self.tabs[n]:
            width += tab_width(self.tabs[n], offset, tab)
        if n == len(self.newlines):
            width += self.width
        return width

    def max_width(self, offset: int, tab: int) -> int:
        """Return the display width of the widest line."""
        width = self.width
        for n in range(len(self.tabs)):
            width = max(width, self.line_width(n, offset, tab))
        return width


def tab_width(tabs: list[Position], offset: int, tab: int) -> int:
    """Return the width covered by a line's segments up to its last tab.

    ``offset`` is the screen column the line starts at; tab stops are at
    multiples of ``tab``.
    """
    width = offset
    for _, segment in tabs:
        width += segment
        width += tab - width % tab
    return width - offset


def new_value(s: str, align: Align, raw: bool) -> Value:
    """Return a value for text known not to need escaping."""
    buf = s.encode("utf-8")
    return Value(buf=buf, width=len(buf), align=align, raw=raw)
