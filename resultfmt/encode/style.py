"""Box drawing line styles for the table encoders."""

from __future__ import annotations

from dataclasses import dataclass

from resultfmt.errors import InvalidLineStyle
from resultfmt.format.escape import rune_width

# (left corner, fill, mid junction, right corner). An empty string draws
# nothing.
Line = tuple[str, str, str, str]


@dataclass(frozen=True)
class LineStyle:
    """The glyphs used to draw each horizontal line of a table.

    ``wrap[1]`` is the wrap indicator written after a cell line that
    continues on the next physical line.
    """

    top: Line
    mid: Line
    row: Line
    wrap: Line
    end: Line

    def lines(self) -> tuple[Line, ...]:
        return (self.top, self.mid, self.row, self.wrap, self.end)

    def validate(self) -> None:
        """Raise InvalidLineStyle unless every glyph is exactly one cell wide."""
        for line in self.lines():
            for glyph in line:
                if len(glyph) > 1 or (glyph and rune_width(glyph) != 1):
                    raise InvalidLineStyle()


def ascii_line_style() -> LineStyle:
    return LineStyle(
        top=("+", "-", "+", "+"),
        mid=("+", "-", "+", "+"),
        row=("|", " ", "|", "|"),
        wrap=("|", "+", "|", "|"),
        end=("+", "-", "+", "+"),
    )


def old_ascii_line_style() -> LineStyle:
    """ASCII style with no wrap indicator, as in old psql versions."""
    s = ascii_line_style()
    return LineStyle(top=s.top, mid=s.mid, row=s.row, wrap=("|", " ", ":", "|"), end=s.end)


def unicode_line_style() -> LineStyle:
    return LineStyle(
        top=("┌", "─", "┬", "┐"),
        mid=("├", "─", "┼", "┤"),
        row=("│", " ", "│", "│"),
        wrap=("│", "↵", "│", "│"),
        end=("└", "─", "┴", "┘"),
    )


def unicode_double_line_style() -> LineStyle:
    return LineStyle(
        top=("╔", "═", "╦", "╗"),
        mid=("╠", "═", "╬", "╣"),
        row=("║", " ", "║", "║"),
        wrap=("║", "↵", "║", "║"),
        end=("╚", "═", "╩", "╝"),
    )
