"""Aligned table and expanded record encoders.

Rows are pulled from the result set in batches of ``count`` rows (all rows
when ``count`` is 0). Column widths are computed from the headers and the
buffered batch, and only grow from one batch to the next. Every cell line
is measured from the tab and newline positions recorded by the formatter,
so the buffers are never rescanned.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import BinaryIO, Sequence

from resultfmt.encode.base import NEWLINE, Encoder, Summary, default_table_summary, empty_value, summarize
from resultfmt.encode.pager import Pager
from resultfmt.encode.style import Line, LineStyle, ascii_line_style
from resultfmt.format.escape import format_bytes, rune_width, str_width
from resultfmt.format.formatter import EscapeFormatter, Formatter
from resultfmt.model.resultset import ResultSet
from resultfmt.model.value import Align, Value

logger = logging.getLogger(__name__)

Row = Sequence[Value | None]


@dataclass
class RowStyle:
    """The strings drawn around and between the cells of one line."""

    left: str
    right: str
    middle: str
    filler: str
    wrapper: str
    has_wrapping: bool


class _Output:
    """Buffers rendered bytes until they are flushed to the current sink."""

    def __init__(self, sink: BinaryIO) -> None:
        self.sink = sink
        self.buf = bytearray()

    def write(self, b: bytes | str) -> None:
        self.buf += b.encode("utf-8") if isinstance(b, str) else b

    def flush(self) -> None:
        if self.buf:
            self.sink.write(bytes(self.buf))
            self.buf.clear()


class _Grid:
    """Layout state and drawing primitives for one table render."""

    def __init__(self, enc: TableEncoder, out: _Output, headers: list[Value], widths: list[int] | None) -> None:
        self.enc = enc
        self.out = out
        self.headers = headers
        n = self.column_count()
        self.offsets = [0] * n
        # user supplied widths are the minimum for the leading columns
        self.max_widths = [widths[i] if widths is not None and i < len(widths) else 0 for i in range(n)]

    def column_count(self) -> int:
        return len(self.headers)

    def row_style(self, r: Line) -> RowStyle:
        enc = self.enc
        spacer = r[1] * rune_width(enc.line_style.row[1])
        filler = r[1] or " "
        left = right = ""
        if enc.border > 1:
            left, right = r[0], r[3]
        if enc.border > 0:
            left += spacer
        middle = " "
        if enc.border >= 1:
            middle = r[2] + spacer
        return RowStyle(
            left=left,
            right=right,
            middle=middle,
            filler=filler,
            wrapper=enc.line_style.wrap[1],
            has_wrapping=rune_width(enc.line_style.row[1]) > 0,
        )

    def calc_width(self, rows: list[Row]) -> None:
        """Compute column offsets and widths for a batch of rows."""
        enc = self.enc
        rs = self.row_style(enc.line_style.row)
        offset = str_width(rs.left)
        for i, h in enumerate(self.headers):
            if i != 0:
                offset += str_width(rs.middle)
            self.offsets[i] = offset
            width = max(self.max_widths[i], h.max_width(offset, enc.tab))
            for row in rows:
                cell = row[i] if row[i] is not None else enc.empty
                width = max(width, cell.max_width(offset, enc.tab))
            self.max_widths[i] = width
            offset += width
            # one cell for the wrap indicator
            if rs.has_wrapping and enc.border != 0:
                offset += 1

    def table_width(self) -> int:
        enc = self.enc
        rs = self.row_style(enc.line_style.mid)
        width = str_width(rs.left) + str_width(rs.right)
        last = len(self.max_widths) - 1
        for i, w in enumerate(self.max_widths):
            width += w
            if rs.has_wrapping and enc.border >= 1:
                width += 1
            if i != last:
                width += str_width(rs.middle)
        return width

    def table_height(self, rows: list[Row], count: int) -> int:
        enc = self.enc
        height = 0
        if enc.title is not None and enc.title.width != 0:
            height += enc.title.line_count
        if enc.border >= 2 and not enc.inline:
            height += 1
        # header, mid divider
        height += 1 if enc.inline else 2
        for row in rows:
            height += max([1] + [c.line_count for c in row if c is not None])
        if enc.border >= 2:
            height += 1
        if summarize(enc.summary, count) is not None:
            height += 1
        return height

    def header(self) -> None:
        enc = self.enc
        rs = self.row_style(enc.line_style.row)
        title = enc.title
        if title is not None and title.width != 0:
            width = (self.table_width() - title.width) // 2 + title.width
            self.write_aligned(title.buf, rs.filler, Align.RIGHT, width - title.width)
            self.out.write(enc.newline)
        if enc.border >= 2 and not enc.inline:
            self.divider(self.row_style(enc.line_style.top))
        if enc.inline:
            # header names are drawn inside the top border
            rs = self.row_style(enc.line_style.top)
        self.row(self.headers, rs)
        if not enc.inline:
            self.divider(self.row_style(enc.line_style.mid))

    def divider(self, rs: RowStyle) -> None:
        enc = self.enc
        out = self.out
        out.write(rs.left)
        last = len(self.max_widths) - 1
        for i, width in enumerate(self.max_widths):
            out.write(rs.filler * width)
            if rs.has_wrapping and enc.border >= 1:
                out.write(rs.filler)
            if i != last:
                out.write(rs.middle)
        out.write(rs.right)
        out.write(enc.newline)

    def row(self, vals: Row, rs: RowStyle) -> None:
        """Draw a row, one physical line of every cell per pass."""
        enc = self.enc
        out = self.out
        last = len(vals) - 1
        l = 0
        while True:
            out.write(rs.left)
            remaining = False
            for i, v in enumerate(vals):
                if v is None:
                    v = enc.empty
                n = len(v.newlines)
                if l <= n:
                    padding = self.max_widths[i] - v.line_width(l, self.offsets[i], enc.tab)
                    # no trailing padding on the last cell without an outside border
                    if enc.border <= 1 and i == last and (not rs.has_wrapping or l >= n):
                        padding = 0
                    self.write_aligned(v.line(l), rs.filler, v.align, padding)
                elif enc.border > 1 or i != last:
                    out.write(rs.filler * self.max_widths[i])
                if rs.has_wrapping:
                    out.write(rs.wrapper if l < n else rs.filler)
                remaining = remaining or l < n
                # without a border the wrap indicator separates the columns
                if i != len(self.max_widths) - 1 and enc.border >= 1:
                    out.write(rs.middle)
            out.write(rs.right)
            out.write(enc.newline)
            if not remaining:
                break
            l += 1

    def write_aligned(self, b: bytes, filler: str, align: Align, padding: int) -> None:
        if align == Align.RIGHT:
            left, right = padding, 0
        elif align == Align.CENTER:
            left, right = padding // 2, padding // 2 + padding % 2
        else:
            left, right = 0, padding
        if left > 0:
            self.out.write(filler * left)
        self.out.write(b)
        if right > 0:
            self.out.write(filler * right)

    def end(self) -> None:
        if self.enc.border >= 2:
            self.divider(self.row_style(self.enc.line_style.end))

    def draw(self, rows: list[Row], first: int) -> None:
        rs = self.row_style(self.enc.line_style.row)
        for row in rows:
            self.row(row, rs)


class _RecordGrid(_Grid):
    """Two column (name, value) layout drawing one block per record."""

    def __init__(self, enc: TableEncoder, out: _Output, headers: list[Value]) -> None:
        # column names are always left aligned in records
        super().__init__(enc, out, [dataclasses.replace(h, align=Align.LEFT) for h in headers], None)

    def column_count(self) -> int:
        return 2

    def record_header(self, n: int) -> str:
        if self.enc.border != 0:
            return f"[ RECORD {n} ]"
        return f"* Record {n}"

    def calc_width(self, rows: list[Row], last: int = 1) -> None:
        enc = self.enc
        rs = self.row_style(enc.line_style.row)
        offset = str_width(rs.left)
        self.offsets[0] = offset
        for h in self.headers:
            self.max_widths[0] = max(self.max_widths[0], h.max_width(offset, enc.tab))
        offset += self.max_widths[0]
        if rs.has_wrapping and enc.border != 0:
            offset += 1
        mw = str_width(rs.middle)
        offset += mw
        self.offsets[1] = offset
        # the value column is never narrower than the record header needs
        width = max(self.max_widths[1], len(self.record_header(last)) - self.max_widths[0] - mw - 1)
        for row in rows:
            for cell in row:
                if cell is None:
                    cell = enc.empty
                width = max(width, cell.max_width(offset, enc.tab))
        self.max_widths[1] = width

    def table_height(self, rows: list[Row], count: int) -> int:
        enc = self.enc
        height = 0
        if enc.title is not None and enc.title.width != 0:
            height += enc.title.line_count
        for row in rows:
            height += 1
            for cell in row:
                height += cell.line_count if cell is not None else 1
        if enc.border >= 2:
            height += 1
        if summarize(enc.summary, count) is not None:
            height += 1
        return height

    def header(self) -> None:
        title = self.enc.title
        if title is not None and title.width != 0:
            self.out.write(title.buf)
            self.out.write(self.enc.newline)

    def draw(self, rows: list[Row], first: int) -> None:
        rs = self.row_style(self.enc.line_style.row)
        for i, row in enumerate(rows, start=first):
            self.record(i, row, rs)

    def record(self, n: int, vals: Row, rs: RowStyle) -> None:
        """Draw record number n (1-based)."""
        enc = self.enc
        out = self.out
        if not enc.skip_header:
            hrs = rs
            header = self.record_header(n)
            if enc.border != 0:
                hrs = self.row_style(enc.line_style.top if n == 1 else enc.line_style.mid)
            out.write(hrs.left)
            out.write(header)
            padding = self.max_widths[0] + self.max_widths[1] + str_width(hrs.middle) * 2 - len(header) - 1
            if padding > 0:
                out.write(hrs.filler * padding)
            out.write(hrs.filler)
            out.write(hrs.right)
            out.write(enc.newline)
        for h, v in zip(self.headers, vals):
            if v is not None:
                v = dataclasses.replace(v, align=Align.LEFT)
            self.row([h, v], rs)


class TableEncoder(Encoder):
    """A buffered, look-ahead aligned table encoder.

    ``widths`` are minimum widths for the leading columns; columns past
    the end of the list get their natural width. When ``min_expand_width`` is set and the table is at least that
    wide, rows are drawn as expanded records instead. When ``pager_cmd`` is
    set and the table reaches ``min_pager_width`` or ``min_pager_height``,
    output is piped through the pager.
    """

    def __init__(
        self,
        result_set: ResultSet | None,
        *,
        count: int = 0,
        tab: int = 8,
        newline: bytes | str = NEWLINE,
        border: int = 1,
        inline: bool = False,
        line_style: LineStyle | None = None,
        formatter: Formatter | None = None,
        skip_header: bool = False,
        summary: Summary | None = None,
        title: str = "",
        empty: str = "",
        widths: Sequence[int] | None = None,
        min_expand_width: int = 0,
        min_pager_width: int = 0,
        min_pager_height: int = 0,
        pager_cmd: str = "",
        lower_column_names: bool = False,
    ) -> None:
        super().__init__(result_set, newline=newline, lower_column_names=lower_column_names)
        self.count = count
        self.tab = tab
        self.border = border
        self.inline = inline
        self.line_style = line_style or ascii_line_style()
        self.formatter = formatter or EscapeFormatter()
        self.skip_header = skip_header
        self.summary = default_table_summary() if summary is None else summary
        self.title = format_bytes(title) if title else None
        self.empty = empty_value(empty)
        self.widths = list(widths) if widths is not None else None
        self.min_expand_width = min_expand_width
        self.min_pager_width = min_pager_width
        self.min_pager_height = min_pager_height
        self.pager_cmd = pager_cmd
        self.line_style.validate()

    def next_results(self) -> list[Row]:
        """Read the next count rows, or all rows when count is 0."""
        rows: list[Row] = []
        while self.result_set.advance():
            rows.append(self.formatter.format(self.scan()))
            if self.count != 0 and len(rows) == self.count:
                return rows
        self.check()
        return rows

    def wants_pager(self, grid: _Grid, rows: list[Row], count: int) -> bool:
        if not self.pager_cmd:
            return False
        return (self.min_pager_height != 0 and grid.table_height(rows, count) >= self.min_pager_height) or (
            self.min_pager_width != 0 and grid.table_width() >= self.min_pager_width
        )

    def new_grid(self, out: _Output, headers: list[Value]) -> _Grid:
        return _Grid(self, out, headers, self.widths)

    def encode(self, w: BinaryIO) -> None:
        headers = self.formatter.header(self.columns())
        out = _Output(w)
        grid = self.new_grid(out, headers)
        expanded: _RecordGrid | None = None
        pager: Pager | None = None
        wrote_header = self.skip_header
        drew = False
        scanned = 0
        try:
            while True:
                rows = self.next_results()
                if not rows:
                    break
                first = scanned + 1
                scanned += len(rows)
                logger.debug("read batch of %d rows", len(rows))

                active = grid
                if expanded is None:
                    grid.calc_width(rows)
                    logger.debug("column widths %s", grid.max_widths)
                if expanded is not None or (self.min_expand_width != 0 and grid.table_width() >= self.min_expand_width):
                    if expanded is None:
                        logger.debug("table width %d, switching to expanded records", grid.table_width())
                        if drew:
                            grid.end()
                        expanded = _RecordGrid(self, out, headers)
                        wrote_header = True
                    expanded.calc_width(rows, scanned)
                    active = expanded

                if pager is None and self.wants_pager(active, rows, scanned):
                    pager = Pager(self.pager_cmd, w)
                    out.sink = pager.stdin

                if not wrote_header:
                    wrote_header = True
                    grid.header()
                active.draw(rows, first)
                drew = True
                out.flush()

            if drew:
                (expanded or grid).end()
            line = summarize(self.summary, scanned)
            if line is not None:
                out.write(line)
                out.write(self.newline)
            out.flush()
        except BrokenPipeError:
            if pager is None:
                raise
            pager.abandon()
            return
        except BaseException:
            # do not leave the pager waiting for input
            if pager is not None:
                pager.abandon()
            raise
        if pager is not None:
            pager.close()


class ExpandedEncoder(TableEncoder):
    """Draws every row as a record block of (column name, value) lines."""

    def __init__(self, result_set: ResultSet | None, *, summary: Summary | None = None, **kwargs) -> None:
        super().__init__(result_set, summary={} if summary is None else summary, **kwargs)

    def encode(self, w: BinaryIO) -> None:
        headers = self.formatter.header(self.columns())
        out = _Output(w)
        grid = _RecordGrid(self, out, headers)
        pager: Pager | None = None
        wrote_title = self.skip_header
        scanned = 0
        try:
            while True:
                rows = self.next_results()
                if not rows:
                    break
                first = scanned + 1
                scanned += len(rows)
                grid.calc_width(rows, scanned)
                logger.debug("read batch of %d rows, widths %s", len(rows), grid.max_widths)

                if pager is None and self.wants_pager(grid, rows, scanned):
                    pager = Pager(self.pager_cmd, w)
                    out.sink = pager.stdin

                if not wrote_title:
                    wrote_title = True
                    grid.header()
                grid.draw(rows, first)
                out.flush()

            if scanned != 0:
                grid.end()
            line = summarize(self.summary, scanned)
            if line is not None:
                out.write(line)
                out.write(self.newline)
            out.flush()
        except BrokenPipeError:
            if pager is None:
                raise
            pager.abandon()
            return
        except BaseException:
            # do not leave the pager waiting for input
            if pager is not None:
                pager.abandon()
            raise
        if pager is not None:
            pager.close()
