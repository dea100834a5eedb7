"""Tests for the expanded record encoder."""

from __future__ import annotations

import io

from resultfmt.encode.base import default_table_summary
from resultfmt.encode.table import ExpandedEncoder
from resultfmt.model.resultset import MemoryResultSet

ROWS = [[1, "alice"], [2, "bob"]]


def _encode(rs, **kwargs) -> str:
    buf = io.BytesIO()
    ExpandedEncoder(rs, newline="\n", **kwargs).encode(buf)
    return buf.getvalue().decode("utf-8")


def _lines(*lines: str) -> str:
    return "".join(line + "\n" for line in lines)


class TestRecords:
    """Test record blocks at each border level."""

    def test_border_1(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], ROWS))
        assert out == _lines(
            "-[ RECORD 1 ]-",
            " id   | 1 ",
            " name | alice ",
            "-[ RECORD 2 ]-",
            " id   | 2 ",
            " name | bob ",
        )

    def test_border_2(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], ROWS), border=2)
        assert out == _lines(
            "+-[ RECORD 1 ]-+",
            "| id   | 1     |",
            "| name | alice |",
            "+-[ RECORD 2 ]-+",
            "| id   | 2     |",
            "| name | bob   |",
            "+------+-------+",
        )

    def test_border_0(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], ROWS), border=0)
        assert out == _lines(
            "* Record 1 ",
            "id   1 ",
            "name alice ",
            "* Record 2 ",
            "id   2 ",
            "name bob ",
        )

    def test_values_left_aligned(self) -> None:
        out = _encode(MemoryResultSet(["n"], [[1], [12345]]))
        assert " n | 1 \n" in out

    def test_header_widens_value_column(self) -> None:
        out = _encode(MemoryResultSet(["a"], [["x"]]), border=2)
        assert out == _lines(
            "+-[ RECORD 1 ]-+",
            "| a | x        |",
            "+---+----------+",
        )

    def test_null_text(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], [[1, None]]), empty="(null)")
        assert " name | (null) \n" in out


class TestOptions:
    """Test title, header and summary handling."""

    def test_title_written_once(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], ROWS), title="people", count=1)
        assert out.startswith("people\n-[ RECORD 1 ]-")
        assert out.count("people") == 1

    def test_skip_header(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], ROWS), skip_header=True)
        assert "RECORD" not in out
        assert out.startswith(" id   | 1 \n")

    def test_no_summary_by_default(self) -> None:
        assert "rows" not in _encode(MemoryResultSet(["id", "name"], ROWS))

    def test_summary(self) -> None:
        out = _encode(MemoryResultSet(["id", "name"], ROWS), summary=default_table_summary())
        assert out.endswith(" name | bob \n(2 rows)\n")

    def test_batches_keep_numbering(self) -> None:
        out = _encode(MemoryResultSet(["id"], [[1], [2], [3]]), count=2)
        assert "[ RECORD 3 ]" in out

    def test_no_rows(self) -> None:
        assert _encode(MemoryResultSet(["id"], []), border=2) == ""
