"""Tests for the in-memory and DB-API result sets."""

from __future__ import annotations

import io
import sqlite3

import pytest

from resultfmt.encode.table import TableEncoder
from resultfmt.model.resultset import CursorResultSet, MemoryResultSet, ResultSet


@pytest.fixture()
def conn():
    conn = sqlite3.connect(":memory:")
    conn.execute("create table t (id integer, name text)")
    conn.executemany("insert into t values (?, ?)", [(1, "alice"), (2, None)])
    yield conn
    conn.close()


class BrokenCursor:
    """A cursor whose second fetch fails."""

    description = (("x", None, None, None, None, None, None),)

    def __init__(self) -> None:
        self.fetched = 0
        self.closed = False

    def fetchone(self):
        self.fetched += 1
        if self.fetched > 1:
            raise sqlite3.OperationalError("disk I/O error")
        return ("a",)

    def close(self) -> None:
        self.closed = True


class TestMemoryResultSet:
    """Test the in-memory result set."""

    def test_protocol(self) -> None:
        assert isinstance(MemoryResultSet(["x"]), ResultSet)

    def test_rows(self) -> None:
        rs = MemoryResultSet(["x", "y"], [[1, 2], [3, 4]])
        assert rs.columns() == ["x", "y"]
        rows = []
        while rs.advance():
            rows.append(rs.scan())
        assert rows == [[1, 2], [3, 4]]
        assert rs.err() is None

    def test_scan_before_advance(self) -> None:
        with pytest.raises(RuntimeError):
            MemoryResultSet(["x"], [[1]]).scan()

    def test_result_sets(self) -> None:
        rs = MemoryResultSet(["x"], [[1]], [[2], [3]])
        assert rs.advance()
        assert rs.advance_result_set()
        assert rs.advance()
        assert rs.scan() == [2]
        assert not rs.advance_result_set()

    def test_reset(self) -> None:
        rs = MemoryResultSet(["x"], [[1]], [[2]])
        rs.advance()
        rs.advance_result_set()
        rs.reset()
        assert rs.advance()
        assert rs.scan() == [1]

    def test_no_result_sets(self) -> None:
        rs = MemoryResultSet(["x"])
        assert not rs.advance()
        assert not rs.advance_result_set()


class TestCursorResultSet:
    """Test the DB-API cursor adapter."""

    def test_rows(self, conn) -> None:
        rs = CursorResultSet(conn.execute("select id, name from t order by id"))
        assert rs.columns() == ["id", "name"]
        rows = []
        while rs.advance():
            rows.append(rs.scan())
        assert rows == [[1, "alice"], [2, None]]
        assert rs.err() is None

    def test_statement_without_rows(self, conn) -> None:
        rs = CursorResultSet(conn.execute("update t set name = 'x' where id = 3"))
        assert rs.columns() == []
        assert not rs.advance()

    def test_more_cursors(self, conn) -> None:
        rs = CursorResultSet(conn.execute("select 1"), conn.cursor().execute("select 2"))
        assert rs.advance()
        assert rs.scan() == [1]
        assert rs.advance_result_set()
        assert rs.advance()
        assert rs.scan() == [2]
        assert not rs.advance_result_set()

    def test_fetch_error(self) -> None:
        cursor = BrokenCursor()
        rs = CursorResultSet(cursor)
        assert rs.advance()
        assert not rs.advance()
        assert isinstance(rs.err(), sqlite3.OperationalError)
        assert not rs.advance()
        assert not rs.advance_result_set()
        rs.close()
        assert cursor.closed

    def test_fetch_error_reaches_encoder(self) -> None:
        rs = CursorResultSet(BrokenCursor())
        with pytest.raises(sqlite3.OperationalError):
            TableEncoder(rs).encode(io.BytesIO())

    def test_table(self, conn) -> None:
        rs = CursorResultSet(conn.execute("select id, name from t order by id"))
        buf = io.BytesIO()
        TableEncoder(rs, newline="\n", empty="NULL").encode(buf)
        assert buf.getvalue() == b" id | name \n----+-------\n  1 | alice \n  2 | NULL \n(2 rows)\n"

    def test_finished_cursor_closed(self, conn) -> None:
        first = conn.execute("select 1")
        rs = CursorResultSet(first, conn.cursor().execute("select 2"))
        assert rs.advance()
        assert rs.advance_result_set()
        with pytest.raises(sqlite3.ProgrammingError):
            first.fetchone()
        assert rs.advance()
        assert rs.scan() == [2]
