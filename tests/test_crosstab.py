"""Tests for the crosstab view."""

from __future__ import annotations

import io

import pytest

from resultfmt.encode.unaligned import UnalignedEncoder
from resultfmt.errors import (
    CrosstabDataColumnMustBeSpecified,
    CrosstabDataColumnNotInResult,
    CrosstabDuplicateVerticalAndHorizontalValue,
    CrosstabError,
    CrosstabHorizontalColumnNotInResult,
    CrosstabHorizontalSortColumnIsNotANumber,
    CrosstabHorizontalSortColumnNotInResult,
    CrosstabResultMustHaveAtLeast3Columns,
    CrosstabVerticalAndHorizontalColumnsMustNotBeSame,
    CrosstabVerticalColumnNotInResult,
)
from resultfmt.model.resultset import MemoryResultSet
from resultfmt.view.crosstab import find_index, index_of, new_crosstab_view

SOURCE = [
    ["v1", "h2", "foo"],
    ["v2", "h1", "bar"],
    ["v1", "h0", "baz"],
    ["v0", "h4", "qux"],
]


def _rows(view) -> list[list]:
    rows = []
    while view.advance():
        rows.append(view.scan())
    return rows


class TestIndexOf:
    """Test column lookup by name or ordinal."""

    def test_name_case_insensitive(self) -> None:
        assert index_of(["a", "Bee"], "bee") == 1
        assert index_of(["a", "Bee"], " BEE ") == 1

    def test_ordinal(self) -> None:
        assert index_of(["a", "b"], "2") == 1
        assert index_of(["a", "b"], "3") == -1
        assert index_of(["a", "b"], "0") == -1

    def test_missing(self) -> None:
        assert index_of(["a", "b"], "c") == -1

    def test_find_index_default(self) -> None:
        assert find_index(["a", "b", "c"], "", 2) == 2
        assert find_index(["a", "b"], "", 2) == -1
        assert find_index(["a", "b", "c"], "a", 2) == 0


class TestPivot:
    """Test pivoting rows into columns."""

    def test_default_columns(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE))
        assert view.columns() == ["v", "h2", "h1", "h0", "h4"]
        assert _rows(view) == [
            ["v1", "foo", None, "baz", None],
            ["v2", None, "bar", None, None],
            ["v0", None, None, None, "qux"],
        ]

    def test_unaligned_output(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE))
        buf = io.BytesIO()
        UnalignedEncoder(view, newline="\n").encode(buf)
        assert buf.getvalue() == b"v|h2|h1|h0|h4\nv1|foo||baz|\nv2||bar||\nv0||||qux\n"

    def test_named_columns(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE), "H", "V")
        assert view.columns() == ["h", "v1", "v2", "v0"]
        assert _rows(view)[0] == ["h2", "foo", None, None]

    def test_ordinal_columns(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE), "3", "1", "2")
        assert view.columns() == ["c", "v1", "v2", "v0"]
        assert _rows(view)[0] == ["foo", "h2", None, None]

    def test_data_defaults_to_remaining_column(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE), "c", "v")
        assert _rows(view)[0] == ["foo", "h2", None, None]

    def test_data_column_with_extra_columns(self) -> None:
        rows = [["v1", "h1", "x", 10], ["v1", "h2", "y", 20]]
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c", "n"], rows), d="n")
        assert _rows(view) == [["v1", 10, 20]]

    def test_integer_keys_formatted(self) -> None:
        rows = [[1, 2020, "a"], [1, 2021, "b"], [2, 2020, "c"]]
        view = new_crosstab_view(MemoryResultSet(["id", "year", "x"], rows))
        assert view.columns() == ["id", "2020", "2021"]
        assert _rows(view) == [["1", "a", "b"], ["2", "c", None]]

    def test_every_source_row_in_one_cell(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE))
        cells = [c for row in _rows(view) for c in row[1:] if c is not None]
        assert sorted(cells) == ["bar", "baz", "foo", "qux"]

    def test_sort_column(self) -> None:
        rows = [
            ["v1", "h2", "a", 2],
            ["v1", "h1", "b", 1],
            ["v2", "h0", "c", 0],
            ["v2", "h4", "d", 1],
        ]
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c", "s"], rows), d="c", s="s")
        assert view.columns() == ["v", "h0", "h1", "h4", "h2"]
        assert _rows(view) == [["v1", None, "b", None, "a"], ["v2", "c", None, "d", None]]

    def test_single_pass(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE))
        _rows(view)
        assert not view.advance()
        assert not view.advance_result_set()

    def test_scan_without_row(self) -> None:
        view = new_crosstab_view(MemoryResultSet(["v", "h", "c"], SOURCE))
        with pytest.raises(RuntimeError):
            view.scan()


class TestErrors:
    """Test construction errors."""

    @pytest.mark.parametrize(
        ("columns", "params", "error"),
        [
            (["v", "h"], {}, CrosstabResultMustHaveAtLeast3Columns),
            (["v", "h", "c"], {"v": "x"}, CrosstabVerticalColumnNotInResult),
            (["v", "h", "c"], {"h": "x"}, CrosstabHorizontalColumnNotInResult),
            (["v", "h", "c"], {"v": "h"}, CrosstabVerticalAndHorizontalColumnsMustNotBeSame),
            (["v", "h", "c", "n"], {}, CrosstabDataColumnMustBeSpecified),
            (["v", "h", "c"], {"d": "x"}, CrosstabDataColumnNotInResult),
            (["v", "h", "c"], {"s": "x"}, CrosstabHorizontalSortColumnNotInResult),
        ],
    )
    def test_column_errors(self, columns, params, error) -> None:
        rs = MemoryResultSet(columns, [])
        with pytest.raises(error):
            new_crosstab_view(rs, **params)

    def test_errors_are_crosstab_errors(self) -> None:
        with pytest.raises(CrosstabError) as exc_info:
            new_crosstab_view(MemoryResultSet(["v", "h"], []))
        assert str(exc_info.value) == "crosstab result must have at least 3 columns"

    def test_duplicate_pair(self) -> None:
        rows = [["v1", "h1", "a"], ["v1", "h1", "b"]]
        with pytest.raises(CrosstabDuplicateVerticalAndHorizontalValue):
            new_crosstab_view(MemoryResultSet(["v", "h", "c"], rows))

    def test_sort_not_a_number(self) -> None:
        rows = [["v1", "h1", "a", "first"]]
        with pytest.raises(CrosstabHorizontalSortColumnIsNotANumber):
            new_crosstab_view(MemoryResultSet(["v", "h", "c", "s"], rows), d="c", s="s")

    def test_source_error_propagates(self) -> None:
        class Broken(MemoryResultSet):
            def err(self) -> Exception | None:
                return OSError("read failed")

        with pytest.raises(OSError):
            new_crosstab_view(Broken(["v", "h", "c"], []))
