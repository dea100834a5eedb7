"""Crosstab view: pivots a (vertical, horizontal, data) result set.

The view reads its whole source result set on construction, since every
horizontal key must be known before the first output column can be
reported. It is read-only afterwards.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Sequence

from resultfmt.errors import (
    CrosstabDataColumnMustBeSpecified,
    CrosstabDataColumnNotInResult,
    CrosstabDuplicateVerticalAndHorizontalValue,
    CrosstabHorizontalColumnNotInResult,
    CrosstabHorizontalSortColumnIsNotANumber,
    CrosstabHorizontalSortColumnNotInResult,
    CrosstabResultMustHaveAtLeast3Columns,
    CrosstabVerticalAndHorizontalColumnsMustNotBeSame,
    CrosstabVerticalColumnNotInResult,
)
from resultfmt.format.formatter import EscapeFormatter, Formatter
from resultfmt.model.resultset import ResultSet
from resultfmt.model.value import Value

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def index_of(cols: Sequence[str], s: str) -> int:
    """Find a column by 1-based ordinal or case-insensitive name; -1 if absent."""
    s = s.strip()
    if _INTEGER.fullmatch(s):
        i = int(s) - 1
        return i if 0 <= i < len(cols) else -1
    for i, c in enumerate(cols):
        if s.casefold() == c.strip().casefold():
            return i
    return -1


def find_index(cols: Sequence[str], s: str, default: int) -> int:
    """Like index_of, falling back to the 0-based default when s is empty."""
    if not s:
        return default if default < len(cols) else -1
    return index_of(cols, s)


@dataclass
class _HKey:
    key: str
    sort: int


class CrosstabView:
    """A ResultSet with one row per vertical key and one column per horizontal key.

    ``v``, ``h``, ``d`` and ``s`` name the vertical, horizontal, data and
    sort columns, by name or 1-based ordinal. ``v`` and ``h`` default to the
    first two columns, and ``d`` to the remaining one of a three column
    result. When ``s`` is given, horizontal keys are ordered by its integer
    value instead of by first appearance.
    """

    def __init__(
        self,
        result_set: ResultSet,
        *,
        v: str = "",
        h: str = "",
        d: str = "",
        s: str = "",
        formatter: Formatter | None = None,
    ) -> None:
        self.result_set = result_set
        self.formatter = formatter or EscapeFormatter(is_raw=True)
        self.v, self.h, self.d, self.s = v, h, d, s
        self.vkeys: list[str] = []
        self.hkeys: list[_HKey] = []
        self.vals: dict[str, dict[str, Any]] = {}
        self._pos = -1
        self._build()

    def _build(self) -> None:
        cols = self.result_set.columns()
        if len(cols) < 3:
            raise CrosstabResultMustHaveAtLeast3Columns()

        vindex = find_index(cols, self.v, 0)
        if vindex == -1:
            raise CrosstabVerticalColumnNotInResult()
        hindex = find_index(cols, self.h, 1)
        if hindex == -1:
            raise CrosstabHorizontalColumnNotInResult()
        if vindex == hindex:
            raise CrosstabVerticalAndHorizontalColumnsMustNotBeSame()
        self.v, self.h = cols[vindex], cols[hindex]

        if not self.d and len(cols) > 3:
            raise CrosstabDataColumnMustBeSpecified()
        ddef = next(i for i in range(3) if i not in (vindex, hindex))
        dindex = find_index(cols, self.d, ddef)
        if dindex == -1:
            raise CrosstabDataColumnNotInResult()
        self.d = cols[dindex]

        sindex = -1
        if self.s:
            sindex = index_of(cols, self.s)
            if sindex == -1:
                raise CrosstabHorizontalSortColumnNotInResult()
            self.s = cols[sindex]
        logger.debug("crosstab columns v=%r h=%r d=%r s=%r", self.v, self.h, self.d, self.s or None)

        while self.result_set.advance():
            row = list(self.result_set.scan())
            keys = [row[vindex], row[hindex]]
            if sindex != -1:
                keys.append(row[sindex])
            formatted = self.formatter.format(keys)
            self._add(row[dindex], formatted[0], formatted[1], formatted[2] if sindex != -1 else None, sindex != -1)
        err = self.result_set.err()
        if err is not None:
            raise err

        if sindex != -1:
            # stable: ties keep the order they were first seen in
            self.hkeys.sort(key=lambda k: k.sort)
        logger.debug("crosstab has %d vertical and %d horizontal keys", len(self.vkeys), len(self.hkeys))

    def _add(self, d: Any, v: Value | None, h: Value | None, s: Value | None, has_sort: bool) -> None:
        sval = 0
        if has_sort:
            text = str(s) if s is not None else ""
            if not _INTEGER.fullmatch(text):
                raise CrosstabHorizontalSortColumnIsNotANumber()
            sval = int(text)
        vk = str(v) if v is not None else ""
        hk = str(h) if h is not None else ""
        if vk not in self.vals:
            self.vkeys.append(vk)
            self.vals[vk] = {}
        if all(k.key != hk for k in self.hkeys):
            self.hkeys.append(_HKey(hk, sval))
        if hk in self.vals[vk]:
            raise CrosstabDuplicateVerticalAndHorizontalValue()
        self.vals[vk][hk] = d

    def advance(self) -> bool:
        self._pos += 1
        return self._pos < len(self.vkeys)

    def scan(self) -> list[Any]:
        if not 0 <= self._pos < len(self.vkeys):
            raise RuntimeError("scan called without a current row")
        vkey = self.vkeys[self._pos]
        row = self.vals[vkey]
        return [vkey] + [row.get(k.key) for k in self.hkeys]

    def columns(self) -> list[str]:
        return [self.v] + [k.key for k in self.hkeys]

    def err(self) -> Exception | None:
        return None

    def close(self) -> None:
        self.result_set.close()

    def advance_result_set(self) -> bool:
        # one view per source result set
        return False


def new_crosstab_view(
    result_set: ResultSet,
    v: str = "",
    h: str = "",
    d: str = "",
    s: str = "",
    *,
    formatter: Formatter | None = None,
) -> CrosstabView:
    """Build a crosstab view over the current result set of result_set."""
    return CrosstabView(result_set, v=v, h=h, d=d, s=s, formatter=formatter)
