"""ResultSet: the forward-only cursor contract consumed by encoders and views."""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ResultSet(Protocol):
    """A forward-only cursor over one or more result sets.

    ``scan`` is only valid after ``advance`` returned True and before the
    next call to ``advance``. ``advance`` returns False both at the end of
    the data and on error; ``err`` then reports the error, if any.
    """

    def advance(self) -> bool: ...

    def scan(self) -> Sequence[Any]: ...

    def columns(self) -> list[str]: ...

    def err(self) -> Exception | None: ...

    def close(self) -> None: ...

    def advance_result_set(self) -> bool: ...


class MemoryResultSet:
    """An in-memory result set.

    Holds one or more result sets sharing the same columns. Each result set
    is a list of rows.
    """

    def __init__(self, columns: Sequence[str], *result_sets: Sequence[Sequence[Any]]) -> None:
        self._columns = list(columns)
        self._sets = [list(rows) for rows in result_sets] or [[]]
        self._set = 0
        self._pos = -1

    def advance(self) -> bool:
        if self._pos + 1 >= len(self._sets[self._set]):
            return False
        self._pos += 1
        return True

    def scan(self) -> list[Any]:
        if self._pos < 0:
            raise RuntimeError("scan called before advance")
        return list(self._sets[self._set][self._pos])

    def columns(self) -> list[str]:
        return list(self._columns)

    def err(self) -> Exception | None:
        return None

    def close(self) -> None:
        pass

    def advance_result_set(self) -> bool:
        if self._set + 1 >= len(self._sets):
            return False
        self._set += 1
        self._pos = -1
        return True

    def reset(self) -> None:
        """Rewind to the first row of the first result set."""
        self._set, self._pos = 0, -1


class CursorResultSet:
    """Adapts PEP 249 (DB-API) cursors to the ResultSet contract.

    The first cursor is the current result set. ``advance_result_set`` uses
    the driver's ``nextset()`` when it has one, and otherwise moves on to the
    next cursor passed in.
    """

    def __init__(self, cursor: Any, *more: Any) -> None:
        self._cursor = cursor
        self._more = list(more)
        self._row: Sequence[Any] | None = None
        self._err: Exception | None = None

    def advance(self) -> bool:
        if self._err is not None or self._cursor.description is None:
            return False
        try:
            self._row = self._cursor.fetchone()
        except Exception as e:  # each DB-API module defines its own Error
            logger.debug("fetch failed: %s", e)
            self._err = e
            self._row = None
            return False
        return self._row is not None

    def scan(self) -> list[Any]:
        if self._row is None:
            raise RuntimeError("scan called without a current row")
        return list(self._row)

    def columns(self) -> list[str]:
        if self._cursor.description is None:
            return []
        return [d[0] for d in self._cursor.description]

    def err(self) -> Exception | None:
        return self._err

    def close(self) -> None:
        self._cursor.close()
        for cursor in self._more:
            cursor.close()

    def advance_result_set(self) -> bool:
        if self._err is not None:
            return False
        self._row = None
        nextset = getattr(self._cursor, "nextset", None)
        if nextset is not None:
            try:
                if nextset():
                    return True
            except NotImplementedError:
                pass
        if not self._more:
            return False
        self._cursor.close()
        self._cursor = self._more.pop(0)
        return True
