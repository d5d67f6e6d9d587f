# File: /gridbase/crud/pagination.py | Version: 1.0 | Title: Keyset pagination (unsorted rowIndex / sorted value+rowIndex)
"""
Keyset pagination over table rows.

Unsorted pages walk ``row_index`` ascending. Sorted pages order by
``(null_rank, value, row_index)`` where ``null_rank`` is 1 for rows without a
value. Ascending sorts put NULLs last, descending sorts put them first, and
``row_index`` is always the ascending tie-break, so the cursor predicate is a
tuple comparison against the last row of the previous page.

The ORDER BY and the cursor predicate are built from the same SortKey, so the
two cannot drift apart.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import and_, case, or_
from sqlalchemy.sql.elements import ColumnElement

from gridbase.core.errors import GridValidationError
from gridbase.crud.cells import as_number, cell_value, format_number, sort_value_from_cells
from gridbase.models.grid import ColumnType, TableRow
from gridbase.schemas.query import Cursor, Sort, SortedCursor


@dataclass(frozen=True)
class SortKey:
    sort: Sort
    value: ColumnElement
    null_rank: ColumnElement

    @property
    def ascending(self) -> bool:
        return self.sort.direction == "asc"


def sort_key(sort: Sort, dialect: str) -> SortKey:
    value = cell_value(sort.column_id, sort.type, dialect)
    null_rank = case((value.is_(None), 1), else_=0)
    return SortKey(sort=sort, value=value, null_rank=null_rank)


def order_by(key: Optional[SortKey]) -> List[ColumnElement]:
    if key is None:
        return [TableRow.row_index.asc()]
    if key.ascending:
        return [key.null_rank.asc(), key.value.asc(), TableRow.row_index.asc()]
    return [key.null_rank.desc(), key.value.desc(), TableRow.row_index.asc()]


def _cursor_sort_value(sort: Sort, raw: Any) -> Any:
    if raw is None:
        return None
    if sort.type == ColumnType.NUMBER:
        n = as_number(raw)
        if n is None:
            raise GridValidationError("Cursor sort value must be numeric")
        return n
    if isinstance(raw, (int, float)):
        return format_number(raw)
    return raw


def cursor_predicate(key: Optional[SortKey], cursor: Optional[Cursor]) -> Optional[ColumnElement]:
    """Rows strictly after the cursor in the order given by ``order_by(key)``."""
    if key is None:
        if isinstance(cursor, SortedCursor):
            raise GridValidationError("Sorted cursor given for an unsorted query")
        return TableRow.row_index > (cursor or 0)

    if cursor is None:
        return None
    if not isinstance(cursor, SortedCursor):
        raise GridValidationError("Sorted query requires a {sort_value, row_index} cursor")

    after = (lambda a, b: a > b) if key.ascending else (lambda a, b: a < b)
    rank = key.null_rank
    value = _cursor_sort_value(key.sort, cursor.sort_value)

    if value is None:
        return or_(
            after(rank, 1),
            and_(rank == 1, TableRow.row_index > cursor.row_index),
        )

    return or_(
        after(rank, 0),
        and_(rank == 0, after(key.value, value)),
        and_(rank == 0, key.value == value, TableRow.row_index > cursor.row_index),
    )


def trim_page(
    rows: Sequence[TableRow], limit: int, sort: Optional[Sort]
) -> Tuple[List[TableRow], Optional[Cursor]]:
    """
    ``rows`` were fetched with ``limit + 1``. Drop the probe row and derive
    the next cursor from the last row that is kept.
    """
    has_next = len(rows) > limit
    items = list(rows[:limit])
    if not has_next or not items:
        return items, None

    last = items[-1]
    if sort is None:
        return items, last.row_index
    return items, SortedCursor(
        sort_value=sort_value_from_cells(sort.column_id, sort.type, last.cells),
        row_index=last.row_index,
    )
