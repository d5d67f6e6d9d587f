# File: /gridbase/crud/rows.py | Version: 1.0 | Title: Row query engine, cell edits and bulk row generation
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import func, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gridbase.core.errors import NotFoundError
from gridbase.crud import grid as crud_grid
from gridbase.crud.cells import build_search_text, cast_cell_value
from gridbase.crud.filtering import compile_where, validate_filters, validate_sort
from gridbase.crud.pagination import cursor_predicate, order_by, sort_key, trim_page
from gridbase.db.session import dialect_name
from gridbase.models.grid import ColumnType, DataTable, TableRow, utcnow
from gridbase.schemas.query import RowOut, RowPage, RowQuery
from gridbase.schemas.rows import BulkRowsOut

logger = logging.getLogger(__name__)

# ---------------------------
# Query
# ---------------------------


def query_rows(db: Session, table: DataTable, query: RowQuery) -> RowPage:
    """
    One page of rows for (search, filters, sort) after ``query.cursor``.

    ``total_count`` ignores the cursor: it is the table's row counter when
    nothing narrows the result, otherwise a COUNT over the same WHERE.
    """
    search = (query.search or "").strip()
    filters = query.filters or []
    sort = query.sort

    columns = crud_grid.columns_by_id(db, table.id)
    validate_filters(filters, columns)
    validate_sort(sort, columns)

    dialect = dialect_name(db)
    where = compile_where(table.id, search, filters, dialect)
    key = sort_key(sort, dialect) if sort else None
    after = cursor_predicate(key, query.cursor)

    q = select(TableRow).where(*where)
    if after is not None:
        q = q.where(after)
    q = q.order_by(*order_by(key)).limit(query.limit + 1)

    rows = db.execute(q).scalars().all()
    items, next_cursor = trim_page(rows, query.limit, sort)

    if search or filters:
        total = db.execute(
            select(func.count()).select_from(TableRow).where(*where)
        ).scalar_one()
    else:
        total = table.row_count

    return RowPage(
        items=[RowOut.model_validate(r) for r in items],
        next_cursor=next_cursor,
        total_count=total,
    )


# ---------------------------
# Cell edit
# ---------------------------


def get_row(db: Session, table_id: str, row_id: str) -> TableRow:
    row = db.execute(
        select(TableRow).where(TableRow.id == row_id, TableRow.table_id == table_id)
    ).scalar_one_or_none()
    if row is None:
        raise NotFoundError("Row not found")
    return row


def update_cell(
    db: Session, table: DataTable, *, row_id: str, column_id: str, value: Any
) -> TableRow:
    """
    Set (or clear, for None / "") a single cell and rewrite the row's
    search text in the same commit. Last write wins.
    """
    column = crud_grid.get_column(db, table.id, column_id)
    row = get_row(db, table.id, row_id)
    stored = cast_cell_value(ColumnType(column.type), value)

    cells = dict(row.cells or {})
    if stored is None:
        cells.pop(column_id, None)
    else:
        cells[column_id] = stored

    try:
        # new dict instance so the JSON column is flagged dirty
        row.cells = cells
        row.search_text = build_search_text(cells)
        row.updated_at = utcnow()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    logger.debug("cell updated table=%s row=%s column=%s", table.id, row_id, column_id)
    return row


# ---------------------------
# Bulk generation
# ---------------------------

_SERIES_INSERT = {
    "postgresql": """
        INSERT INTO table_row (id, table_id, row_index, cells, search_text, created_at, updated_at)
        SELECT gen_random_uuid()::text, :table_id, :start + gs, CAST('{}' AS jsonb), '', now(), now()
        FROM generate_series(0, :count - 1) AS gs
    """,
    "sqlite": """
        WITH RECURSIVE seq(n) AS (
            SELECT 0
            UNION ALL
            SELECT n + 1 FROM seq WHERE n + 1 < :count
        )
        INSERT INTO table_row (id, table_id, row_index, cells, search_text, created_at, updated_at)
        SELECT lower(hex(randomblob(16))), :table_id, :start + n, '{}', '',
               CURRENT_TIMESTAMP, CURRENT_TIMESTAMP
        FROM seq
    """,
}


def _series_insert(dialect: str):
    sql: Optional[str] = _SERIES_INSERT.get(dialect)
    if sql is None:
        raise NotImplementedError(f"Bulk row generation is not supported on {dialect}")
    return text(sql)


def bulk_generate_rows(db: Session, table: DataTable, count: int) -> BulkRowsOut:
    """
    Append ``count`` empty rows. The counter bump reserves the row_index
    range and the set-based insert fills it; both commit together.
    """
    insert_stmt = _series_insert(dialect_name(db))
    try:
        next_row_index = db.execute(
            update(DataTable)
            .where(DataTable.id == table.id)
            .values(
                next_row_index=DataTable.next_row_index + count,
                row_count=DataTable.row_count + count,
            )
            .returning(DataTable.next_row_index)
            .execution_options(synchronize_session=False)
        ).scalar_one()
        start = next_row_index - count

        db.execute(insert_stmt, {"table_id": table.id, "start": start, "count": count})
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("generated %s rows for table %s starting at %s", count, table.id, start)
    return BulkRowsOut(start_row_index=start, count=count)
