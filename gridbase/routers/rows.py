# File: /gridbase/routers/rows.py | Version: 1.0 | Title: Rows Router (keyset query, cell edit, bulk generate)
from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from gridbase.crud import grid as crud_grid
from gridbase.crud import rows as crud_rows
from gridbase.crud.indexes import IndexAdvisor
from gridbase.db.session import get_db
from gridbase.dependencies import get_index_advisor, get_owned_table
from gridbase.models.grid import DataTable
from gridbase.schemas.query import RowPage, RowQuery
from gridbase.schemas.rows import BulkRowsCreate, BulkRowsOut, CellValueUpdate, RowSummary

router = APIRouter(prefix="/tables/{table_id}/rows", tags=["Rows"])


def _advise_indexes(
    background: BackgroundTasks, advisor: IndexAdvisor, table: DataTable, query: RowQuery,
    columns: Dict,
) -> None:
    active = []
    if query.sort is not None:
        active.append(query.sort.column_id)
    active.extend(f.column_id for f in (query.filters or []))

    for column_id in dict.fromkeys(active):
        col = columns.get(column_id)
        if col is not None:
            background.add_task(advisor.ensure, table.id, col.id, col.type)


@router.post("/query", response_model=RowPage)
def query_rows(
    query: RowQuery,
    background: BackgroundTasks,
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
    advisor: IndexAdvisor = Depends(get_index_advisor),
):
    page = crud_rows.query_rows(db, table, query)
    # after the query succeeded: columns are validated and the response is not delayed
    _advise_indexes(background, advisor, table, query, crud_grid.columns_by_id(db, table.id))
    return page


@router.put("/{row_id}/cells/{column_id}", response_model=RowSummary)
def update_cell(
    row_id: str,
    column_id: str,
    data: CellValueUpdate,
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
):
    return crud_rows.update_cell(
        db, table, row_id=row_id, column_id=column_id, value=data.value
    )


@router.post("/bulk", response_model=BulkRowsOut)
def bulk_generate_rows(
    data: BulkRowsCreate,
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
):
    return crud_rows.bulk_generate_rows(db, table, data.count)
