# File: /gridbase/routers/columns.py | Version: 1.0 | Title: Columns Router (list, create, ensure indexes)
from __future__ import annotations

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from gridbase.crud import grid as crud_grid
from gridbase.crud.indexes import IndexAdvisor
from gridbase.db.session import get_db
from gridbase.dependencies import get_index_advisor, get_owned_table
from gridbase.models.grid import DataTable
from gridbase.schemas.columns import ColumnCreate, ColumnOut

router = APIRouter(prefix="/tables/{table_id}/columns", tags=["Columns"])


@router.get("", response_model=List[ColumnOut])
def list_columns(
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
):
    return crud_grid.list_columns(db, table.id)


@router.post("", response_model=ColumnOut)
def create_column(
    data: ColumnCreate,
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
):
    return crud_grid.create_column(db, table_id=table.id, name=data.name, type=data.type)


@router.post("/{column_id}/ensure-indexes")
def ensure_indexes(
    column_id: str,
    background: BackgroundTasks,
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
    advisor: IndexAdvisor = Depends(get_index_advisor),
):
    col = crud_grid.get_column(db, table.id, column_id)
    background.add_task(advisor.ensure, table.id, col.id, col.type)
    return {"ok": True}
