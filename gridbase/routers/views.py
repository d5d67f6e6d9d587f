# File: /gridbase/routers/views.py | Version: 1.0 | Title: Saved Views Router (list/create per table, patch by id)
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gridbase.crud import view as crud_view
from gridbase.db.session import get_db
from gridbase.dependencies import get_owned_table, get_owner_id
from gridbase.models.grid import DataTable
from gridbase.schemas.view import ViewCreate, ViewOut, ViewUpdate

router = APIRouter(tags=["Views"])


@router.get(
    "/tables/{table_id}/views",
    response_model=List[ViewOut],
    summary="List saved views of a table (config normalized on read)",
)
def list_views(
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
):
    return crud_view.list_views(db, table.id)


@router.post(
    "/tables/{table_id}/views", response_model=ViewOut, summary="Create a saved view"
)
def create_view(
    data: ViewCreate,
    table: DataTable = Depends(get_owned_table),
    db: Session = Depends(get_db),
):
    return crud_view.create_view(db, table.id, data)


@router.patch("/views/{view_id}", response_model=ViewOut, summary="Update name/config")
def update_view(
    view_id: str,
    data: ViewUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    v = crud_view.get_owned_view(db, view_id, owner_id)
    return crud_view.update_view(db, v, data)
