# File: /gridbase/crud/view.py | Version: 1.0 | Title: CRUD helpers for Saved Views
from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from gridbase.core.errors import NotFoundError
from gridbase.models.grid import DataTable, GridBase
from gridbase.models.view import View


def create_view(db: Session, table_id: str, data) -> View:
    v = View(
        table_id=table_id,
        name=data.name,
        config=data.config.model_dump(mode="json"),
    )
    db.add(v)
    db.commit()
    db.refresh(v)
    return v


def get_owned_view(db: Session, view_id: str, owner_id: str) -> View:
    v = (
        db.query(View)
        .join(DataTable, DataTable.id == View.table_id)
        .join(GridBase, GridBase.id == DataTable.base_id)
        .filter(View.id == view_id, GridBase.owner_id == owner_id)
        .first()
    )
    if v is None:
        raise NotFoundError("View not found")
    return v


def list_views(db: Session, table_id: str) -> List[View]:
    return (
        db.query(View)
        .filter(View.table_id == table_id)
        .order_by(View.created_at.asc(), View.id.asc())
        .all()
    )


def update_view(db: Session, v: View, data) -> View:
    if getattr(data, "name", None) is not None:
        v.name = data.name
    if getattr(data, "config", None) is not None:
        v.config = data.config.model_dump(mode="json")
    db.commit()
    db.refresh(v)
    return v
