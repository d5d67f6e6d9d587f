# File: /gridbase/dependencies.py | Version: 1.0 | Path: /gridbase/dependencies.py
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from gridbase.crud import grid as crud_grid
from gridbase.crud.indexes import IndexAdvisor
from gridbase.db.session import get_db
from gridbase.models.grid import DataTable


def get_owner_id(x_owner_id: Optional[str] = Header(default=None)) -> str:
    """
    Caller context: the owner whose bases are visible to this request.
    Identity is established upstream; this service only scopes by it.
    """
    if not x_owner_id or not x_owner_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing owner context"
        )
    return x_owner_id.strip()


def get_owned_table(
    table_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
) -> DataTable:
    return crud_grid.get_owned_table(db, table_id, owner_id)


def get_index_advisor(request: Request) -> IndexAdvisor:
    return request.app.state.index_advisor
