# File: /gridbase/crud/grid.py | Version: 1.0 | Title: Bases, tables and columns (ownership lookups + ordered column create)
from __future__ import annotations

from typing import Dict, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from gridbase.core.errors import NotFoundError
from gridbase.models.grid import ColumnType, DataTable, GridBase, TableColumn

# ---------------------------
# Bases & tables (seeding helpers; no public CRUD routes)
# ---------------------------


def create_base(db: Session, *, owner_id: str, name: str) -> GridBase:
    try:
        base = GridBase(owner_id=owner_id, name=name)
        db.add(base)
        db.commit()
        db.refresh(base)
        return base
    except Exception:
        db.rollback()
        raise


def create_table(db: Session, *, base_id: str, name: str) -> DataTable:
    try:
        table = DataTable(base_id=base_id, name=name)
        db.add(table)
        db.commit()
        db.refresh(table)
        return table
    except Exception:
        db.rollback()
        raise


def get_owned_table(db: Session, table_id: str, owner_id: str) -> DataTable:
    table = db.execute(
        select(DataTable)
        .join(GridBase, GridBase.id == DataTable.base_id)
        .where(DataTable.id == table_id, GridBase.owner_id == owner_id)
    ).scalar_one_or_none()
    if table is None:
        raise NotFoundError("Table not found")
    return table


# ---------------------------
# Columns
# ---------------------------


def list_columns(db: Session, table_id: str) -> List[TableColumn]:
    return list(
        db.execute(
            select(TableColumn)
            .where(TableColumn.table_id == table_id)
            .order_by(TableColumn.order.asc())
        )
        .scalars()
        .all()
    )


def columns_by_id(db: Session, table_id: str) -> Dict[str, TableColumn]:
    return {c.id: c for c in list_columns(db, table_id)}


def get_column(db: Session, table_id: str, column_id: str) -> TableColumn:
    col = db.execute(
        select(TableColumn).where(
            TableColumn.id == column_id, TableColumn.table_id == table_id
        )
    ).scalar_one_or_none()
    if col is None:
        raise NotFoundError("Column not found")
    return col


def create_column(
    db: Session, *, table_id: str, name: str, type: ColumnType
) -> TableColumn:
    """
    Bump the table's column counter and insert the column in one transaction,
    so concurrent creates never share an ``order``.
    """
    try:
        bumped = db.execute(
            update(DataTable)
            .where(DataTable.id == table_id)
            .values(next_column_order=DataTable.next_column_order + 1)
            .returning(DataTable.next_column_order)
            .execution_options(synchronize_session=False)
        ).scalar_one()

        col = TableColumn(
            table_id=table_id,
            name=name,
            type=ColumnType(type).value,
            order=bumped - 1,
        )
        db.add(col)
        db.commit()
        db.refresh(col)
        return col
    except Exception:
        db.rollback()
        raise
