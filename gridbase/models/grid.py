# File: /gridbase/models/grid.py | Version: 1.0 | Path: /gridbase/models/grid.py
from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict
from typing import List as TList
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridbase.db.base_class import Base


def gen_uuid() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


# Cell maps are JSONB on PostgreSQL (->> operator, expression indexes), plain JSON elsewhere
CellMap = JSON().with_variant(JSONB(), "postgresql")


class ColumnType(str, Enum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"


class GridBase(Base):
    __tablename__ = "grid_base"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    owner_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    tables: Mapped[TList["DataTable"]] = relationship(back_populates="base", cascade="all, delete-orphan")


class DataTable(Base):
    __tablename__ = "data_table"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    base_id: Mapped[str] = mapped_column(ForeignKey("grid_base.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(80), nullable=False)

    # Counters; only ever moved by atomic UPDATE ... SET x = x + n
    next_row_index: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    row_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_column_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    base: Mapped["GridBase"] = relationship(back_populates="tables")
    columns: Mapped[TList["TableColumn"]] = relationship(back_populates="table", cascade="all, delete-orphan")


class TableColumn(Base):
    __tablename__ = "table_column"
    __table_args__ = (UniqueConstraint("table_id", "order", name="uq_table_column_order"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    table_id: Mapped[str] = mapped_column(ForeignKey("data_table.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)  # ColumnType value
    order: Mapped[int] = mapped_column(Integer, nullable=False)

    table: Mapped["DataTable"] = relationship(back_populates="columns")


class TableRow(Base):
    __tablename__ = "table_row"
    __table_args__ = (UniqueConstraint("table_id", "row_index", name="uq_table_row_index"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    table_id: Mapped[str] = mapped_column(ForeignKey("data_table.id"), index=True, nullable=False)
    row_index: Mapped[int] = mapped_column(Integer, nullable=False)
    cells: Mapped[Dict[str, Any]] = mapped_column(CellMap, nullable=False, default=dict)
    # Derived from cells; rewritten in the same transaction as every cells change
    search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
