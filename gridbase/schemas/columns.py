# File: /gridbase/schemas/columns.py | Version: 1.0 | Title: Column schemas
from __future__ import annotations

from pydantic import BaseModel, Field

from gridbase.models.grid import ColumnType
from gridbase.schemas._base import BaseSchema


class ColumnCreate(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    type: ColumnType


class ColumnOut(BaseSchema):
    id: str
    name: str
    type: ColumnType
    order: int
