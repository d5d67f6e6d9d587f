# File: /gridbase/schemas/query.py | Version: 1.0 | Title: Row query schemas (filters, sort, cursors, pages)
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from gridbase.core.config import settings
from gridbase.models.grid import ColumnType
from gridbase.schemas._base import BaseSchema


class FilterOperator(str, Enum):
    is_empty = "is_empty"
    is_not_empty = "is_not_empty"
    contains = "contains"
    not_contains = "not_contains"
    equals = "equals"
    gt = "gt"
    lt = "lt"


class EmptinessFilter(BaseModel):
    column_id: str
    op: Literal["is_empty", "is_not_empty"]


class TextFilter(BaseModel):
    column_id: str
    op: Literal["contains", "not_contains", "equals"]
    value: str


class NumberFilter(BaseModel):
    column_id: str
    op: Literal["gt", "lt"]
    value: float


Filter = Annotated[
    Union[EmptinessFilter, TextFilter, NumberFilter], Field(discriminator="op")
]


class Sort(BaseModel):
    column_id: str
    direction: Literal["asc", "desc"]
    type: ColumnType


class SortedCursor(BaseModel):
    # value of the sort column at the last returned row (None = row was in the NULL group)
    sort_value: Optional[Union[float, str]] = None
    row_index: int


Cursor = Union[int, SortedCursor]


class RowQuery(BaseModel):
    limit: int = Field(
        default=settings.ROW_QUERY_DEFAULT_LIMIT, ge=1, le=settings.ROW_QUERY_MAX_LIMIT
    )
    cursor: Optional[Cursor] = None
    search: Optional[str] = None
    filters: Optional[List[Filter]] = None
    sort: Optional[Sort] = None


class RowOut(BaseSchema):
    id: str
    row_index: int
    cells: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class RowPage(BaseModel):
    items: List[RowOut]
    next_cursor: Optional[Cursor] = None
    total_count: int
