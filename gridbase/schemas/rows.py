# File: /gridbase/schemas/rows.py | Version: 1.0 | Title: Cell edit + bulk generation schemas
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from gridbase.core.config import settings
from gridbase.schemas._base import BaseSchema


class CellValueUpdate(BaseModel):
    # None or "" clears the cell
    value: Optional[Union[float, str]] = None


class RowSummary(BaseSchema):
    id: str
    row_index: int
    cells: Dict[str, Any] = Field(default_factory=dict)
    updated_at: datetime


class BulkRowsCreate(BaseModel):
    count: int = Field(default=settings.BULK_ROWS_DEFAULT, ge=1, le=settings.BULK_ROWS_MAX)


class BulkRowsOut(BaseModel):
    start_row_index: int
    count: int
