# File: /gridbase/client/editing.py | Version: 1.0 | Title: Optimistic single-cell edit protocol
from __future__ import annotations

import logging
import math
from typing import Optional, Union

from gridbase.models.grid import ColumnType
from gridbase.schemas.rows import RowSummary

from .api import GridApiClient, GridApiError
from .rows import RowWindow
from .session import GridSession

logger = logging.getLogger(__name__)

CellInput = Union[str, int, float, None]


def parse_editor_value(raw: str, column_type: ColumnType) -> CellInput:
    """Editor text to a cell value. Blank text (and unparseable numbers) clear the cell."""
    text = raw.strip()
    if not text:
        return None
    if column_type == ColumnType.NUMBER:
        try:
            num = float(text)
        except ValueError:
            return None
        if not math.isfinite(num):
            return None
        return int(num) if num.is_integer() else num
    return raw


class CellEditor:
    def __init__(self, api: GridApiClient, session: GridSession, window: RowWindow):
        self.api = api
        self.session = session
        self.window = window

    def commit(self, column_type: ColumnType) -> Optional[RowSummary]:
        """Commit the editor for the cell being edited; no-op when nothing is."""
        cell = self.session.editing_cell
        if cell is None:
            return None
        value = parse_editor_value(self.session.editor_value, column_type)
        self.session.stop_editing()
        return self.apply(cell.row_id, cell.column_id, value)

    def apply(self, row_id: str, column_id: str, value: CellInput) -> RowSummary:
        """
        Patch the cached pages, write through, and roll the cache back if the
        server refuses. When search/filters/sort are active the edit may move
        the row in or out of the window, so the pages are refetched.
        """
        snapshot = self.window.snapshot()
        self.window.patch_cell(row_id, column_id, value)
        try:
            summary = self.api.update_cell(self.session.table_id, row_id, column_id, value)
        except GridApiError as e:
            logger.warning("cell update %s/%s failed (%s): %s", row_id, column_id, e.status_code, e.message)
            self.window.restore(snapshot)
            raise
        if self.session.affects_membership():
            self.window.refetch(self.api)
        return summary
