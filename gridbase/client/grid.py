# File: /gridbase/client/grid.py | Version: 1.0 | Title: Grid facade (session + row window + editor + index advisory)
from __future__ import annotations

import time
from typing import Callable, List, Optional

from gridbase.core.config import settings
from gridbase.models.grid import ColumnType
from gridbase.schemas.columns import ColumnOut
from gridbase.schemas.query import Filter, RowOut, Sort
from gridbase.schemas.rows import RowSummary
from gridbase.schemas.view import ViewOut

from .api import GridApiClient
from .editing import CellEditor
from .indexes import IndexAdvisoryCache
from .rows import RowWindow
from .session import GridSession
from .views import save_active_view


class Grid:
    """Everything one open table needs on the client, wired together."""

    def __init__(
        self,
        api: GridApiClient,
        table_id: str,
        *,
        limit: int = settings.ROW_QUERY_DEFAULT_LIMIT,
        debounce_ms: int = settings.SEARCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.session = GridSession(table_id, debounce_ms=debounce_ms, clock=clock)
        self.window = RowWindow(self.session, limit=limit)
        self.editor = CellEditor(api, self.session, self.window)
        self.indexes = IndexAdvisoryCache(api, table_id)
        self.columns: List[ColumnOut] = []
        self.views: List[ViewOut] = []

    @property
    def table_id(self) -> str:
        return self.session.table_id

    def open(self, view_id: Optional[str] = None) -> None:
        """Load columns and views, adopt a view (the first one by default), load page one."""
        self.columns = self.api.list_columns(self.table_id)
        self.views = self.api.list_views(self.table_id)
        view = None
        if view_id is not None:
            view = next((v for v in self.views if v.id == view_id), None)
        elif self.views:
            view = self.views[0]
        self.session.initialize_from_view(view)
        self.indexes.advise_sort(self.session.config.sort)
        self.window.load_first_page(self.api)

    # ---- config ----
    def set_search(self, search: str) -> None:
        self.session.set_search(search)

    def set_filters(self, filters: List[Filter]) -> None:
        self.session.set_filters(filters)

    def set_sort(self, sort: Optional[Sort]) -> None:
        self.session.set_sort(sort)
        self.indexes.advise_sort(sort)

    def toggle_hidden_column(self, column_id: str) -> None:
        self.session.toggle_hidden_column(column_id)

    def save_view(self) -> Optional[ViewOut]:
        return save_active_view(self.api, self.session)

    # ---- rows ----
    def refresh(self) -> bool:
        """Load page one if the query input changed (or nothing is loaded yet)."""
        generation = self.window.generation
        self.window.sync()
        if self.window.generation != generation or not self.window.pages:
            return self.window.load_first_page(self.api)
        return False

    def load_more(self) -> bool:
        return self.window.load_next_page(self.api)

    @property
    def rows(self) -> List[RowOut]:
        return self.window.rows

    @property
    def total_count(self) -> int:
        return self.window.total_count

    def visible_columns(self) -> List[ColumnOut]:
        hidden = set(self.session.config.hidden_column_ids)
        return [c for c in self.columns if c.id not in hidden]

    # ---- editing ----
    def column_type(self, column_id: str) -> ColumnType:
        for c in self.columns:
            if c.id == column_id:
                return c.type
        return ColumnType.TEXT

    def commit_edit(self) -> Optional[RowSummary]:
        cell = self.session.editing_cell
        if cell is None:
            return None
        return self.editor.commit(self.column_type(cell.column_id))
