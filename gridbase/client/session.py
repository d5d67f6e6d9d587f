# File: /gridbase/client/session.py | Version: 1.0 | Title: Per-table grid session state (view config, selection, editing)
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Union

from gridbase.core.config import settings
from gridbase.schemas.query import Filter, Sort
from gridbase.schemas.view import ViewOut
from gridbase.schemas.view_config import (
    ViewConfig,
    config_fingerprint,
    default_view_config,
    normalize_view_config,
)

from .debounce import Debouncer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellKey:
    row_id: str
    column_id: str


class GridSession:
    """
    Client-side state for one open table.

    ``config`` is the live view configuration. ``fingerprint`` is recomputed
    after every mutation and compared with ``saved_fingerprint`` to decide
    whether the active view has unsaved changes. Any fingerprint change
    clears the selected and edited cell.
    """

    def __init__(
        self,
        table_id: str,
        *,
        debounce_ms: int = settings.SEARCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.table_id = table_id
        self.active_view_id: Optional[str] = None
        self.config: ViewConfig = default_view_config()
        self.fingerprint = config_fingerprint(self.config)
        self.saved_fingerprint = self.fingerprint
        self.initialized = False
        self.search_input: Debouncer[str] = Debouncer("", debounce_ms, clock)

        self.active_cell: Optional[CellKey] = None
        self.editing_cell: Optional[CellKey] = None
        self.editor_value = ""

    # ---- view lifecycle ----
    def initialize_from_view(self, view: Union[ViewOut, dict, None]) -> None:
        """Adopt a saved view as the live config, or the defaults when there is none."""
        if view is None:
            self.active_view_id = None
            config = default_view_config()
        elif isinstance(view, ViewOut):
            self.active_view_id = view.id
            config = view.config
        else:
            self.active_view_id = view.get("id")
            config = normalize_view_config(view.get("config"))
        self.config = config.model_copy(deep=True)
        self.search_input.reset(self.config.search)
        self._refresh()
        self.saved_fingerprint = self.fingerprint
        self.initialized = True
        logger.debug("session %s initialized from view %s", self.table_id, self.active_view_id)

    @property
    def is_dirty(self) -> bool:
        return self.fingerprint != self.saved_fingerprint

    def mark_saved(self) -> None:
        self.saved_fingerprint = self.fingerprint

    # ---- config mutations ----
    def set_search(self, search: str) -> None:
        self._update(search=search)
        self.search_input.push(search)

    def set_filters(self, filters: Iterable[Filter]) -> None:
        self._update(filters=list(filters))

    def add_filter(self, flt: Filter) -> None:
        self._update(filters=[*self.config.filters, flt])

    def remove_filter(self, index: int) -> None:
        filters = list(self.config.filters)
        del filters[index]
        self._update(filters=filters)

    def set_sort(self, sort: Optional[Sort]) -> None:
        self._update(sort=sort)

    def toggle_hidden_column(self, column_id: str) -> None:
        hidden = list(self.config.hidden_column_ids)
        if column_id in hidden:
            hidden.remove(column_id)
        else:
            hidden.append(column_id)
        self._update(hidden_column_ids=hidden)

    def set_hidden_column_ids(self, column_ids: Iterable[str]) -> None:
        self._update(hidden_column_ids=list(column_ids))

    def debounced_search(self) -> str:
        return self.search_input.poll()

    def affects_membership(self) -> bool:
        """True when an edited cell could change which rows match or how they order."""
        c = self.config
        return bool(c.search.strip()) or bool(c.filters) or c.sort is not None

    # ---- selection / editing ----
    def select_cell(self, row_id: str, column_id: str) -> None:
        self.active_cell = CellKey(row_id, column_id)

    def start_editing(self, row_id: str, column_id: str, initial: str = "") -> None:
        self.active_cell = CellKey(row_id, column_id)
        self.editing_cell = self.active_cell
        self.editor_value = initial

    def stop_editing(self) -> None:
        self.editing_cell = None
        self.editor_value = ""

    def clear_selection(self) -> None:
        self.active_cell = None
        self.stop_editing()

    def visible_column_ids(self, column_ids: List[str]) -> List[str]:
        hidden = set(self.config.hidden_column_ids)
        return [c for c in column_ids if c not in hidden]

    # ---- internals ----
    def _update(self, **changes) -> None:
        self.config = self.config.model_copy(update=changes)
        self._refresh()

    def _refresh(self) -> None:
        fingerprint = config_fingerprint(self.config)
        if fingerprint != self.fingerprint:
            self.clear_selection()
        self.fingerprint = fingerprint
