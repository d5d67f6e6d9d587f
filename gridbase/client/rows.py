# File: /gridbase/client/rows.py | Version: 1.0 | Title: Cached page window over the row query endpoint
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, List, Optional, Union

from gridbase.core.config import settings
from gridbase.schemas.query import RowOut, RowPage, RowQuery

from .session import GridSession

if TYPE_CHECKING:
    from .api import GridApiClient

logger = logging.getLogger(__name__)


def query_key(query: RowQuery) -> str:
    """Identity of a query input, ignoring the cursor."""
    return query.model_dump_json(exclude={"cursor", "limit"})


@dataclass(frozen=True)
class PageRequest:
    key: str
    generation: int
    query: RowQuery


class RowWindow:
    """
    Pages loaded so far for the session's current query input.

    A change of search (after debounce), filters or sort starts a new
    generation and drops the cached pages. Responses issued for an older
    generation are discarded by ``receive``.
    """

    def __init__(self, session: GridSession, limit: int = settings.ROW_QUERY_DEFAULT_LIMIT):
        self.session = session
        self.limit = limit
        self.pages: List[RowPage] = []
        self.generation = 0
        self._key: Optional[str] = None

    def query_input(self) -> RowQuery:
        cfg = self.session.config
        search = self.session.debounced_search().strip()
        return RowQuery(
            limit=self.limit,
            search=search or None,
            filters=list(cfg.filters) or None,
            sort=cfg.sort,
        )

    def sync(self) -> RowQuery:
        """Start a new generation if the query input changed since the last call."""
        query = self.query_input()
        key = query_key(query)
        if key != self._key:
            self._key = key
            self.generation += 1
            self.pages = []
        return query

    # ---- two-step loading: request, then receive ----
    def next_request(self) -> Optional[PageRequest]:
        query = self.sync()
        if self.pages:
            cursor = self.pages[-1].next_cursor
            if cursor is None:
                return None
            query = query.model_copy(update={"cursor": cursor})
        return PageRequest(self._key or "", self.generation, query)

    def receive(self, request: PageRequest, page: RowPage) -> bool:
        self.sync()
        if request.generation != self.generation:
            logger.debug("dropping page from stale generation %s", request.generation)
            return False
        expected = self.pages[-1].next_cursor if self.pages else None
        if request.query.cursor != expected:
            logger.debug("dropping out-of-sequence page")
            return False
        self.pages.append(page)
        return True

    # ---- synchronous helpers ----
    def load_first_page(self, api: "GridApiClient") -> bool:
        self.sync()
        self.pages = []
        return self.load_next_page(api)

    def load_next_page(self, api: "GridApiClient") -> bool:
        request = self.next_request()
        if request is None:
            return False
        page = api.query_rows(self.session.table_id, request.query)
        return self.receive(request, page)

    def refetch(self, api: "GridApiClient") -> None:
        """Reload as many pages as were loaded, from the first one."""
        loaded = max(len(self.pages), 1)
        self.load_first_page(api)
        while len(self.pages) < loaded and self.has_next_page:
            if not self.load_next_page(api):
                break

    # ---- views over the cache ----
    @property
    def rows(self) -> List[RowOut]:
        return [r for p in self.pages for r in p.items]

    @property
    def total_count(self) -> int:
        return self.pages[0].total_count if self.pages else 0

    @property
    def has_next_page(self) -> bool:
        return bool(self.pages) and self.pages[-1].next_cursor is not None

    def find_row(self, row_id: str) -> Optional[RowOut]:
        return next((r for r in self.rows if r.id == row_id), None)

    # ---- optimistic edits ----
    def snapshot(self) -> List[RowPage]:
        return [p.model_copy(deep=True) for p in self.pages]

    def restore(self, pages: List[RowPage]) -> None:
        self.pages = pages

    def patch_cell(self, row_id: str, column_id: str, value: Union[str, int, float, None]) -> bool:
        row = self.find_row(row_id)
        if row is None:
            return False
        cells = dict(row.cells)
        if value is None:
            cells.pop(column_id, None)
        else:
            cells[column_id] = value
        row.cells = cells
        row.updated_at = datetime.now(UTC)
        return True
