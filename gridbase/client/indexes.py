# File: /gridbase/client/indexes.py | Version: 1.0 | Title: Per-session index advisory requests
from __future__ import annotations

import logging
from typing import Optional, Set

from gridbase.schemas.query import Sort

from .api import GridApiClient, GridApiError

logger = logging.getLogger(__name__)


class IndexAdvisoryCache:
    """
    Asks the server for a column's indexes the first time the column becomes
    the active sort in this session. Failures are logged and not retried.
    """

    def __init__(self, api: GridApiClient, table_id: str, requested: Optional[Set[str]] = None):
        self.api = api
        self.table_id = table_id
        self.requested: Set[str] = requested if requested is not None else set()

    def advise(self, column_id: str) -> bool:
        if column_id in self.requested:
            return False
        self.requested.add(column_id)
        try:
            self.api.ensure_indexes(self.table_id, column_id)
        except GridApiError as e:
            logger.warning("ensure-indexes for %s failed: %s", column_id, e.message)
        return True

    def advise_sort(self, sort: Optional[Sort]) -> bool:
        if sort is None:
            return False
        return self.advise(sort.column_id)
