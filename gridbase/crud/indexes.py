# File: /gridbase/crud/indexes.py | Version: 1.0 | Title: On-demand per-column expression indexes (index advisory)
"""
Secondary indexes for a (table, column) pair, created the first time the
column is sorted or filtered on.

The index expressions are the exact SQL the query engine emits for that
column (see crud.cells), partial on ``table_id``:

  TEXT    -> btree on the cell text, plus a pg_trgm GIN index on PostgreSQL
  NUMBER  -> btree on the float-cast cell

Creation is advisory: it runs off the request path, every statement is
``CREATE INDEX IF NOT EXISTS``, and a failure is logged and dropped. Each key
is attempted at most once per advisor (failed attempts are not retried).
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, ContextManager, List, Optional, Set, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gridbase.crud.cells import cell_number_sql, cell_text_sql, escape_literal
from gridbase.db.session import dialect_name
from gridbase.models.grid import ColumnType

log = logging.getLogger(__name__)

IndexKey = Tuple[str, str]


def index_base_name(table_id: str, column_id: str) -> str:
    t = table_id.replace("-", "")[:12]
    c = column_id.replace("-", "")[:12]
    return f"r_{t}_{c}"


def index_statements(
    table_id: str, column_id: str, column_type: ColumnType, dialect: str
) -> List[str]:
    name = index_base_name(table_id, column_id)
    partial = f"WHERE table_id = '{escape_literal(table_id)}'"

    if column_type == ColumnType.NUMBER:
        expr = cell_number_sql(column_id, dialect)
        return [f'CREATE INDEX IF NOT EXISTS "{name}_n_b" ON table_row (({expr})) {partial}']

    expr = cell_text_sql(column_id, dialect)
    stmts = [f'CREATE INDEX IF NOT EXISTS "{name}_t_b" ON table_row (({expr})) {partial}']
    if dialect == "postgresql":
        stmts.append(
            f'CREATE INDEX IF NOT EXISTS "{name}_t_g" ON table_row '
            f"USING GIN (({expr}) gin_trgm_ops) {partial}"
        )
    return stmts


class IndexAdvisor:
    """
    Process-level advisory index creator.

    ``session_factory`` returns a context manager yielding a Session (a
    ``sessionmaker`` works as-is). ``ensured`` is the dedup set; pass one in
    to scope or reset it.
    """

    def __init__(
        self,
        session_factory: Callable[[], ContextManager[Session]],
        ensured: Optional[Set[IndexKey]] = None,
        enabled: bool = True,
    ):
        self.session_factory = session_factory
        self.ensured: Set[IndexKey] = ensured if ensured is not None else set()
        self.enabled = enabled
        self._lock = threading.Lock()

    def claim(self, table_id: str, column_id: str) -> bool:
        """True the first time a key is seen; the key stays consumed."""
        key = (table_id, column_id)
        with self._lock:
            if key in self.ensured:
                return False
            self.ensured.add(key)
            return True

    def ensure(self, table_id: str, column_id: str, column_type: ColumnType) -> bool:
        if not self.enabled or not self.claim(table_id, column_id):
            return False
        try:
            with self.session_factory() as db:
                for stmt in index_statements(
                    table_id, column_id, ColumnType(column_type), dialect_name(db)
                ):
                    db.execute(text(stmt))
                db.commit()
        except SQLAlchemyError as e:
            log.warning(
                "Index advisory failed for table=%s column=%s: %s", table_id, column_id, e
            )
            return False
        log.info("Indexes ensured for table=%s column=%s", table_id, column_id)
        return True
