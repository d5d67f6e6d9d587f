# File: /gridbase/crud/filtering.py | Version: 1.0 | Title: Predicate compiler (search + filters + sort validation)
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import and_, not_, or_
from sqlalchemy.sql.elements import ColumnElement

from gridbase.core.errors import GridValidationError
from gridbase.crud.cells import cell_number, cell_text
from gridbase.models.grid import ColumnType, TableColumn, TableRow
from gridbase.schemas.query import FilterOperator, Sort

LIKE_ESCAPE = "\\"


def like_pattern(value: str) -> str:
    """%value% with LIKE wildcards in the value matched literally."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _ilike(expr: ColumnElement, value: str) -> ColumnElement:
    return expr.ilike(like_pattern(value), escape=LIKE_ESCAPE)


# ----------------------
# Validation
# ----------------------
def validate_filters(filters: Sequence, columns: Dict[str, TableColumn]) -> None:
    for f in filters:
        if f.column_id not in columns:
            raise GridValidationError(f"Filter column {f.column_id} is not on this table")


def validate_sort(sort: Optional[Sort], columns: Dict[str, TableColumn]) -> None:
    if sort is None:
        return
    col = columns.get(sort.column_id)
    if col is None:
        raise GridValidationError("Invalid sort column")
    if ColumnType(col.type) != sort.type:
        raise GridValidationError("Sort type mismatch")


# ----------------------
# Compilation
# ----------------------
def _get_single_rule_expr(rule, dialect: str) -> ColumnElement:
    op = rule.op
    v = cell_text(rule.column_id, dialect)

    if op == FilterOperator.is_empty:
        return or_(v.is_(None), v == "")
    if op == FilterOperator.is_not_empty:
        return and_(v.is_not(None), v != "")
    if op == FilterOperator.contains:
        return _ilike(v, rule.value)
    if op == FilterOperator.not_contains:
        # absent cells vacuously pass a negative match
        return or_(v.is_(None), not_(_ilike(v, rule.value)))
    if op == FilterOperator.equals:
        return v == rule.value
    if op in (FilterOperator.gt, FilterOperator.lt):
        n = cell_number(rule.column_id, dialect)
        return n > rule.value if op == FilterOperator.gt else n < rule.value

    raise GridValidationError(f"Unsupported filter operator: {op}")


def search_clause(search: Optional[str]) -> Optional[ColumnElement]:
    if not search:
        return None
    return _ilike(TableRow.search_text, search)


def compile_where(
    table_id: str,
    search: Optional[str],
    filters: Sequence,
    dialect: str,
) -> List[ColumnElement]:
    """
    WHERE clauses shared by the page query and the count query.
    Filter columns must already be validated against the table.
    """
    exprs: List[ColumnElement] = [TableRow.table_id == table_id]
    s = search_clause(search)
    if s is not None:
        exprs.append(s)
    for r in filters:
        exprs.append(_get_single_rule_expr(r, dialect))
    return exprs
