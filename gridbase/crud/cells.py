# File: /gridbase/crud/cells.py | Version: 1.0 | Title: Typed cell expressions, casters and search text
"""
Rows keep their data in a schemaless ``cells`` map keyed by column id.
Everything that reads a cell by column goes through the expressions built
here, so queries and on-demand indexes use byte-identical SQL:

  TEXT   -> the cell as text            (PostgreSQL: cells ->> 'id')
  NUMBER -> the cell as float; absent, empty or non-numeric -> NULL

Column ids are inlined as literals (indexes are keyed on the literal
expression, which a bound parameter would not match). Callers must only pass
ids that were validated against the table's own columns.
"""
from __future__ import annotations

import json
import math
from typing import Any, Dict, Optional, Union

from sqlalchemy import Float, String, literal_column
from sqlalchemy.sql.elements import ColumnElement

from gridbase.core.errors import GridValidationError
from gridbase.models.grid import ColumnType

Scalar = Union[str, int, float]


def escape_literal(value: str) -> str:
    return value.replace("'", "''")


# ----------------------
# SQL fragments
# ----------------------
def cell_text_sql(column_id: str, dialect: str) -> str:
    key = escape_literal(column_id)
    if dialect == "postgresql":
        return f"(cells ->> '{key}')"
    # json_extract keeps JSON types; cast so numbers read back as text like ->> does
    return f"CAST(json_extract(cells, '$.\"{key}\"') AS TEXT)"


# PostgreSQL: a plain decimal / scientific literal, surrounding whitespace allowed
NUMERIC_TEXT_PATTERN = r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$"


def cell_number_sql(column_id: str, dialect: str) -> str:
    """
    The cell as a float, or NULL when it is absent, empty, or text that does
    not parse as a number. The guard keeps PostgreSQL from raising on a bad
    cast and SQLite from reading a numeric prefix ("12abc" -> 12).
    """
    text_sql = cell_text_sql(column_id, dialect)
    if dialect == "postgresql":
        return (
            f"(CASE WHEN {text_sql} ~ '{NUMERIC_TEXT_PATTERN}' "
            f"THEN {text_sql}::double precision END)"
        )
    path = f"'$.\"{escape_literal(column_id)}\"'"
    raw = f"json_extract(cells, {path})"
    trimmed = f"trim({raw})"
    return (
        f"(CASE json_type(cells, {path}) "
        f"WHEN 'integer' THEN CAST({raw} AS REAL) "
        f"WHEN 'real' THEN {raw} "
        f"WHEN 'text' THEN CASE WHEN {trimmed} GLOB '*[0-9]*' "
        f"AND {trimmed} NOT GLOB '*[^0-9.eE+-]*' "
        f"THEN CAST({trimmed} AS REAL) END END)"
    )


# ----------------------
# SQLAlchemy expressions
# ----------------------
def cell_text(column_id: str, dialect: str) -> ColumnElement:
    return literal_column(cell_text_sql(column_id, dialect), type_=String)


def cell_number(column_id: str, dialect: str) -> ColumnElement:
    return literal_column(cell_number_sql(column_id, dialect), type_=Float)


def cell_value(column_id: str, column_type: ColumnType, dialect: str) -> ColumnElement:
    if column_type == ColumnType.NUMBER:
        return cell_number(column_id, dialect)
    return cell_text(column_id, dialect)


# ----------------------
# Python-side casting
# ----------------------
def format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        n = float(value)
    elif isinstance(value, str):
        try:
            n = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return n if math.isfinite(n) else None


def cast_cell_value(column_type: ColumnType, value: Any) -> Optional[Scalar]:
    """
    Value to store for a cell, or None when the cell should be removed.

    NUMBER cells are stored as JSON numbers (integral values as ints),
    TEXT cells as strings.
    """
    if value is None or value == "":
        return None

    if column_type == ColumnType.NUMBER:
        n = as_number(value)
        if n is None:
            raise GridValidationError("Value for a NUMBER column must be numeric")
        return int(n) if n.is_integer() else n

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value
    raise GridValidationError("Value for a TEXT column must be a string")


def cell_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return ""


def build_search_text(cells: Dict[str, Any]) -> str:
    return " ".join(cell_to_text(v) for v in cells.values())


def sort_value_from_cells(
    column_id: str, column_type: ColumnType, cells: Optional[Dict[str, Any]]
) -> Optional[Scalar]:
    """The sort column's value at a row, as the keyset cursor carries it."""
    raw = (cells or {}).get(column_id)
    if raw is None:
        return None
    if column_type == ColumnType.NUMBER:
        return as_number(raw)
    return cell_to_text(raw)
