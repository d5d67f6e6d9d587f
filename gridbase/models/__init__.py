# File: /gridbase/models/__init__.py | Version: 1.0 | Title: Models Package Exports
from .grid import ColumnType, DataTable, GridBase, TableColumn, TableRow
from .view import View

__all__ = [
    "ColumnType",
    "GridBase",
    "DataTable",
    "TableColumn",
    "TableRow",
    "View",
]
