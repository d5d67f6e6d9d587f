# File: /gridbase/client/__init__.py | Version: 1.0 | Title: Python client for the row query API
from .api import GridApiClient, GridApiError
from .grid import Grid
from .session import CellKey, GridSession

__all__ = ["CellKey", "Grid", "GridApiClient", "GridApiError", "GridSession"]
