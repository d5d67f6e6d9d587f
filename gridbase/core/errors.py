# File: /gridbase/core/errors.py | Version: 1.0 | Title: Domain errors raised by crud/query code
from __future__ import annotations


class GridError(Exception):
    """Base class for errors the API maps to a client-visible response."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GridError):
    """Table/row/column/view is absent or not owned by the caller."""

    status_code = 404


class GridValidationError(GridError):
    """Malformed filter/sort/cursor or cell value, sort type mismatch, or a foreign column."""

    status_code = 400
