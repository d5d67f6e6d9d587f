# File: /gridbase/client/api.py | Version: 1.0 | Title: HTTP client for the gridbase API (httpx)
from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

import httpx

from gridbase.schemas.columns import ColumnOut
from gridbase.schemas.query import RowPage, RowQuery
from gridbase.schemas.rows import BulkRowsOut, RowSummary
from gridbase.schemas.view import ViewOut
from gridbase.schemas.view_config import ViewConfig

logger = logging.getLogger(__name__)


class GridApiError(RuntimeError):
    """Non-2xx response, or the request never got one (status_code is None)."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def _detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict):
        if "detail" in body:
            return str(body["detail"])
        err = body.get("error")
        if isinstance(err, dict) and "message" in err:
            return str(err["message"])
    return resp.text


class GridApiClient:
    """
    Thin wrapper over an ``httpx.Client``. Any client with the right
    base_url works, including FastAPI's TestClient.
    """

    def __init__(self, http: httpx.Client, owner_id: str):
        self.http = http
        self.headers = {"X-Owner-Id": owner_id}

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            resp = self.http.request(method, path, json=json, headers=self.headers)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise GridApiError(None, str(e)) from e
        if resp.status_code >= 400:
            raise GridApiError(resp.status_code, _detail(resp))
        return resp.json()

    # ---- rows ----
    def query_rows(self, table_id: str, query: RowQuery) -> RowPage:
        data = self._request(
            "POST",
            f"/tables/{table_id}/rows/query",
            json=query.model_dump(mode="json", exclude_none=True),
        )
        return RowPage.model_validate(data)

    def update_cell(
        self, table_id: str, row_id: str, column_id: str, value: Union[str, int, float, None]
    ) -> RowSummary:
        data = self._request(
            "PUT",
            f"/tables/{table_id}/rows/{row_id}/cells/{column_id}",
            json={"value": value},
        )
        return RowSummary.model_validate(data)

    def bulk_generate(self, table_id: str, count: int) -> BulkRowsOut:
        data = self._request("POST", f"/tables/{table_id}/rows/bulk", json={"count": count})
        return BulkRowsOut.model_validate(data)

    # ---- columns ----
    def list_columns(self, table_id: str) -> List[ColumnOut]:
        data = self._request("GET", f"/tables/{table_id}/columns")
        return [ColumnOut.model_validate(c) for c in data]

    def ensure_indexes(self, table_id: str, column_id: str) -> bool:
        data = self._request("POST", f"/tables/{table_id}/columns/{column_id}/ensure-indexes")
        return bool(data.get("ok"))

    # ---- views ----
    def list_views(self, table_id: str) -> List[ViewOut]:
        data = self._request("GET", f"/tables/{table_id}/views")
        return [ViewOut.model_validate(v) for v in data]

    def update_view(
        self, view_id: str, *, name: Optional[str] = None, config: Optional[ViewConfig] = None
    ) -> ViewOut:
        payload: dict = {}
        if name is not None:
            payload["name"] = name
        if config is not None:
            payload["config"] = config.model_dump(mode="json")
        data = self._request("PATCH", f"/views/{view_id}", json=payload)
        return ViewOut.model_validate(data)
