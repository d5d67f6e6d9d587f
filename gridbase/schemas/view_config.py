# File: /gridbase/schemas/view_config.py | Version: 1.0 | Title: Saved view configuration + fingerprint
"""
Canonical shape of a view's query state and the fingerprint used for dirty tracking.

Stored blobs are validated on read; anything that does not fit the current
shape falls back to the default configuration instead of failing the read.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError

from gridbase.schemas.query import Filter, Sort

log = logging.getLogger(__name__)


class ViewConfig(BaseModel):
    search: str = ""
    filters: List[Filter] = Field(default_factory=list)
    sort: Optional[Sort] = None
    hidden_column_ids: List[str] = Field(default_factory=list)


def default_view_config() -> ViewConfig:
    return ViewConfig()


def normalize_view_config(raw: Any) -> ViewConfig:
    if isinstance(raw, ViewConfig):
        return raw
    try:
        return ViewConfig.model_validate(raw)
    except ValidationError:
        log.debug("Stored view config did not validate; using default")
        return default_view_config()


def _filter_key(f: dict) -> str:
    value = f.get("value")
    return f"{f['column_id']}|{f['op']}|{'' if value is None else value}"


def config_fingerprint(config: ViewConfig) -> str:
    """
    Deterministic digest of a config.

    Equal for configs that differ only in the order of filters or hidden
    columns; different when search, sort, or the filter/hidden sets differ.
    """
    data = config.model_dump(mode="json")
    filters = sorted(data["filters"], key=_filter_key)
    return json.dumps(
        {
            "search": data["search"],
            "filters": filters,
            "sort": data["sort"],
            "hidden_column_ids": sorted(data["hidden_column_ids"]),
        },
        sort_keys=True,
        separators=(",", ":"),
    )
