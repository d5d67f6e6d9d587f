# File: /gridbase/schemas/view.py | Version: 1.0 | Title: Pydantic v2 schema for Saved Views (ConfigDict + from_attributes)
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gridbase.schemas.view_config import ViewConfig, normalize_view_config


class ViewCreate(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    config: ViewConfig = Field(default_factory=ViewConfig)


class ViewUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    config: Optional[ViewConfig] = None


class ViewOut(BaseModel):
    id: str
    table_id: str
    name: str
    config: ViewConfig
    created_at: datetime
    updated_at: datetime

    # Pydantic v2 style
    model_config = ConfigDict(from_attributes=True)

    @field_validator("config", mode="before")
    @classmethod
    def _normalize(cls, raw: Any) -> ViewConfig:
        return normalize_view_config(raw)
