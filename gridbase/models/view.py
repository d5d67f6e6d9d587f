# File: /gridbase/models/view.py | Version: 1.0 | Title: SQLAlchemy model for Saved Views
from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String

from gridbase.db.base_class import Base
from gridbase.models.grid import utcnow


class View(Base):
    __tablename__ = "views"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    table_id = Column(String, ForeignKey("data_table.id"), nullable=False)

    name = Column(String(80), nullable=False)

    # {search, filters, sort, hidden_column_ids}; validated on read, see schemas.view_config
    config = Column(JSON, nullable=True)

    # sub-second timestamps so list order follows creation order
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (Index("ix_views_table", "table_id"),)
