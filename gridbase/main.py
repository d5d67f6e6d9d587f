# File: /gridbase/main.py | Version: 1.0 | Title: FastAPI App (row query engine + views + index advisory)
from __future__ import annotations

import importlib
import importlib.util

from fastapi import FastAPI

from gridbase.core.config import settings
from gridbase.core.error_handlers import register_domain_handlers
from gridbase.core.logging import configure_logging
from gridbase.crud.indexes import IndexAdvisor
from gridbase.db.session import SessionLocal
from gridbase.observability.sentry import init_sentry_if_configured

# Initialize logging & observability
configure_logging()
init_sentry_if_configured()

# App
app = FastAPI(title="gridbase API")
app.state.index_advisor = IndexAdvisor(
    SessionLocal, enabled=settings.INDEX_ADVISORY_ENABLED
)


def include_if_exists(module_path: str, attr_name: str = "router") -> bool:
    spec = importlib.util.find_spec(module_path)
    if not spec:
        return False
    mod = importlib.import_module(module_path)
    router = getattr(mod, attr_name, None)
    if router is not None:
        app.include_router(router)
        return True
    return False


include_if_exists("gridbase.routers.health")
include_if_exists("gridbase.routers.columns")
include_if_exists("gridbase.routers.rows")
include_if_exists("gridbase.routers.views")

register_domain_handlers(app, std_errors=settings.ENABLE_STD_ERRORS)

# Optional standardized error responses
if settings.ENABLE_STD_ERRORS:
    from gridbase.core.error_handlers import register_exception_handlers

    register_exception_handlers(app)
