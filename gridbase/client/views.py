# File: /gridbase/client/views.py | Version: 1.0 | Title: Saving the live config back to the active view
from __future__ import annotations

import logging
from typing import Optional

from gridbase.schemas.view import ViewOut

from .api import GridApiClient
from .session import GridSession

logger = logging.getLogger(__name__)


def save_active_view(api: GridApiClient, session: GridSession) -> Optional[ViewOut]:
    """Persist the live config to the active view; returns None when there is no active view."""
    if session.active_view_id is None:
        return None
    saved_fingerprint = session.fingerprint
    view = api.update_view(session.active_view_id, config=session.config)
    # config may have changed while the request was in flight
    session.saved_fingerprint = saved_fingerprint
    logger.debug("saved view %s", view.id)
    return view
