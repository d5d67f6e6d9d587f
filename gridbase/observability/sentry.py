# File: gridbase/observability/sentry.py | Version: 1.0 | Title: Optional Sentry initialization
import logging
from typing import Optional

from gridbase.core.config import settings

log = logging.getLogger(__name__)


def init_sentry_if_configured(dsn: Optional[str] = None) -> bool:
    dsn = (dsn if dsn is not None else settings.SENTRY_DSN or "").strip()
    if not dsn:
        log.info("Sentry disabled (no SENTRY_DSN).")
        return False

    try:
        import sentry_sdk
    except ImportError:
        log.warning("SENTRY_DSN is set but sentry-sdk is not installed.")
        return False

    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )
    log.info("Sentry initialized.")
    return True
