# File: /gridbase/core/config.py | Version: 1.0 | Title: Central App Settings (Pydantic v2)
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Database ---
    DATABASE_URL: str = "sqlite:///./gridbase.db"

    # --- API behavior toggles ---
    ENABLE_STD_ERRORS: bool = (
        False  # set True in .env to enable standardized error responses
    )

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # --- Row query engine ---
    ROW_QUERY_DEFAULT_LIMIT: int = 200
    ROW_QUERY_MAX_LIMIT: int = 500
    BULK_ROWS_DEFAULT: int = 100_000
    BULK_ROWS_MAX: int = 200_000
    INDEX_ADVISORY_ENABLED: bool = True

    # --- Client ---
    SEARCH_DEBOUNCE_MS: int = 250

    # --- Observability ---
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # v2-style config
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
