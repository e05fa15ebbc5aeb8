from __future__ import annotations

import logging
from typing import Optional

from snowflake_catalog.config import Settings, get_settings


def configure_logging(settings: Optional[Settings] = None) -> int:
    """Apply LOG_LEVEL to the package logger and return the effective level."""
    settings = settings or get_settings()
    log_level_name = (settings.log_level or "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logging.getLogger("snowflake_catalog").setLevel(log_level)
    return log_level
