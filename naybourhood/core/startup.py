"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from naybourhood.core.config import get_config
from naybourhood.core.exceptions import DatabaseError
from naybourhood.core.logging_config import configure_logging
from naybourhood.database.db import get_active_database_url, init_db, verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config() -> bool:
    """Fail-fast config and connectivity checks. Returns whether the database is reachable."""
    config = get_config()
    database_ok = verify_database_connection()
    active_database_url = get_active_database_url()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise DatabaseError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )

    if config.is_production and active_database_url.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": active_database_url.split("://", 1)[0],
            "llm_enabled": config.llm_enabled,
            "twenty_eight_day_override": config.SCORING_28_DAY_OVERRIDES_DISQUALIFICATION,
        },
    )
    return database_ok


def bootstrap() -> None:
    """Initialize logging, validate runtime configuration and create tables."""
    configure_logging()
    if validate_startup_config():
        init_db()
