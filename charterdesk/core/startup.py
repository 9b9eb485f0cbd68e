"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from charterdesk.core.config import get_config
from charterdesk.core.logging_config import configure_logging
from charterdesk.database.db import get_engine, init_db, verify_database_connection
from charterdesk.database.deal_store import SqlDealRepository
from charterdesk.services.negotiation_desk import NegotiationDesk

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    if not verify_database_connection():
        raise RuntimeError("Database connectivity check failed.")

    if config.is_production and config.DATABASE_URL.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": config.DATABASE_URL.split("://", 1)[0],
        },
    )


def bootstrap() -> NegotiationDesk:
    """Initialize logging, validate configuration and return a database-backed desk."""
    configure_logging()
    validate_startup_config()
    init_db(get_engine())
    return NegotiationDesk(SqlDealRepository())
