"""Database connection and session management."""

from __future__ import annotations

import logging
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from charterdesk.core.config import get_config

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for charterdesk tables."""


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo)
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=10,
        max_overflow=20,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _configure_engine(database_url: str) -> None:
    global _engine, _session_factory
    _engine = build_engine(database_url, echo=get_config().DEBUG)
    _session_factory = build_session_factory(_engine)


def get_engine() -> Engine:
    """Return the active SQLAlchemy engine, building it on first use."""
    if _engine is None:
        _configure_engine(get_config().DATABASE_URL)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _session_factory is None:
        _configure_engine(get_config().DATABASE_URL)
    return _session_factory


def reset_engine(database_url: str | None = None) -> None:
    """Rebind engine/sessionmaker to the given URL (or the configured URL)."""
    _configure_engine(database_url or get_config().DATABASE_URL)


def init_db(engine: Engine | None = None) -> None:
    """Create all tables on the given (or active) engine."""
    from charterdesk.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def verify_database_connection() -> bool:
    """Verify DB connectivity during startup."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:  # pragma: no cover - exercised in deployment.
        logger.exception("database.connection_failed", extra={"event": "database.connection_failed"})
        logger.error("database.connection_failed.details: %s", exc)
        return False
