"""Configuration module for charterdesk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from charterdesk.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    LOG_LEVEL: str
    LOG_FILE: str
    UNKNOWN_PLACEHOLDER: str
    STANDING_RIDERS: str
    STALE_AFTER_HOURS: float

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=False)

    config = Config(
        APP_NAME="charterdesk",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./charterdesk.db"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        UNKNOWN_PLACEHOLDER=os.getenv("UNKNOWN_PLACEHOLDER", "TBN"),
        STANDING_RIDERS=os.getenv("STANDING_RIDERS", "Nova Rider clauses apply."),
        STALE_AFTER_HOURS=float(os.getenv("STALE_AFTER_HOURS", "6")),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if not config.UNKNOWN_PLACEHOLDER.strip():
        raise ConfigurationError("UNKNOWN_PLACEHOLDER must not be blank.")
    if not config.STANDING_RIDERS.strip():
        raise ConfigurationError("STANDING_RIDERS must not be blank.")
    if config.STALE_AFTER_HOURS <= 0:
        raise ConfigurationError("STALE_AFTER_HOURS must be > 0.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
