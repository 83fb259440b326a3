"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, and a cached ``get_settings()`` accessor.

This module has no imports from the rest of the ``appointments`` package so
it can be loaded first without circular imports.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # -- Storage ---------------------------------------------------------------
    db_path: Path = Path("data/inquiries.db")
    audit_db_path: Path = Path("data/audit.db")
    # JSON file seeding the in-memory property catalog and user directory.
    directory_fixture_path: Path | None = None

    # -- Retry -----------------------------------------------------------------
    retry_attempts: int = 3
    retry_initial_wait: float = 0.05

    # -- Notifications ---------------------------------------------------------
    notifications_enabled: bool = True

    # -- Observability ---------------------------------------------------------
    sentry_dsn: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    try:
        return Settings()
    except ValidationError as exc:
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)
