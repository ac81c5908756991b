"""Database configuration from the environment and engine creation."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = (
    "POSGRES_USER",
    "POSGRES_PASSWORD",
    "POSGRES_HOST",
    "POSGRES_PORT",
    "POSGRES_DBNAME",
)


class DatabaseConfigError(RuntimeError):
    """Raised when the database connection settings are incomplete."""


def load_database_url(environ: Mapping[str, str] | None = None) -> str:
    """Build the PostgreSQL URL from ``environ``.

    Without an explicit mapping, a ``.env`` file in the working directory is
    loaded first (without overriding existing variables) and the process
    environment is used.
    """
    if environ is None:
        dotenv_path = Path(".env")
        if dotenv_path.is_file():
            load_dotenv(dotenv_path)
        else:
            logger.info("No .env file found, using system environment variables")
        environ = os.environ

    user, password, host, port, dbname = (environ.get(key, "") for key in _REQUIRED_KEYS)
    if not all((user, password, host, port, dbname)):
        raise DatabaseConfigError(
            "One or more required database connection parameters are missing"
        )
    return f"postgresql://{user}:{password}@{host}:{port}/{dbname}"


def connect(url: str) -> Engine:
    """Create an engine for ``url`` and verify that it can connect."""
    engine = create_engine(url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        engine.dispose()
        raise
    logger.info("Connected to the database")
    return engine