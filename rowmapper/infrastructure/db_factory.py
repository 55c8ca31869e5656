"""
Database engine factory for rowmapper.

Builds SQLAlchemy engines for the two supported dialects and opens the single
logical connection an executor works on. Each statement runs in AUTOCOMMIT
mode, so every CRUD call is its own unit of work.

Includes retry logic for transient connection failures using tenacity. Only
connection establishment is retried; statements are never retried.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import OperationalError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from rowmapper.config import Settings, get_settings
from rowmapper.dialects import Dialect
from rowmapper.utils.logging import get_logger

log = get_logger(__name__)


def build_url(settings: Optional[Settings] = None) -> URL:
    """
    Compose a SQLAlchemy URL from settings.

    Parameters
    ----------
    settings : Settings | None
        Settings to read; defaults to the cached process settings.

    Returns
    -------
    URL
        `mysql+pymysql://...` for MySQL, `sqlite:///<path>` for SQLite.
    """
    settings = settings or get_settings()
    kind = Dialect.parse(settings.db_dialect)
    if kind is Dialect.MYSQL:
        return URL.create(
            "mysql+pymysql",
            username=settings.db_user,
            password=settings.db_password or None,
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
        )
    return URL.create("sqlite", database=settings.sqlite_path)


def create_db_engine(settings: Optional[Settings] = None) -> Engine:
    """
    Create an engine whose connections autocommit every statement.
    """
    url = build_url(settings)
    log.debug("Creating engine", extra={"url": url.render_as_string(hide_password=True)})
    return create_engine(url, isolation_level="AUTOCOMMIT")


def open_connection(engine: Engine, attempts: int = 3) -> Connection:
    """
    Acquire a dedicated connection with automatic retry.

    Retries up to `attempts` times with exponential backoff for transient
    connection errors.

    Raises
    ------
    sqlalchemy.exc.OperationalError
        If connection fails after all retry attempts.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )
    return retrying(engine.connect)


__all__ = ["build_url", "create_db_engine", "open_connection"]
