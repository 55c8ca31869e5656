"""
SQL executor contract and its SQLAlchemy implementation.

The catalog, mapper and facade only talk to the `SqlExecutor` protocol:
statements go in as text with `:name` placeholders plus a parameter mapping,
and rows come back as plain dicts. Driver errors propagate unmodified.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Engine

from rowmapper.infrastructure.db_factory import open_connection
from rowmapper.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class SqlExecutor(Protocol):
    """
    Transport used by rowmapper.

    Implementations shared across threads must serialize statements and
    report `last_insert_id` per calling thread.
    """

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Run a statement without a result set and return the affected-row count."""
        ...

    def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Run a statement and return every row as a column->value dict."""
        ...

    def last_insert_id(self) -> Any:
        """Identifier assigned by the calling thread's most recent insert-style `execute`."""
        ...

    @property
    def query_count(self) -> int:
        """Number of statements run so far."""
        ...


class SqlAlchemyExecutor:
    """
    Executor over a single SQLAlchemy connection.

    Parameters
    ----------
    connection : Connection
        An open connection, normally created in AUTOCOMMIT mode by
        `rowmapper.infrastructure.db_factory.create_db_engine`.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        self._lock = threading.Lock()
        self._query_count = 0
        self._local = threading.local()

    @classmethod
    def connect(cls, engine: Engine, attempts: int = 3) -> "SqlAlchemyExecutor":
        return cls(open_connection(engine, attempts=attempts))

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def query_count(self) -> int:
        return self._query_count

    def _run(self, sql: str, params: Optional[Mapping[str, Any]]) -> CursorResult:
        # Caller must hold self._lock until it is done with the result.
        log.debug("Executing statement", extra={"sql": sql})
        result = self._connection.execute(text(sql), dict(params or {}))
        self._query_count += 1
        return result

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        with self._lock:
            result = self._run(sql, params)
            try:
                self._local.last_insert_id = result.lastrowid
                return result.rowcount
            finally:
                result.close()

    def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        with self._lock:
            result = self._run(sql, params)
            return [dict(row) for row in result.mappings().all()]

    def last_insert_id(self) -> Any:
        """Id from the calling thread's most recent `execute`."""
        return getattr(self._local, "last_insert_id", None)

    def close(self) -> None:
        self._connection.close()


__all__ = ["SqlExecutor", "SqlAlchemyExecutor"]
