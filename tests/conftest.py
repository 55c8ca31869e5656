"""
Pytest configuration for rowmapper.

Provides fixtures for:
- A recording executor that answers canned rows without a database
- A `users` catalog matching the schema used throughout the tests
- A seeded SQLite file for integration tests
- Environment isolation for settings
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from rowmapper.catalog import SchemaCatalog
from rowmapper.config import get_settings
from rowmapper.dialects import Dialect
from rowmapper.domain.models import DialectConfig, TableSchema

SETTINGS_ENV_VARS = (
    "DB_DIALECT",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "SQLITE_PATH",
    "DB_CONNECT_RETRIES",
    "TIMESTAMPED_FIELDS",
    "LOG_LEVEL",
    "LOG_JSON",
)

USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT,
    created_at TEXT,
    updated_at TEXT
)
"""
EVENTS_DDL = "CREATE TABLE events (kind TEXT, payload TEXT)"


class RecordingExecutor:
    """
    SqlExecutor stand-in that records every call.

    Queries return the rows primed for their exact SQL text, falling back to
    `default_rows`. `execute` always reports `rowcount` affected rows.
    """

    def __init__(self, rowcount: int = 1, last_id: Any = 1) -> None:
        self.rowcount = rowcount
        self.last_id = last_id
        self.default_rows: List[Dict[str, Any]] = []
        self.canned: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def prime(self, sql: str, rows: List[Dict[str, Any]]) -> None:
        self.canned[sql] = list(rows)

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        self.calls.append(("execute", sql, dict(params or {})))
        return self.rowcount

    def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        self.calls.append(("query", sql, dict(params or {})))
        return [dict(row) for row in self.canned.get(sql, self.default_rows)]

    def last_insert_id(self) -> Any:
        return self.last_id

    @property
    def query_count(self) -> int:
        return len(self.calls)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """
    Keep host environment variables and `.env` files out of Settings.
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor(last_id=42)


def users_tables() -> Dict[str, TableSchema]:
    return {
        "users": TableSchema(
            name="users",
            columns=("name", "email", "created_at", "updated_at"),
            primary_key="id",
        ),
        "events": TableSchema(name="events", columns=("kind", "payload")),
    }


@pytest.fixture
def sqlite_catalog() -> SchemaCatalog:
    return SchemaCatalog(Dialect.SQLITE, users_tables())


@pytest.fixture
def mysql_catalog() -> SchemaCatalog:
    return SchemaCatalog(Dialect.MYSQL, users_tables())


@pytest.fixture
def stamped_sqlite() -> DialectConfig:
    return DialectConfig(kind=Dialect.SQLITE, created_column="created_at", updated_column="updated_at")


@pytest.fixture
def stamped_mysql() -> DialectConfig:
    return DialectConfig(kind=Dialect.MYSQL, created_column="created_at", updated_column="updated_at")


@pytest.fixture
def sqlite_file(tmp_path: Path) -> Path:
    """
    A SQLite database holding a keyed `users` table and a keyless `events` table.
    """
    path = tmp_path / "rowmapper.db"
    conn = sqlite3.connect(path)
    try:
        conn.execute(USERS_DDL)
        conn.execute(EVENTS_DDL)
        conn.commit()
    finally:
        conn.close()
    return path
