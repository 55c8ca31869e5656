"""
Integration tests against a real SQLite file through the SQLAlchemy executor.

These need no server: each test gets a fresh database from the `sqlite_file`
fixture holding a keyed `users` table and a keyless `events` table.
"""

from __future__ import annotations

from pathlib import Path

import sqlite3

import pytest

from rowmapper import Database, load_settings
from rowmapper.errors import ConfigurationError, MissingPrimaryKeyError, QueryError, ResultError

STAMPED = {"created": "created_at", "updated": "updated_at"}


@pytest.fixture
def db(sqlite_file: Path):
    settings = load_settings(db_dialect="sqlite", sqlite_path=str(sqlite_file), timestamped_fields=STAMPED)
    with Database.connect(settings) as database:
        yield database


class TestSchemaDiscovery:
    def test_catalog_matches_seeded_tables(self, db: Database) -> None:
        assert sorted(db.catalog) == ["events", "users"]
        users = db.catalog.lookup("users")
        assert users.primary_key == "id"
        assert users.columns == ("name", "email", "created_at", "updated_at")
        assert db.catalog.lookup("events").primary_key is None

    def test_internal_sqlite_tables_are_skipped(self, db: Database) -> None:
        # AUTOINCREMENT creates sqlite_sequence alongside users
        assert "sqlite_sequence" not in db.catalog


class TestSave:
    def test_insert_returns_new_id_and_stamps_timestamps(self, db: Database) -> None:
        result = db.save("users", {"name": "Ann", "email": "a@x.com", "nickname": "annie"})

        assert result.ok
        assert result.identifier == 1
        row = db.get_one_by_id("users", result.identifier)
        assert row["name"] == "Ann"
        assert row["email"] == "a@x.com"
        assert row["created_at"] is not None
        assert row["updated_at"] == row["created_at"]

    def test_update_existing_row(self, db: Database) -> None:
        new_id = db.save("users", {"name": "Ann"}).identifier

        result = db.save("users", {"name": "Ann2"}, id=new_id)

        assert result.ok
        assert result.identifier == new_id
        assert db.select_one_value("SELECT name FROM users WHERE id = :id", {"id": new_id}) == "Ann2"

    def test_update_missing_row_is_unsuccessful(self, db: Database) -> None:
        result = db.save("users", {"name": "Ghost"}, id=999)

        assert not result.ok
        assert result.affected_rows == 0

    def test_insert_into_keyless_table(self, db: Database) -> None:
        assert db.save("events", {"kind": "login", "payload": "{}"}).ok
        assert db.select_one_field("SELECT kind FROM events") == ["login"]

    def test_validation_errors_issue_no_statements(self, db: Database) -> None:
        before = db.query_count

        with pytest.raises(QueryError):
            db.save("users", {"nickname": "annie"})
        with pytest.raises(QueryError):
            db.save("accounts", {"name": "Ann"})
        with pytest.raises(MissingPrimaryKeyError):
            db.save("events", {"kind": "login"}, id=1)

        assert db.query_count == before


class TestQueries:
    def test_exists_and_delete(self, db: Database) -> None:
        new_id = db.save("users", {"name": "Ann"}).identifier

        assert db.exists_by_id("users", new_id) is True
        assert db.delete_one_by_id("users", new_id) == 1
        assert db.exists_by_id("users", new_id) is False
        assert db.get_one_by_id("users", new_id) is None

    def test_select_helpers(self, db: Database) -> None:
        for name in ("a", "b", "c"):
            db.save("users", {"name": name})

        assert db.select_one_field("SELECT name FROM users ORDER BY id") == ["a", "b", "c"]
        assert len(db.select("SELECT * FROM users")) == 3
        with pytest.raises(ResultError):
            db.select_one("SELECT * FROM users")
        with pytest.raises(QueryError):
            db.select_one_field("SELECT id, name FROM users")

    def test_raw_statements(self, db: Database) -> None:
        new_id = db.insert("INSERT INTO users (name) VALUES (:name)", {"name": "raw"})

        assert db.update("UPDATE users SET email = :email WHERE id = :id", {"email": "r@x.com", "id": new_id}) == 1
        assert db.delete("DELETE FROM users WHERE id = :id", {"id": new_id}) == 1
        assert db.command("PRAGMA foreign_keys = ON") is True

    def test_keyless_table_rejects_id_operations(self, db: Database) -> None:
        with pytest.raises(MissingPrimaryKeyError):
            db.get_one_by_id("events", 1)

    def test_query_count_tracks_statements(self, db: Database) -> None:
        before = db.query_count
        db.save("users", {"name": "Ann"})
        db.select("SELECT * FROM users")
        assert db.query_count == before + 2


@pytest.fixture
def keyword_db(tmp_path: Path):
    path = tmp_path / "keywords.db"
    conn = sqlite3.connect(path)
    try:
        conn.execute('CREATE TABLE items (id INTEGER PRIMARY KEY, "order" INTEGER, name TEXT)')
        conn.execute("CREATE TABLE sqlitedata (id INTEGER PRIMARY KEY, label TEXT)")
        conn.commit()
    finally:
        conn.close()
    with Database.connect(load_settings(db_dialect="sqlite", sqlite_path=str(path))) as database:
        yield database


class TestUnusualNames:
    def test_tables_starting_with_sqlite_are_catalogued(self, keyword_db: Database) -> None:
        assert sorted(keyword_db.catalog) == ["items", "sqlitedata"]
        assert keyword_db.save("sqlitedata", {"label": "x"}).ok

    def test_reserved_word_column_round_trips(self, keyword_db: Database) -> None:
        new_id = keyword_db.save("items", {"order": 1, "name": "a"}).identifier
        assert keyword_db.save("items", {"order": 2}, id=new_id).ok

        row = keyword_db.get_one_by_id("items", new_id)

        assert row == {"id": new_id, "order": 2, "name": "a"}


def test_unsupported_dialect_fails_before_connecting(sqlite_file: Path) -> None:
    with pytest.raises(ConfigurationError):
        Database.connect(load_settings(db_dialect="postgres", sqlite_path=str(sqlite_file)))
