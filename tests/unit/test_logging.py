from __future__ import annotations

import json
import logging

from rowmapper.mapper import RecordMapper
from rowmapper.utils.logging import JsonFormatter, _json_formatter

EXPECTED_TABLES = 12


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.tables = EXPECTED_TABLES
    record.dialect = "SQLITE"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["tables"] == EXPECTED_TABLES
    assert payload["dialect"] == "SQLITE"
    assert "pathname" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"table": "users"}

    payload = json.loads(JsonFormatter().format(record))

    assert payload["table"] == "users"


def test_save_logs_sql_but_not_bound_values(sqlite_catalog, stamped_sqlite, executor, caplog) -> None:
    mapper = RecordMapper(stamped_sqlite, sqlite_catalog, executor)

    with caplog.at_level(logging.DEBUG, logger="rowmapper"):
        mapper.save("users", {"name": "secret-name"})

    saving = [r for r in caplog.records if r.getMessage() == "Saving record"]
    assert saving[0].sql.startswith("INSERT INTO users")
    assert all("secret-name" not in _json_formatter(r) for r in caplog.records)
