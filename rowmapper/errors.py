"""
Exception taxonomy for rowmapper.

Driver-level failures (connectivity, constraint violations, syntax errors)
are raised by SQLAlchemy and are never caught or translated here; only the
mapper's own validation failures live in this module.
"""

from __future__ import annotations


class RowMapperError(Exception):
    """Base class for all errors raised by rowmapper itself."""


class ConfigurationError(RowMapperError):
    """Invalid dialect or timestamp configuration, raised at construction."""


class QueryError(RowMapperError):
    """Unknown table, no matching columns, or a query selecting too many fields."""


class MissingPrimaryKeyError(QueryError):
    """An id-based operation targeted a table with no discovered primary key."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Table {table} has no primary key")
        self.table = table


class ResultError(RowMapperError):
    """The database returned more rows or values than the caller expected."""


__all__ = [
    "RowMapperError",
    "ConfigurationError",
    "QueryError",
    "MissingPrimaryKeyError",
    "ResultError",
]
