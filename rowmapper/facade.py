"""
Generic CRUD surface over a SqlExecutor.

Raw passthroughs (`select`, `insert`, `update`, ...) take caller-written SQL.
The id-based helpers build their SQL from catalog-validated identifiers and
require the table to have a discovered primary key.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from rowmapper.catalog import SchemaCatalog
from rowmapper.dialects import render_identifier
from rowmapper.domain.models import TableSchema
from rowmapper.errors import MissingPrimaryKeyError, QueryError, ResultError
from rowmapper.infrastructure.executor import SqlExecutor

Params = Optional[Mapping[str, Any]]


class QueryFacade:
    def __init__(self, executor: SqlExecutor, catalog: SchemaCatalog) -> None:
        self.executor = executor
        self.catalog = catalog

    @property
    def query_count(self) -> int:
        return self.executor.query_count

    # Raw statements

    def command(self, sql: str) -> bool:
        """Run a parameterless statement (DDL, PRAGMA, SET ...)."""
        self.executor.execute(sql)
        return True

    def insert(self, sql: str, params: Params = None) -> Any:
        """Run an INSERT and return the last-inserted id."""
        self.executor.execute(sql, params)
        return self.executor.last_insert_id()

    def update(self, sql: str, params: Params = None) -> int:
        """Run an UPDATE and return the affected-row count."""
        return self.executor.execute(sql, params)

    def delete(self, sql: str, params: Params = None) -> int:
        return self.update(sql, params)

    def select(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        return self.executor.query(sql, params)

    def select_one(self, sql: str, params: Params = None) -> Optional[Dict[str, Any]]:
        """
        Return the single row selected, or None when nothing matched.

        Raises
        ------
        ResultError
            If more than one row came back.
        """
        rows = self.select(sql, params)
        if len(rows) > 1:
            raise ResultError("Database returned more than one result")
        return rows[0] if rows else None

    def select_one_field(self, sql: str, params: Params = None) -> List[Any]:
        """
        Flatten a single-column result into a list of values.

        Raises
        ------
        QueryError
            If any row has more than one column.
        """
        values: List[Any] = []
        for row in self.select(sql, params):
            if len(row) > 1:
                raise QueryError("Your query selected more than one field")
            values.extend(row.values())
        return values

    def select_one_value(self, sql: str, params: Params = None) -> Any:
        """
        Return the only value of the only row, or None when nothing matched.

        Raises
        ------
        ResultError
            If more than one row, or more than one field, came back.
        """
        row = self.select_one(sql, params)
        if row is None:
            return None
        if len(row) != 1:
            raise ResultError("Database returned more than one value")
        return next(iter(row.values()))

    # Primary-key helpers

    def _keyed(self, table: str) -> TableSchema:
        schema = self.catalog.lookup(table)
        if schema.primary_key is None:
            raise MissingPrimaryKeyError(table)
        return schema

    def _where_key(self, schema: TableSchema) -> str:
        dialect = self.catalog.dialect
        return (
            f"FROM {render_identifier(schema.name, dialect)} "
            f"WHERE {render_identifier(schema.primary_key, dialect)} = :id"
        )

    def get_one_by_id(self, table: str, id: Any) -> Optional[Dict[str, Any]]:
        schema = self._keyed(table)
        return self.select_one(f"SELECT * {self._where_key(schema)}", {"id": id})

    def delete_one_by_id(self, table: str, id: Any) -> int:
        """Delete the row with primary key `id`; returns the affected-row count."""
        schema = self._keyed(table)
        sql = f"DELETE {self._where_key(schema)}"
        if self.catalog.dialect.supports_delete_limit:
            sql += " LIMIT 1"
        return self.delete(sql, {"id": id})

    def exists_by_id(self, table: str, id: Any) -> bool:
        schema = self._keyed(table)
        sql = f"SELECT EXISTS(SELECT 1 {self._where_key(schema)} LIMIT 1) AS e"
        return bool(self.select_one_value(sql, {"id": id}))


__all__ = ["QueryFacade"]
