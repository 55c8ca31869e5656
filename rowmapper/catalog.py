"""
Schema discovery for rowmapper.

The catalog is built once at startup from dialect-specific metadata queries
and is read-only afterwards. A process restart is required to pick up DDL
changes.

MySQL issues a single INFORMATION_SCHEMA query for the whole schema. SQLite
lists the user tables from sqlite_master, then runs PRAGMA table_info once per
table.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from rowmapper.dialects import Dialect, quote_identifier
from rowmapper.domain.models import TableSchema
from rowmapper.errors import ConfigurationError, QueryError
from rowmapper.infrastructure.executor import SqlExecutor
from rowmapper.utils.logging import get_logger

log = get_logger(__name__)

MYSQL_COLUMNS_SQL = (
    "SELECT TABLE_NAME, COLUMN_NAME, COLUMN_KEY FROM INFORMATION_SCHEMA.COLUMNS "
    "WHERE TABLE_SCHEMA = :table_schema ORDER BY TABLE_NAME, ORDINAL_POSITION"
)
SQLITE_TABLES_SQL = "SELECT name FROM sqlite_master WHERE type = 'table' AND substr(name, 1, 7) <> 'sqlite_'"


class _TableBuilder:
    """Accumulates discovered columns for one table."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.columns: List[str] = []
        self.primary_key: Optional[str] = None

    def add(self, column: str, is_key: bool) -> None:
        if is_key and self.primary_key is None:
            self.primary_key = column
            return
        if is_key:
            log.warning(
                "Composite primary key; treating extra key column as a plain column",
                extra={"table": self.name, "column": column, "primary_key": self.primary_key},
            )
        self.columns.append(column)

    def build(self) -> TableSchema:
        return TableSchema(name=self.name, columns=tuple(self.columns), primary_key=self.primary_key)


class SchemaCatalog(Mapping[str, TableSchema]):
    """
    Immutable mapping of table name to TableSchema.

    Use `SchemaCatalog.build` to discover a live schema; the constructor is
    for callers that already hold the table definitions (tests, fixtures).
    """

    def __init__(self, dialect: Dialect, tables: Mapping[str, TableSchema]) -> None:
        self._dialect = dialect
        self._tables: Mapping[str, TableSchema] = MappingProxyType(dict(tables))

    @classmethod
    def build(
        cls,
        dialect: Dialect,
        executor: SqlExecutor,
        schema_name: Optional[str] = None,
    ) -> "SchemaCatalog":
        """
        Discover every user table's non-key columns and primary key.

        Parameters
        ----------
        dialect : Dialect
            Which metadata queries to issue.
        executor : SqlExecutor
            Transport for the metadata queries.
        schema_name : str | None
            MySQL database (TABLE_SCHEMA) to introspect. Ignored for SQLite.

        Raises
        ------
        ConfigurationError
            If the dialect is unsupported, or MySQL is used without a schema name.
        """
        dialect = Dialect.parse(dialect)
        if dialect is Dialect.MYSQL:
            if not schema_name:
                raise ConfigurationError("A database name is required to introspect a MySQL schema")
            builders = _discover_mysql(executor, schema_name)
        else:
            builders = _discover_sqlite(executor)

        tables = {name: builder.build() for name, builder in builders.items()}
        log.info(
            "Schema loaded",
            extra={
                "dialect": dialect.value,
                "tables": len(tables),
                "keyless_tables": sum(1 for t in tables.values() if t.primary_key is None),
            },
        )
        return cls(dialect, tables)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def lookup(self, table: str) -> TableSchema:
        """
        Return the schema for `table`.

        Raises
        ------
        QueryError
            If the table was not discovered at startup.
        """
        schema = self._tables.get(table)
        if schema is None:
            raise QueryError(f"Table {table} does not exist")
        return schema

    def tables(self) -> Tuple[str, ...]:
        return tuple(self._tables)

    def __getitem__(self, table: str) -> TableSchema:
        return self._tables[table]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"SchemaCatalog(dialect={self._dialect.value}, tables={list(self._tables)})"


def _discover_mysql(executor: SqlExecutor, schema_name: str) -> Dict[str, _TableBuilder]:
    builders: Dict[str, _TableBuilder] = {}
    for row in executor.query(MYSQL_COLUMNS_SQL, {"table_schema": schema_name}):
        table = row["TABLE_NAME"]
        builder = builders.setdefault(table, _TableBuilder(table))
        builder.add(row["COLUMN_NAME"], row["COLUMN_KEY"] == "PRI")
    return builders


def _discover_sqlite(executor: SqlExecutor) -> Dict[str, _TableBuilder]:
    builders: Dict[str, _TableBuilder] = {}
    for table_row in executor.query(SQLITE_TABLES_SQL):
        table = table_row["name"]
        builder = builders.setdefault(table, _TableBuilder(table))
        pragma = f"PRAGMA table_info({quote_identifier(table, Dialect.SQLITE)})"
        for column in executor.query(pragma):
            builder.add(column["name"], int(column["pk"]) == 1)
    return builders


__all__ = ["SchemaCatalog", "MYSQL_COLUMNS_SQL", "SQLITE_TABLES_SQL"]
