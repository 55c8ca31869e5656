"""
Insert-or-update synthesis for flat records.

`RecordMapper.save` reconciles an arbitrary field->value mapping with the
discovered schema and turns it into a parameterized INSERT or UPDATE. Keys
that are not real non-key columns of the table are dropped, so callers may
pass whole domain objects. Every identifier placed into SQL text comes from
the catalog, never from the record.

Configured timestamp columns are written with the dialect's current-time
function (`NOW()` / `DATETIME()`) as literal SQL and cannot be set through
the record.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from rowmapper.catalog import SchemaCatalog
from rowmapper.dialects import PlaceholderAllocator, render_identifier
from rowmapper.domain.models import DialectConfig, PreparedStatement, Record, SaveResult, TableSchema
from rowmapper.errors import MissingPrimaryKeyError, QueryError
from rowmapper.infrastructure.executor import SqlExecutor
from rowmapper.utils.logging import get_logger

log = get_logger(__name__)


def filter_known_fields(
    schema: TableSchema,
    record: Record,
    exclude: Iterable[str] = (),
) -> List[Tuple[str, Any]]:
    """
    Keep the record entries whose key is a non-key column of `schema`.

    Order follows the record. Keys listed in `exclude` are dropped even when
    they are real columns.
    """
    skipped = set(exclude)
    return [
        (field, value)
        for field, value in record.items()
        if field not in skipped and schema.has_column(field)
    ]


class RecordMapper:
    """
    Builds and dispatches INSERT/UPDATE statements for single-table records.

    Parameters
    ----------
    config : DialectConfig
        Dialect and optional timestamped column names.
    catalog : SchemaCatalog
        Schema discovered at startup.
    executor : SqlExecutor | None
        Transport used by `save`. `prepare_save` never touches it.
    """

    def __init__(
        self,
        config: DialectConfig,
        catalog: SchemaCatalog,
        executor: Optional[SqlExecutor] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog
        self.executor = executor

    def _timestamp_columns(self, schema: TableSchema) -> Tuple[Optional[str], Optional[str]]:
        created = self.config.created_column
        updated = self.config.updated_column
        return (
            created if created and schema.has_column(created) else None,
            updated if updated and schema.has_column(updated) else None,
        )

    def prepare_save(self, table: str, record: Record, id: Any = None) -> PreparedStatement:
        """
        Build the INSERT (no `id`) or UPDATE (`id` given) for `record`.

        Raises
        ------
        QueryError
            If the table is unknown or no record key matches a column.
        MissingPrimaryKeyError
            If `id` is given and the table has no primary key.
        """
        schema = self.catalog.lookup(table)
        created, updated = self._timestamp_columns(schema)
        fields = filter_known_fields(schema, record, exclude=[c for c in (created, updated) if c])
        if not fields:
            raise QueryError(f"No matching columns in table {table}")

        dialect = self.config.kind
        now = dialect.now_expression
        params: Dict[str, Any] = {}
        columns: List[str] = []
        tokens: List[str] = []
        bound = [column for column, _ in fields]
        if schema.primary_key is not None:
            bound.append(schema.primary_key)
        placeholders = PlaceholderAllocator(bound)
        for column, value in fields:
            name = placeholders.allocate(column)
            params[name] = value
            columns.append(render_identifier(column, dialect))
            tokens.append(f":{name}")

        table_sql = render_identifier(schema.name, dialect)
        if id is not None:
            if schema.primary_key is None:
                raise MissingPrimaryKeyError(table)
            assignments = [f"{column} = {token}" for column, token in zip(columns, tokens)]
            if updated:
                assignments.append(f"{render_identifier(updated, dialect)} = {now}")
            key_name = placeholders.allocate(schema.primary_key)
            params[key_name] = id
            sql = (
                f"UPDATE {table_sql} SET {', '.join(assignments)} "
                f"WHERE {render_identifier(schema.primary_key, dialect)} = :{key_name}"
            )
        else:
            for stamped in (created, updated):
                if stamped:
                    columns.append(render_identifier(stamped, dialect))
                    tokens.append(now)
            sql = f"INSERT INTO {table_sql} ({', '.join(columns)}) VALUES ({', '.join(tokens)})"

        return PreparedStatement(sql=sql, params=params)

    def save(self, table: str, record: Record, id: Any = None) -> SaveResult:
        """
        Insert `record` into `table`, or update the row whose primary key is `id`.

        Returns
        -------
        SaveResult
            Insert: `identifier` is the executor's last-inserted id.
            Update: `identifier` is `id` when at least one row was affected;
            otherwise `ok` is False.
        """
        if self.executor is None:
            raise RuntimeError("RecordMapper.save requires an executor")
        statement = self.prepare_save(table, record, id)
        log.debug("Saving record", extra={"table": table, "sql": statement.sql})

        if id is not None:
            affected = self.executor.execute(statement.sql, statement.params)
            if affected:
                return SaveResult(ok=True, identifier=id, affected_rows=affected, statement=statement)
            return SaveResult(
                ok=False,
                identifier=id,
                affected_rows=affected,
                statement=statement,
                reason="no rows affected",
            )

        affected = self.executor.execute(statement.sql, statement.params)
        return SaveResult(
            ok=True,
            identifier=self.executor.last_insert_id(),
            affected_rows=affected,
            statement=statement,
        )


__all__ = ["RecordMapper", "filter_known_fields"]
