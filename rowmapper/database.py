"""
Composition root: one object per database that owns the connection, the
schema catalog, the record mapper and the query facade.

Usage:
    from rowmapper import Database

    with Database.connect() as db:
        new_id = db.save("users", {"name": "Ann", "email": "a@x.com"}).identifier
        row = db.get_one_by_id("users", new_id)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine

from rowmapper.catalog import SchemaCatalog
from rowmapper.config import Settings, get_settings
from rowmapper.domain.models import DialectConfig, Record, SaveResult
from rowmapper.facade import Params, QueryFacade
from rowmapper.infrastructure.db_factory import create_db_engine
from rowmapper.infrastructure.executor import SqlAlchemyExecutor, SqlExecutor
from rowmapper.mapper import RecordMapper


class Database:
    """
    Schema-aware CRUD over a single connection.

    Parameters
    ----------
    config : DialectConfig
        Dialect and timestamped column configuration.
    executor : SqlExecutor
        Transport for every statement.
    catalog : SchemaCatalog | None
        Pre-built catalog; discovered through `executor` when omitted.
    schema_name : str | None
        MySQL database to introspect when the catalog is discovered.
    """

    def __init__(
        self,
        config: DialectConfig,
        executor: SqlExecutor,
        catalog: Optional[SchemaCatalog] = None,
        schema_name: Optional[str] = None,
    ) -> None:
        self.config = config
        self.executor = executor
        if catalog is None:
            catalog = SchemaCatalog.build(config.kind, executor, schema_name=schema_name)
        self.catalog = catalog
        self.mapper = RecordMapper(config, self.catalog, executor)
        self.queries = QueryFacade(executor, self.catalog)
        self._engine: Optional[Engine] = None

    @classmethod
    def connect(cls, settings: Optional[Settings] = None) -> "Database":
        """
        Open a connection from settings and discover the schema.

        Raises
        ------
        ConfigurationError
            On an unsupported dialect or incomplete timestamp configuration.
        """
        settings = settings or get_settings()
        config = DialectConfig.from_settings(settings)
        engine = create_db_engine(settings)
        executor = SqlAlchemyExecutor.connect(engine, attempts=settings.db_connect_retries)
        try:
            db = cls(config, executor, schema_name=settings.db_name)
        except Exception:
            executor.close()
            engine.dispose()
            raise
        db._engine = engine
        return db

    def close(self) -> None:
        close = getattr(self.executor, "close", None)
        if close is not None:
            close()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def query_count(self) -> int:
        return self.executor.query_count

    def save(self, table: str, record: Record, id: Any = None) -> SaveResult:
        return self.mapper.save(table, record, id)

    def get_one_by_id(self, table: str, id: Any) -> Optional[Dict[str, Any]]:
        return self.queries.get_one_by_id(table, id)

    def delete_one_by_id(self, table: str, id: Any) -> int:
        return self.queries.delete_one_by_id(table, id)

    def exists_by_id(self, table: str, id: Any) -> bool:
        return self.queries.exists_by_id(table, id)

    def select(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        return self.queries.select(sql, params)

    def select_one(self, sql: str, params: Params = None) -> Optional[Dict[str, Any]]:
        return self.queries.select_one(sql, params)

    def select_one_field(self, sql: str, params: Params = None) -> List[Any]:
        return self.queries.select_one_field(sql, params)

    def select_one_value(self, sql: str, params: Params = None) -> Any:
        return self.queries.select_one_value(sql, params)

    def command(self, sql: str) -> bool:
        return self.queries.command(sql)

    def insert(self, sql: str, params: Params = None) -> Any:
        return self.queries.insert(sql, params)

    def update(self, sql: str, params: Params = None) -> int:
        return self.queries.update(sql, params)

    def delete(self, sql: str, params: Params = None) -> int:
        return self.queries.delete(sql, params)


__all__ = ["Database"]
