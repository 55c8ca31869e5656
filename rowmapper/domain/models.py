"""
Domain models for rowmapper.

Defines the construction-time dialect configuration, the per-table schema
discovered by the catalog, and the per-call statement/result values produced
by the record mapper. All models are frozen: configuration and schema are
read-only for the process lifetime, statements and results are transient.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from rowmapper.config import Settings
from rowmapper.dialects import Dialect

Record = Mapping[str, Any]


class DialectConfig(BaseModel):
    """
    Dialect kind plus the optional timestamped column names.
    """

    kind: Dialect = Field(..., description="SQL dialect of the target database.")
    created_column: Optional[str] = Field(None, description="Column stamped on insert.")
    updated_column: Optional[str] = Field(None, description="Column stamped on insert and update.")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DialectConfig":
        """
        Derive the dialect configuration from settings.

        Raises
        ------
        ConfigurationError
            If the dialect is unsupported.
        """
        kind = Dialect.parse(settings.db_dialect)
        timestamps = settings.timestamped_fields
        if timestamps is None:
            return cls(kind=kind)
        return cls(
            kind=kind,
            created_column=timestamps.created_column,
            updated_column=timestamps.updated_column,
        )

    @property
    def now_expression(self) -> str:
        return self.kind.now_expression


class TableSchema(BaseModel):
    """
    Columns of a single table as discovered at startup.

    `columns` never contains the primary key.
    """

    name: str
    columns: Tuple[str, ...] = ()
    primary_key: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def has_column(self, column: str) -> bool:
        return column in self.columns


class PreparedStatement(BaseModel):
    """SQL text with `:name` placeholders and the values bound to them."""

    sql: str
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class SaveResult(BaseModel):
    """
    Outcome of RecordMapper.save.

    A successful insert carries the last-inserted id, a successful update the
    caller's id. An update touching zero rows is unsuccessful, not an error.
    """

    ok: bool
    identifier: Any = None
    affected_rows: Optional[int] = None
    statement: PreparedStatement
    reason: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    "DialectConfig",
    "PreparedStatement",
    "Record",
    "SaveResult",
    "TableSchema",
]
