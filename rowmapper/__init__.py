"""
rowmapper - schema-aware CRUD for MySQL and SQLite.

At startup the package introspects the database (table names, column names,
single-column primary keys) and then offers generic operations on flat
records:

- `save` builds an INSERT or UPDATE from any field->value mapping, writing
  only keys that are real columns of the table
- optional created/updated columns are stamped with the database clock
- id-based get/delete/exists helpers driven by the discovered primary key
- raw select helpers with single-row / single-field / single-value checks

It is not an ORM: no joins, no relationships, no identity map.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from rowmapper.catalog import SchemaCatalog
from rowmapper.config import Settings, TimestampConfig, get_settings, load_settings
from rowmapper.database import Database
from rowmapper.dialects import Dialect
from rowmapper.domain.models import DialectConfig, PreparedStatement, SaveResult, TableSchema
from rowmapper.errors import (
    ConfigurationError,
    MissingPrimaryKeyError,
    QueryError,
    ResultError,
    RowMapperError,
)
from rowmapper.facade import QueryFacade
from rowmapper.infrastructure.executor import SqlAlchemyExecutor, SqlExecutor
from rowmapper.mapper import RecordMapper, filter_known_fields
from rowmapper.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "TimestampConfig",
    "get_settings",
    "load_settings",
    "Dialect",
    "DialectConfig",
    # Core
    "Database",
    "SchemaCatalog",
    "TableSchema",
    "RecordMapper",
    "PreparedStatement",
    "SaveResult",
    "filter_known_fields",
    "QueryFacade",
    # Transport
    "SqlExecutor",
    "SqlAlchemyExecutor",
    # Errors
    "RowMapperError",
    "ConfigurationError",
    "QueryError",
    "MissingPrimaryKeyError",
    "ResultError",
    # Logging
    "configure_logging",
    "get_logger",
]
