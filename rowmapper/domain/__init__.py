"""
Domain package for rowmapper.

Exports the configuration, schema and statement models shared by the
catalog, the record mapper and the query facade.
"""

from rowmapper.domain.models import (
    DialectConfig,
    PreparedStatement,
    Record,
    SaveResult,
    TableSchema,
)

__all__ = [
    "DialectConfig",
    "PreparedStatement",
    "Record",
    "SaveResult",
    "TableSchema",
]
