"""
Infrastructure package for rowmapper.

Centralizes database connectivity concerns (engine factory, the connection
retry policy and the SQLAlchemy-backed executor). Keep this layer focused on
I/O, decoupled from schema discovery and SQL synthesis.
"""

from rowmapper.infrastructure.db_factory import build_url, create_db_engine, open_connection
from rowmapper.infrastructure.executor import SqlAlchemyExecutor, SqlExecutor

__all__ = [
    "build_url",
    "create_db_engine",
    "open_connection",
    "SqlAlchemyExecutor",
    "SqlExecutor",
]
