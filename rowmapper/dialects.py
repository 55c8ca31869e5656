"""
Dialect helpers shared by the catalog, the mapper and the facade.

Only MySQL and SQLite are supported; both have a single notion of
"current timestamp" that can be emitted as a literal SQL function call.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Collection, FrozenSet

from sqlalchemy.dialects.mysql.base import MySQLIdentifierPreparer
from sqlalchemy.dialects.sqlite.base import SQLiteIdentifierPreparer

from rowmapper.errors import ConfigurationError

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Dialect(str, Enum):
    MYSQL = "MYSQL"
    SQLITE = "SQLITE"

    @classmethod
    def parse(cls, value: Any) -> "Dialect":
        """
        Parse a dialect name case-insensitively.

        Raises
        ------
        ConfigurationError
            If the value is neither 'mysql' nor 'sqlite'.
        """
        if isinstance(value, Dialect):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ConfigurationError("Database type must be 'mysql' or 'sqlite'")

    @property
    def now_expression(self) -> str:
        return "NOW()" if self is Dialect.MYSQL else "DATETIME()"

    @property
    def quote_char(self) -> str:
        return "`" if self is Dialect.MYSQL else '"'

    @property
    def reserved_words(self) -> FrozenSet[str]:
        """Lowercased keywords that must be quoted when used as identifiers."""
        return _RESERVED_WORDS[self]

    @property
    def supports_delete_limit(self) -> bool:
        # Stock SQLite builds reject DELETE ... LIMIT.
        return self is Dialect.MYSQL


_RESERVED_WORDS = {
    Dialect.MYSQL: frozenset(MySQLIdentifierPreparer.reserved_words),
    Dialect.SQLITE: frozenset(SQLiteIdentifierPreparer.reserved_words),
}


def is_plain_identifier(name: str) -> bool:
    return bool(_PLAIN_IDENTIFIER.match(name))


def quote_identifier(name: str, dialect: Dialect) -> str:
    """
    Quote an identifier, doubling any embedded quote character.

    Examples
    --------
        >>> quote_identifier("user table", Dialect.MYSQL)
        '`user table`'
        >>> quote_identifier('odd"name', Dialect.SQLITE)
        '"odd""name"'
    """
    q = dialect.quote_char
    return f"{q}{name.replace(q, q + q)}{q}"


def render_identifier(name: str, dialect: Dialect) -> str:
    """
    Render a catalog-validated identifier for SQL text.

    Plain names are emitted bare unless they are reserved words of the
    dialect; anything else is quoted.
    """
    if is_plain_identifier(name) and name.lower() not in dialect.reserved_words:
        return name
    return quote_identifier(name, dialect)


class PlaceholderAllocator:
    """
    Hands out unique bind-parameter names for one statement.

    Plain column names bind under their own name. Other names get `p<n>`,
    skipping any name in `reserved` or already handed out, so a generated
    name never shadows a column that binds under its own name.
    """

    def __init__(self, reserved: Collection[str] = ()) -> None:
        self._reserved = {name for name in reserved if is_plain_identifier(name)}
        self._used: set = set()
        self._counter = 0

    def allocate(self, column: str) -> str:
        if is_plain_identifier(column) and column not in self._used:
            name = column
        else:
            name = f"p{self._counter}"
            while name in self._reserved or name in self._used:
                self._counter += 1
                name = f"p{self._counter}"
            self._counter += 1
        self._used.add(name)
        return name


__all__ = [
    "Dialect",
    "is_plain_identifier",
    "quote_identifier",
    "render_identifier",
    "PlaceholderAllocator",
]
