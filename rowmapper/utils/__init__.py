"""
Utilities package for rowmapper.

Exports shared logging helpers. Keep this package lightweight and free of
schema or SQL logic.
"""

from rowmapper.utils.logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "JsonFormatter",
    "configure_logging",
    "get_logger",
]
