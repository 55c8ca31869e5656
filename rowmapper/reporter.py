from __future__ import annotations

from typing import Any, Mapping, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from rowmapper.catalog import SchemaCatalog


def build_catalog_table(catalog: SchemaCatalog) -> Table:
    """
    Render the discovered schema as a rich Table, one row per database table.

    Tables without a primary key are flagged since id-based operations
    cannot target them.
    """
    table = Table(
        title=f"Schema ({catalog.dialect.value}, {len(catalog)} tables)",
        box=box.ROUNDED,
        show_lines=False,
    )
    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Primary key", style="magenta")
    table.add_column("Columns", justify="right")
    table.add_column("Column names", overflow="fold")

    for name in sorted(catalog):
        schema = catalog[name]
        key = schema.primary_key or "[red]none[/red]"
        table.add_row(name, key, str(len(schema.columns)), ", ".join(schema.columns))
    return table


def build_row_table(title: str, row: Mapping[str, Any]) -> Table:
    """Render a single record as a two-column field/value table."""
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in row.items():
        table.add_row(field, "NULL" if value is None else str(value))
    return table


def print_catalog(catalog: SchemaCatalog, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(build_catalog_table(catalog))


def print_row(title: str, row: Mapping[str, Any], console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(build_row_table(title, row))
