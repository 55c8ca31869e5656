from __future__ import annotations

import sys
from typing import Dict, List, Optional

import typer

from rowmapper.config import get_settings
from rowmapper.database import Database
from rowmapper.errors import RowMapperError
from rowmapper.reporter import print_catalog, print_row
from rowmapper.utils.logging import configure_logging

app = typer.Typer(help="Schema-aware CRUD over MySQL or SQLite.")


def _parse_fields(fields: List[str]) -> Dict[str, str]:
    record: Dict[str, str] = {}
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--field")
        record[key] = value
    return record


def _open() -> Database:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return Database.connect(settings)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    if settings.db_dialect.lower() == "sqlite":
        target = f"sqlite:{settings.sqlite_path}"
    else:
        target = f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    timestamps = settings.timestamped_fields
    typer.echo(
        f"DB={settings.db_dialect} {target} | "
        f"created={timestamps.created if timestamps else None} "
        f"updated={timestamps.updated if timestamps else None}"
    )


@app.command()
def schema() -> None:
    """
    Print the tables, primary keys and columns discovered at startup.
    """
    with _open() as db:
        print_catalog(db.catalog)


@app.command()
def get(table: str, id: str) -> None:
    """
    Fetch one row by primary key.
    """
    with _open() as db:
        row = db.get_one_by_id(table, id)
    if row is None:
        typer.echo(f"No row in {table} with id {id}", err=True)
        raise typer.Exit(code=1)
    print_row(f"{table} #{id}", row)


@app.command()
def exists(table: str, id: str) -> None:
    """
    Exit 0 if a row with the primary key exists, 1 otherwise.
    """
    with _open() as db:
        found = db.exists_by_id(table, id)
    typer.echo("yes" if found else "no")
    if not found:
        raise typer.Exit(code=1)


@app.command()
def delete(table: str, id: str) -> None:
    """
    Delete one row by primary key.
    """
    with _open() as db:
        affected = db.delete_one_by_id(table, id)
    typer.echo(f"Deleted {affected} row(s) from {table}")


@app.command()
def save(
    table: str,
    fields: List[str] = typer.Option(
        ...,
        "--field",
        "-f",
        help="Column value as key=value; repeat for several columns.",
    ),
    id: Optional[str] = typer.Option(
        None,
        "--id",
        help="Update the row with this primary key instead of inserting.",
    ),
) -> None:
    """
    Insert a record, or update it when --id is given.
    """
    record = _parse_fields(fields)
    with _open() as db:
        result = db.save(table, record, id)
    if not result.ok:
        typer.echo(f"Save failed: {result.reason}", err=True)
        raise typer.Exit(code=1)
    typer.echo(str(result.identifier))


def main() -> None:
    try:
        app()
    except RowMapperError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
