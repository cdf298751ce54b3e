from __future__ import annotations

import sys
from typing import Dict, List, Optional

import typer

from buysell.config import get_settings
from buysell.domain.record import DbRecord
from buysell.domain.schema import SchemaError
from buysell.infrastructure.database import Database
from buysell.infrastructure.db_factory import get_sync_connection
from buysell.utils.logging import configure_logging

app = typer.Typer(help="Buy/sell record CLI.")

FIELD_HELP = "Field as col=value (or bare col for an empty value). Repeat for each column."
KEY_HELP = "Primary-key column. Repeat for composite keys."
AUTO_HELP = "Auto-generated column left out of INSERT/UPDATE. Repeatable."


def _parse_fields(pairs: List[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not name:
            raise typer.BadParameter(f"invalid field {pair!r}, expected col=value", param_hint="--field")
        fields[name] = value if sep else ""
    return fields


def _build_record(
    table: str,
    fields: List[str],
    keys: List[str],
    auto: Optional[List[str]] = None,
    db: Optional[Database] = None,
) -> DbRecord:
    try:
        return DbRecord(table, _parse_fields(fields), keys, auto or [], db=db)
    except SchemaError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)


def _cli_database() -> Database:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return Database(connection_provider=get_sync_connection)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"timeout_ms={settings.db_statement_timeout_ms} | "
        f"env={settings.app_env} log_level={settings.log_level}"
    )


@app.command()
def sql(
    table: str = typer.Argument(..., help="Table name."),
    field: List[str] = typer.Option(..., "--field", "-f", help=FIELD_HELP),
    key: List[str] = typer.Option(..., "--key", "-k", help=KEY_HELP),
    auto: List[str] = typer.Option([], "--auto", "-a", help=AUTO_HELP),
) -> None:
    """
    Print the SELECT/INSERT/UPDATE/DELETE statements a record would run.
    """
    record = _build_record(table, field, key, auto)
    for statement in (
        record.select_statement(),
        record.insert_statement(),
        record.update_statement(),
        record.delete_statement(),
    ):
        typer.echo(statement.render())


@app.command()
def read(
    table: str = typer.Argument(..., help="Table name."),
    field: List[str] = typer.Option(..., "--field", "-f", help=FIELD_HELP),
    key: List[str] = typer.Option(..., "--key", "-k", help=KEY_HELP),
) -> None:
    """
    Read one row by primary key and print the record.
    """
    record = _build_record(table, field, key, db=_cli_database())
    if not record.read_record():
        typer.echo(record.error_msg, err=True)
        raise typer.Exit(code=1)
    typer.echo(str(record))


@app.command()
def delete(
    table: str = typer.Argument(..., help="Table name."),
    field: List[str] = typer.Option(..., "--field", "-f", help=FIELD_HELP),
    key: List[str] = typer.Option(..., "--key", "-k", help=KEY_HELP),
) -> None:
    """
    Delete one row by primary key.
    """
    record = _build_record(table, field, key, db=_cli_database())
    if not record.delete_record():
        typer.echo(record.error_msg, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted from {table}: {record.where_clause().render()}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
