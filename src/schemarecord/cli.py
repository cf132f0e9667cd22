# src/schemarecord/cli.py
"""schemarecord Command Line Interface.

Inspect tables and rows through the same metadata records use.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer
from pydantic import ValidationError

from schemarecord import __version__
from schemarecord.contracts.errors import RecordError
from schemarecord.contracts.type_normalization import unify_data_type

if TYPE_CHECKING:
    from schemarecord.core.config import SchemaRecordSettings

__all__ = ["app"]

app = typer.Typer(
    name="schemarecord",
    help="schemarecord: schema-driven records for relational tables.",
    no_args_is_help=True,
)

_SETTINGS_OPTION = typer.Option(
    Path("settings.yaml"),
    "--settings",
    "-s",
    help="Path to settings YAML file.",
)
_ENVIRONMENT_OPTION = typer.Option(
    None,
    "--env",
    "-e",
    help="Settings environment section to use (e.g. production).",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"schemarecord version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(f"Error: .env file not found: {env_file}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)
    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(False, "--no-dotenv", help="Skip loading .env file."),
    env_file: Path | None = typer.Option(None, "--env-file", help="Path to .env file (skips automatic search)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose/debug logging (including SQL)."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Output structured JSON logs."),
) -> None:
    """schemarecord: schema-driven records for relational tables."""
    from schemarecord.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING", sql_echo=verbose)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


def _load(settings: Path, environment: str | None) -> SchemaRecordSettings:
    from schemarecord.core.config import load_settings

    try:
        return load_settings(settings, environment=environment)
    except FileNotFoundError:
        raise _fail(f"Settings file not found: {settings}") from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    return str(value)


@app.command()
def inspect(
    table: str = typer.Argument(..., help="Table to describe."),
    settings: Path = _SETTINGS_OPTION,
    environment: str | None = _ENVIRONMENT_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Describe a table's columns as records see them."""
    from schemarecord.core.context import MapperContext
    from schemarecord.core.database import RecordDB

    config = _load(settings, environment)
    try:
        with RecordDB.from_settings(config.database) as db:
            columns = MapperContext(db).catalog.load(table)
    except RecordError as e:
        raise _fail(str(e)) from None

    rows = [
        {
            "name": meta.name,
            "data_type": meta.data_type,
            "unified_type": unify_data_type(meta.data_type),
            "max_length": meta.max_length,
            "not_null": meta.not_null,
            "primary_key": meta.is_primary_key,
            "default": meta.default_value,
            "foreign_key": None if meta.foreign_key is None else f"{meta.foreign_key.table}.{meta.foreign_key.column}",
        }
        for meta in columns.values()
    ]

    if as_json:
        typer.echo(json.dumps({"table": table, "columns": rows}, indent=2))
        return

    typer.echo(f"Table: {table}")
    for row in rows:
        flags = []
        if row["primary_key"]:
            flags.append("PK")
        if row["not_null"]:
            flags.append("NOT NULL")
        if row["foreign_key"]:
            flags.append(f"FK -> {row['foreign_key']}")
        if row["default"] is not None:
            flags.append(f"DEFAULT {row['default']}")
        length = f"({row['max_length']})" if row["max_length"] else ""
        typer.echo(f"  {row['name']:<24} {row['data_type']}{length:<10} [{row['unified_type']}] {' '.join(flags)}".rstrip())


@app.command()
def show(
    table: str = typer.Argument(..., help="Table to read from."),
    id: str = typer.Argument(..., help="Primary key value."),
    settings: Path = _SETTINGS_OPTION,
    environment: str | None = _ENVIRONMENT_OPTION,
) -> None:
    """Print one row, looked up by primary key, as JSON."""
    from schemarecord.core.context import MapperContext
    from schemarecord.core.database import RecordDB

    config = _load(settings, environment)
    try:
        with RecordDB.from_settings(config.database) as db:
            record = MapperContext(db).load(table)
            found = record.find(int(id) if id.isdigit() else id)
            data = record.to_dict()
    except RecordError as e:
        raise _fail(str(e)) from None

    if not found:
        raise _fail(f"No row in {table} with primary key {id}")
    typer.echo(json.dumps({column: _jsonable(value) for column, value in data.items()}, indent=2))


@app.command()
def count(
    table: str = typer.Argument(..., help="Table to count."),
    settings: Path = _SETTINGS_OPTION,
    environment: str | None = _ENVIRONMENT_OPTION,
) -> None:
    """Print the number of rows in a table."""
    from schemarecord.core.context import MapperContext
    from schemarecord.core.database import RecordDB

    config = _load(settings, environment)
    try:
        with RecordDB.from_settings(config.database) as db:
            total = MapperContext(db).load(table).count()
    except RecordError as e:
        raise _fail(str(e)) from None
    typer.echo(str(total))


if __name__ == "__main__":
    app()
