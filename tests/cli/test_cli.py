# tests/cli/test_cli.py
"""Tests for the schemarecord CLI."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import Result
from typer.testing import CliRunner

from schemarecord.core.database import RecordDB
from tests.fixtures.schema import create_schema

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    # The CLI callback reconfigures root logging onto the runner's stream
    root = logging.getLogger()
    sql_logger = logging.getLogger("sqlalchemy.engine")
    handlers, level, sql_level = root.handlers[:], root.level, sql_logger.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    sql_logger.setLevel(sql_level)
    structlog.reset_defaults()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Settings pointing at a seeded SQLite file."""
    db_path = tmp_path / "app.db"
    with RecordDB(f"sqlite:///{db_path}") as db:
        create_schema(db)
        db.query("INSERT INTO customers (name) VALUES (?)", ["Acme"])
        db.query("INSERT INTO users (name, email, is_admin, customer_id) VALUES (?, ?, ?, ?)", ["Ada", "ada@example.com", 1, 1])
        db.query("INSERT INTO users (name) VALUES (?)", ["Grace"])

    config_file = tmp_path / "settings.yaml"
    config_file.write_text(f'database:\n  url: "sqlite:///{db_path}"\n')
    return config_file


def _invoke(*args: str) -> Result:
    from schemarecord.cli import app

    return runner.invoke(app, ["--no-dotenv", *args])


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_version_flag(self) -> None:
        """--version shows version info."""
        from schemarecord.cli import app

        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "schemarecord version" in result.stdout

    def test_help_lists_commands(self) -> None:
        from schemarecord.cli import app

        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("inspect", "show", "count"):
            assert command in result.stdout


class TestInspectCommand:
    def test_text_output(self, settings_file: Path) -> None:
        result = _invoke("inspect", "users", "--settings", str(settings_file))
        assert result.exit_code == 0, result.output
        assert "Table: users" in result.stdout
        assert "FK -> customers.id" in result.stdout
        assert "PK" in result.stdout

    def test_json_output(self, settings_file: Path) -> None:
        result = _invoke("inspect", "users", "-s", str(settings_file), "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["table"] == "users"
        columns = {column["name"]: column for column in data["columns"]}
        assert list(columns) == ["id", "name", "email", "is_admin", "customer_id"]
        assert columns["id"]["primary_key"] is True
        assert columns["name"]["max_length"] == 120
        assert columns["name"]["unified_type"] == "character"
        assert columns["customer_id"]["foreign_key"] == "customers.id"
        assert columns["is_admin"]["default"] == "0"

    def test_unknown_table(self, settings_file: Path) -> None:
        result = _invoke("inspect", "ghosts", "-s", str(settings_file))
        assert result.exit_code == 1
        assert "ghosts" in result.output

    def test_missing_settings_file(self, tmp_path: Path) -> None:
        result = _invoke("inspect", "users", "-s", str(tmp_path / "nope.yaml"))
        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_invalid_settings(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("logging:\n  level: LOUD\n")
        result = _invoke("inspect", "users", "-s", str(config_file))
        assert result.exit_code == 1
        assert "Configuration errors" in result.output


class TestShowCommand:
    def test_prints_row_as_json(self, settings_file: Path) -> None:
        result = _invoke("show", "users", "1", "-s", str(settings_file))
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "id": 1,
            "name": "Ada",
            "email": "ada@example.com",
            "is_admin": True,
            "customer_id": 1,
        }

    def test_missing_row(self, settings_file: Path) -> None:
        result = _invoke("show", "users", "99", "-s", str(settings_file))
        assert result.exit_code == 1
        assert "No row in users" in result.output

    def test_keyless_table(self, settings_file: Path) -> None:
        result = _invoke("show", "tags", "1", "-s", str(settings_file))
        assert result.exit_code == 1
        assert "no primary key" in result.output


class TestCountCommand:
    def test_counts_rows(self, settings_file: Path) -> None:
        result = _invoke("count", "users", "-s", str(settings_file))
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "2"

    def test_empty_table(self, settings_file: Path) -> None:
        result = _invoke("count", "orders", "-s", str(settings_file))
        assert result.stdout.strip() == "0"


class TestVerboseFlag:
    def test_verbose_logs_sql(self, settings_file: Path) -> None:
        result = _invoke("-v", "count", "users", "-s", str(settings_file))
        assert result.exit_code == 0, result.output
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

    def test_sql_quiet_without_verbose(self, settings_file: Path) -> None:
        result = _invoke("count", "users", "-s", str(settings_file))
        assert result.exit_code == 0, result.output
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
