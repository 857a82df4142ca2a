"""Tests for the command line interface."""

import json
from pathlib import Path
from sqlite3 import Connection, OperationalError, ProgrammingError, connect

import pytest

from schema_toolkit import cli
from schema_toolkit.cli import EXIT_DIFFERENT, EXIT_FAILED, EXIT_IDENTICAL, app
from schemadiff import read_only

SCHEMA = """
CREATE TABLE events (id INTEGER PRIMARY KEY, ts INTEGER NOT NULL);
CREATE INDEX idx_ts ON events (ts);
"""


def create_database(location: Path, script: str) -> Path:
    """Create a database file from a DDL script."""
    conn = connect(location)
    conn.executescript(script)
    conn.close()
    return location


@pytest.fixture(name="expected_db")
def create_expected_db(tmp_path: Path) -> Path:
    """Database built from the reference schema."""
    return create_database(tmp_path / "expected.db", SCHEMA)


@pytest.fixture(name="schema_sql")
def create_schema_sql(tmp_path: Path) -> Path:
    """Reference schema script."""
    location = tmp_path / "schema.sql"
    location.write_text(SCHEMA)
    return location


def run(*tokens: str) -> int | str | None:
    """Run the CLI and return its exit code."""
    with pytest.raises(SystemExit) as excinfo:
        app(list(tokens))
    return excinfo.value.code


def test_compare_identical(
    tmp_path: Path,
    expected_db: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that identical databases exit cleanly with nothing on stdout."""
    actual_db = create_database(tmp_path / "actual.db", SCHEMA)

    assert run("compare", str(actual_db), str(expected_db)) == EXIT_IDENTICAL
    assert capsys.readouterr().out == ""


def test_compare_different(
    tmp_path: Path,
    expected_db: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that differences are written to stdout with exit code 1."""
    actual_db = create_database(
        tmp_path / "actual.db",
        "CREATE TABLE events (id INTEGER PRIMARY KEY, ts INTEGER);",
    )

    assert run("compare", str(actual_db), str(expected_db)) == EXIT_DIFFERENT
    out = capsys.readouterr().out
    assert out.startswith('table "events" column, ')
    assert "-Column" in out


def test_compare_json(
    tmp_path: Path,
    expected_db: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test JSON output of the compare command."""
    actual_db = create_database(tmp_path / "actual.db", "CREATE TABLE other (x);")

    code = run("compare", str(actual_db), str(expected_db), "--fmt", "json")

    assert code == EXIT_DIFFERENT
    data = json.loads(capsys.readouterr().out)
    assert data[0]["kind"] == "tables"


def test_compare_missing_file(tmp_path: Path, expected_db: Path) -> None:
    """Test that a missing database is a failure, not a match."""
    missing = tmp_path / "missing.db"

    assert run("compare", str(missing), str(expected_db)) == EXIT_FAILED


def test_compare_bad_extension(tmp_path: Path, expected_db: Path) -> None:
    """Test that unexpected file extensions are rejected."""
    other = create_database(tmp_path / "actual.txt", SCHEMA)

    assert run("compare", str(other), str(expected_db)) == EXIT_FAILED


def test_compare_corrupt_database(tmp_path: Path, expected_db: Path) -> None:
    """Test that an unreadable catalog fails the comparison."""
    corrupt = tmp_path / "corrupt.db"
    corrupt.write_bytes(b"this is not a database" * 100)

    assert run("compare", str(corrupt), str(expected_db)) == EXIT_FAILED


def test_check_against_script(expected_db: Path, schema_sql: Path) -> None:
    """Test checking a database against the script that built it."""
    assert run("check", str(expected_db), str(schema_sql)) == EXIT_IDENTICAL


def test_check_detects_drift(
    tmp_path: Path,
    schema_sql: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that a database missing an index fails the check."""
    actual_db = create_database(
        tmp_path / "actual.db",
        "CREATE TABLE events (id INTEGER PRIMARY KEY, ts INTEGER NOT NULL);",
    )

    code = run("check", str(actual_db), str(schema_sql), "--fmt", "html")

    assert code == EXIT_DIFFERENT
    assert "<!DOCTYPE html>" in capsys.readouterr().out


def test_check_invalid_script(tmp_path: Path, expected_db: Path) -> None:
    """Test that a broken schema script fails the check."""
    script = tmp_path / "broken.sql"
    script.write_text("CREATE TABLE (")

    assert run("check", str(expected_db), str(script)) == EXIT_FAILED


def test_compare_closes_first_database_when_second_fails(
    tmp_path: Path,
    expected_db: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that the already opened database is closed on an open failure."""
    actual_db = create_database(tmp_path / "actual.db", SCHEMA)
    opened: list[Connection] = []

    def open_first_only(location: Path) -> Connection:
        if opened:
            msg = "unable to open database file"
            raise OperationalError(msg)
        opened.append(read_only(location))
        return opened[0]

    monkeypatch.setattr(cli, "read_only", open_first_only)

    assert run("compare", str(actual_db), str(expected_db)) == EXIT_FAILED
    with pytest.raises(ProgrammingError):
        opened[0].execute("SELECT 1")
