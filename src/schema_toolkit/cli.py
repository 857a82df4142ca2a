"""Command line interface for the schema toolkit."""

import sys
from collections.abc import Iterable
from contextlib import closing
from logging import DEBUG, basicConfig
from pathlib import Path
from sqlite3 import Connection, Error
from typing import Literal, NoReturn

from cyclopts import App
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from schemadiff import (
    Difference,
    SchemaDiffError,
    differences_to_html,
    differences_to_json,
    differences_to_text,
    read_only,
    reference_database,
    schema_differences,
)

app = App(help="SQLite schema comparison CLI tool")


type Format = Literal["text", "json", "html"]


err_console = Console(stderr=True)

# Constants
SQLITE_EXTENSIONS = {".sqlite", ".db", ".sqlite3"}
SCRIPT_EXTENSIONS = {".sql"}
EXIT_IDENTICAL = 0
EXIT_DIFFERENT = 1
EXIT_FAILED = 2


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Send debug logging of the catalog queries to stderr."""
    if verbose:
        basicConfig(
            level=DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def validate_location(location: Path) -> None:
    """Validate that the input file exists."""
    if not location.is_file():
        print_error(f"File does not exist: {location}")
        sys.exit(EXIT_FAILED)


def validate_extension(location: Path, file_extensions: Iterable[str]) -> None:
    """Validate input file extension."""
    if location.suffix.lower() not in file_extensions:
        print_error(
            f"File has invalid extension, expected one of: "
            f"{', '.join(sorted(file_extensions))}",
        )
        sys.exit(EXIT_FAILED)


def write_report(differences: list[Difference], fmt: str, title: str) -> None:
    """Write the differences to stdout in the requested format."""
    if fmt == "json":
        sys.stdout.write(differences_to_json(differences))
    elif fmt == "html":
        sys.stdout.write(differences_to_html(differences, title=title))
    elif report := differences_to_text(differences):
        sys.stdout.write(report)


def run_comparison(
    name_a: str,
    connection_a: Connection,
    name_b: str,
    connection_b: Connection,
    fmt: str,
) -> NoReturn:
    """Compare two open connections, report, and exit with the outcome."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=err_console,
            transient=True,
        ) as progress:
            progress.add_task("Comparing schemas...", total=None)
            differences = list(
                schema_differences(name_a, connection_a, name_b, connection_b),
            )
    except SchemaDiffError as e:
        print_error(f"Comparison failed: {e}")
        sys.exit(EXIT_FAILED)

    write_report(differences, fmt, f"{name_a} vs {name_b}")

    if differences:
        print_info(f"Found {len(differences)} mismatched block(s)")
        sys.exit(EXIT_DIFFERENT)
    print_success("Schemas are identical")
    sys.exit(EXIT_IDENTICAL)


@app.command
def compare(
    actual_location: Path,
    expected_location: Path,
    fmt: Format = "text",
    *,
    verbose: bool = False,
) -> None:
    """Compare the schemas of two SQLite databases."""
    configure_logging(verbose=verbose)

    validate_location(actual_location)
    validate_extension(actual_location, SQLITE_EXTENSIONS)
    print_info(f"Actual database: {actual_location}")

    validate_location(expected_location)
    validate_extension(expected_location, SQLITE_EXTENSIONS)
    print_info(f"Expected database: {expected_location}")

    try:
        actual = read_only(actual_location)
    except Error as e:
        print_error(f"Failed to open database: {e}")
        sys.exit(EXIT_FAILED)

    try:
        expected = read_only(expected_location)
    except Error as e:
        actual.close()
        print_error(f"Failed to open database: {e}")
        sys.exit(EXIT_FAILED)

    with closing(actual), closing(expected):
        run_comparison(
            str(actual_location),
            actual,
            str(expected_location),
            expected,
            fmt,
        )


@app.command
def check(
    database_location: Path,
    schema_location: Path,
    fmt: Format = "text",
    *,
    verbose: bool = False,
) -> None:
    """Check a SQLite database against the schema built by a DDL script."""
    configure_logging(verbose=verbose)

    validate_location(database_location)
    validate_extension(database_location, SQLITE_EXTENSIONS)
    print_info(f"Database: {database_location}")

    validate_location(schema_location)
    validate_extension(schema_location, SCRIPT_EXTENSIONS)
    print_info(f"Schema script: {schema_location}")

    try:
        expected = reference_database(schema_location.read_text())
    except Error as e:
        print_error(f"Failed to build reference schema: {e}")
        sys.exit(EXIT_FAILED)

    try:
        actual = read_only(database_location)
    except Error as e:
        expected.close()
        print_error(f"Failed to open database: {e}")
        sys.exit(EXIT_FAILED)

    with closing(actual), closing(expected):
        run_comparison(
            str(database_location),
            actual,
            str(schema_location),
            expected,
            fmt,
        )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
