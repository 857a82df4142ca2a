"""Schema comparison between two SQLite connections."""

from __future__ import annotations

import json
from enum import StrEnum, auto
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from schemadiff.catalog import (
    index_exists,
    list_columns,
    list_index_columns,
    list_indices,
    list_tables,
    table_exists,
)
from schemadiff.diff import diff_sequences

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from sqlite3 import Connection

    from schemadiff.records import Index

logger = getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


class DifferenceKind(StrEnum):
    """What kind of catalog sequence a difference was found in."""

    TABLES = auto()
    COLUMNS = auto()
    INDICES = auto()
    INDEX_COLUMNS = auto()


class Difference(NamedTuple):
    """One labelled block of the comparison report."""

    kind: DifferenceKind
    table: str | None
    index_name: str | None
    label: str
    diff: str

    def __str__(self) -> str:
        """Render the label line followed by the unified diff."""
        return f"{self.label}\n{self.diff}"


def quoted(name: str) -> str:
    """Double-quote a table or index name for a block label."""
    return json.dumps(name, ensure_ascii=False)


def sorted_indices(indices: Iterable[Index]) -> list[Index]:
    """Sort indices by name and renumber them in that order.

    The catalog numbers indices in enumeration order, which depends on the
    order they were created in.
    """
    ordered = sorted(indices, key=lambda index: index.name)
    return [index._replace(seq=seq) for seq, index in enumerate(ordered)]


def schema_differences(
    name_a: str,
    connection_a: Connection,
    name_b: str,
    connection_b: Connection,
    *,
    schema_a: str = "main",
    schema_b: str = "main",
) -> Iterator[Difference]:
    """Yield every difference between the two schemas, in report order.

    Per-table comparisons are driven by the tables of ``connection_a``; tables
    only present in ``connection_b`` show up in the table list block alone.
    """
    versus = f"{name_a} vs {name_b}"

    tables_a = list_tables(connection_a, schema=schema_a)
    tables_b = list_tables(connection_b, schema=schema_b)
    if diff := diff_sequences(name_a, tables_a, name_b, tables_b):
        yield Difference(
            DifferenceKind.TABLES,
            None,
            None,
            f"table list mismatch, {versus}:",
            diff,
        )

    for table in tables_a:
        logger.debug("Comparing table %s", table)
        # A table missing from B compares against nothing
        present_b = table_exists(connection_b, table, schema=schema_b)

        columns_a = list_columns(connection_a, table, schema=schema_a)
        columns_b = (
            list_columns(connection_b, table, schema=schema_b) if present_b else []
        )
        if diff := diff_sequences(name_a, columns_a, name_b, columns_b):
            yield Difference(
                DifferenceKind.COLUMNS,
                table,
                None,
                f"table {quoted(table)} column, {versus}:",
                diff,
            )

        indices_a = sorted_indices(list_indices(connection_a, table, schema=schema_a))
        indices_b = sorted_indices(
            list_indices(connection_b, table, schema=schema_b) if present_b else [],
        )
        if diff := diff_sequences(name_a, indices_a, name_b, indices_b):
            yield Difference(
                DifferenceKind.INDICES,
                table,
                None,
                f"table {quoted(table)} indices, {versus}:",
                diff,
            )

        for index in indices_a:
            index_columns_a = list_index_columns(
                connection_a,
                index.name,
                schema=schema_a,
            )
            index_columns_b = (
                list_index_columns(connection_b, index.name, schema=schema_b)
                if index_exists(connection_b, index.name, schema=schema_b)
                else []
            )
            if diff := diff_sequences(name_a, index_columns_a, name_b, index_columns_b):
                label = f"table {quoted(table)} index {quoted(index.name)} columns"
                yield Difference(
                    DifferenceKind.INDEX_COLUMNS,
                    table,
                    index.name,
                    f"{label} {versus}:",
                    diff,
                )


def compare_schemas(
    name_a: str,
    connection_a: Connection,
    name_b: str,
    connection_b: Connection,
    *,
    schema_a: str = "main",
    schema_b: str = "main",
) -> str | None:
    """Compare two schemas and return the report, or None if they are identical.

    Catalog failures propagate as ``CatalogQueryError``; they are never
    reported as matching schemas.
    """
    differences = schema_differences(
        name_a,
        connection_a,
        name_b,
        connection_b,
        schema_a=schema_a,
        schema_b=schema_b,
    )
    return differences_to_text(differences)


def differences_to_text(differences: Iterable[Difference]) -> str | None:
    """Concatenate the labelled blocks, or return None when there are none."""
    report = "".join(str(difference) for difference in differences)
    return report or None


def differences_to_json(differences: Iterable[Difference]) -> str:
    """Convert differences to a JSON array of objects."""
    return json.dumps(
        [difference._asdict() for difference in differences],
        ensure_ascii=False,
    )


def differences_to_html(
    differences: Iterable[Difference],
    *,
    title: str = "Schema Comparison",
) -> str:
    """Generate an HTML report from differences."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("report.html")
    return template.render(title=title, differences=list(differences))
