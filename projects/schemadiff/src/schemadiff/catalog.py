"""Catalog introspection for SQLite connections.

Each function re-queries the catalog; nothing is cached. Table and index
names are always bound as parameters of the table-valued pragma functions,
never spliced into the SQL text.
"""

from __future__ import annotations

from logging import getLogger
from sqlite3 import Connection, Error, Row, connect
from typing import TYPE_CHECKING

from schemadiff.errors import CatalogQueryError
from schemadiff.query import Query, pragma, schema_table, select
from schemadiff.records import Column, Index, IndexColumn, SqlValue

if TYPE_CHECKING:
    from pathlib import Path

logger = getLogger(__name__)


def read_only(location: Path) -> Connection:
    """Open an existing database file without write access."""
    return connect(f"file:{location}?mode=ro", uri=True)


def reference_database(script: str) -> Connection:
    """Build an in-memory database from a DDL script."""
    connection = connect(":memory:")
    try:
        connection.executescript(script)
    except Error:
        connection.close()
        raise
    return connection


def execute(
    connection: Connection,
    query: Query,
    parameters: tuple[str, ...],
    step: str,
    target: str,
) -> list[Row]:
    """Run a catalog query, wrapping driver errors with the failing step."""
    logger.debug("%s %s: %s %s", step, target, query, parameters)
    try:
        cursor = connection.cursor()
        cursor.row_factory = Row
        return cursor.execute(str(query), parameters).fetchall()
    except Error as err:
        raise CatalogQueryError(step, target, err) from err


def list_tables(connection: Connection, *, schema: str = "main") -> list[str]:
    """Return all user table names, excluding sqlite_ internals, sorted by name."""
    rows = execute(
        connection,
        select("name")
        .from_(schema_table(schema))
        .where("type = 'table'", "name NOT LIKE 'sqlite_%'")
        .order_by("name"),
        (),
        "list tables of schema",
        repr(schema),
    )
    return [row["name"] for row in rows]


def table_exists(connection: Connection, table: str, *, schema: str = "main") -> bool:
    """Return whether the schema holds a table with this name, in any case."""
    rows = execute(
        connection,
        select("1")
        .from_(schema_table(schema))
        .where("type = 'table'", "name = ? COLLATE NOCASE"),
        (table,),
        "look up table",
        repr(table),
    )
    return bool(rows)


def index_exists(connection: Connection, index: str, *, schema: str = "main") -> bool:
    """Return whether the schema holds an index with this name on any table."""
    rows = execute(
        connection,
        select("1")
        .from_(schema_table(schema))
        .where("type = 'index'", "name = ? COLLATE NOCASE"),
        (index,),
        "look up index",
        repr(index),
    )
    return bool(rows)


def list_columns(
    connection: Connection,
    table: str,
    *,
    schema: str = "main",
) -> list[Column]:
    """Return the columns of the given table in ordinal order."""
    step, target = "list columns of table", repr(table)
    rows = execute(
        connection,
        select("cid", "name", "type", '"notnull"', "dflt_value", "pk")
        .from_(pragma("table_info"))
        .order_by("cid"),
        (table, schema),
        step,
        target,
    )
    # Every table has at least one column.
    if not rows:
        raise CatalogQueryError(step, target, "no such table")
    return [
        Column(
            cid=row["cid"],
            name=row["name"],
            type=row["type"],
            notnull=bool(row["notnull"]),
            dflt_value=SqlValue.of(row["dflt_value"]),
            pk=row["pk"],
        )
        for row in rows
    ]


def list_indices(
    connection: Connection,
    table: str,
    *,
    schema: str = "main",
) -> list[Index]:
    """Return the indices of the given table in the order the catalog reports."""
    if not table_exists(connection, table, schema=schema):
        raise CatalogQueryError("list indices of table", repr(table), "no such table")
    rows = execute(
        connection,
        select("seq", "name", '"unique"', "origin", "partial").from_(
            pragma("index_list"),
        ),
        (table, schema),
        "list indices of table",
        repr(table),
    )
    return [
        Index(
            seq=row["seq"],
            name=row["name"],
            unique=bool(row["unique"]),
            origin=row["origin"],
            partial=bool(row["partial"]),
        )
        for row in rows
    ]


def list_index_columns(
    connection: Connection,
    index: str,
    *,
    schema: str = "main",
) -> list[IndexColumn]:
    """Return the column bindings of the given index in key order."""
    step, target = "list columns of index", repr(index)
    rows = execute(
        connection,
        select("seqno", "cid", "name").from_(pragma("index_info")),
        (index, schema),
        step,
        target,
    )
    # Every index covers at least one column or expression.
    if not rows:
        raise CatalogQueryError(step, target, "no such index")
    return [
        IndexColumn(seqno=row["seqno"], cid=row["cid"], name=row["name"])
        for row in rows
    ]
