"""Simple query builder for catalog queries."""

from __future__ import annotations


def select(*columns: str) -> Query:
    """Start a SELECT query with the given columns."""
    return Query(columns or ("*",))


def quote_identifier(name: str) -> str:
    """Quote an identifier so it can never end the quoted context early."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def schema_table(schema: str) -> str:
    """Return the qualified catalog table of the given attached schema."""
    return f"{quote_identifier(schema)}.sqlite_schema"


def pragma(name: str, arguments: int = 2) -> str:
    """Generate a table-valued pragma call taking bound parameters."""
    placeholders = ", ".join("?" * arguments)
    return f"pragma_{name}({placeholders})"


class Query:
    """A fluent SELECT query builder."""

    def __init__(self, columns: tuple[str, ...]) -> None:
        """Initialize with column names."""
        self._columns = columns
        self._table: str | None = None
        self._where: list[str] = []
        self._order_by: list[str] = []

    def from_(self, table: str) -> Query:
        """Set the FROM clause."""
        self._table = table
        return self

    def where(self, *conditions: str) -> Query:
        """Add a WHERE condition."""
        self._where.extend(conditions)
        return self

    def order_by(self, *columns: str) -> Query:
        """Add ORDER BY columns."""
        self._order_by.extend(columns)
        return self

    def __str__(self) -> str:
        """Convert the query to SQL string."""
        if not self._table:
            msg = "FROM clause is required"
            raise ValueError(msg)

        query = f"SELECT {', '.join(self._columns)} FROM {self._table}"  # noqa: S608
        if self._where:
            query += f" WHERE {' AND '.join(self._where)}"
        if self._order_by:
            query += f" ORDER BY {', '.join(self._order_by)}"

        return query
