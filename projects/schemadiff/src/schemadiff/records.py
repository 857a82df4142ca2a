"""Catalog records and their canonical text form.

Every record is a ``NamedTuple``: equality compares the declared fields and
``describe`` renders those same fields, so the two never drift apart.
"""

from __future__ import annotations

import json
from enum import StrEnum, auto
from typing import TYPE_CHECKING, NamedTuple, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

type Scalar = None | int | float | str | bytes


class ValueKind(StrEnum):
    """Storage class of a value read from the catalog."""

    NULL = auto()
    INTEGER = auto()
    REAL = auto()
    TEXT = auto()
    BLOB = auto()


class SqlValue(NamedTuple):
    """A dynamically typed SQLite value tagged with its storage class."""

    kind: ValueKind
    value: Scalar = None

    @classmethod
    def of(cls, value: Scalar) -> SqlValue:
        """Tag a raw value returned by the sqlite3 driver."""
        match value:
            case None:
                return cls(ValueKind.NULL)
            case bool() | int():
                return cls(ValueKind.INTEGER, int(value))
            case float():
                return cls(ValueKind.REAL, value)
            case str():
                return cls(ValueKind.TEXT, value)
            case bytes():
                return cls(ValueKind.BLOB, value)
        msg = f"Unsupported SQLite value of type {type(value)}"
        raise TypeError(msg)

    def __str__(self) -> str:
        """Render as ``Kind(payload)``, or ``Null``."""
        match self.kind:
            case ValueKind.NULL:
                return "Null"
            case ValueKind.BLOB if isinstance(self.value, bytes):
                return f"Blob(x'{self.value.hex()}')"
            case _:
                return f"{self.kind.capitalize()}({render(self.value)})"


class Record(Protocol):
    """Anything with named fields that ``describe`` can render."""

    _fields: tuple[str, ...]

    def __iter__(self) -> Iterator[object]: ...


def render(value: object) -> str:
    """Render a single field value deterministically."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, float):
        return repr(value)
    return str(value)


def describe(record: Record) -> str:
    """Render every field of a record as ``Name { field: value, ... }``."""
    fields = ", ".join(
        f"{name}: {render(value)}"
        for name, value in zip(record._fields, record, strict=True)
    )
    return f"{type(record).__name__} {{ {fields} }}"


class Column(NamedTuple):
    """One row of ``pragma_table_info``."""

    cid: int
    name: str
    type: str
    notnull: bool
    dflt_value: SqlValue
    pk: int

    def __str__(self) -> str:
        """Canonical display form."""
        return describe(self)


class Index(NamedTuple):
    """One row of ``pragma_index_list``."""

    seq: int
    name: str
    unique: bool
    # "c" for CREATE INDEX, "u" for UNIQUE, "pk" for PRIMARY KEY
    origin: str
    partial: bool

    def __str__(self) -> str:
        """Canonical display form."""
        return describe(self)


class IndexColumn(NamedTuple):
    """One row of ``pragma_index_info``.

    ``cid`` is -1 for the rowid and -2 for an expression, which also has no
    ``name``.
    """

    seqno: int
    cid: int
    name: str | None

    def __str__(self) -> str:
        """Canonical display form."""
        return describe(self)
