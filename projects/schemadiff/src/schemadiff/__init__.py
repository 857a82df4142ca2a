"""Schema comparison module for SQLite databases."""

from schemadiff.catalog import (
    index_exists,
    list_columns,
    list_index_columns,
    list_indices,
    list_tables,
    read_only,
    reference_database,
    table_exists,
)
from schemadiff.diff import diff_sequences, edit_script
from schemadiff.errors import CatalogQueryError, FormattingError, SchemaDiffError
from schemadiff.main import (
    Difference,
    DifferenceKind,
    compare_schemas,
    differences_to_html,
    differences_to_json,
    differences_to_text,
    schema_differences,
)
from schemadiff.records import Column, Index, IndexColumn, SqlValue, ValueKind

__all__ = [
    "CatalogQueryError",
    "Column",
    "Difference",
    "DifferenceKind",
    "FormattingError",
    "Index",
    "IndexColumn",
    "SchemaDiffError",
    "SqlValue",
    "ValueKind",
    "compare_schemas",
    "diff_sequences",
    "differences_to_html",
    "differences_to_json",
    "differences_to_text",
    "edit_script",
    "index_exists",
    "list_columns",
    "list_index_columns",
    "list_indices",
    "list_tables",
    "read_only",
    "reference_database",
    "schema_differences",
    "table_exists",
]
