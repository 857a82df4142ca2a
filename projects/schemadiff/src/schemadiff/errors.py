"""Exceptions raised while comparing database schemas."""


class SchemaDiffError(Exception):
    """Base class for schema comparison failures."""


class CatalogQueryError(SchemaDiffError):
    """Reading table, column or index metadata from a connection failed."""

    def __init__(self, step: str, target: str, cause: object) -> None:
        """Record which introspection step failed and for which object."""
        self.step = step
        self.target = target
        super().__init__(f"{step} {target} failed: {cause}")


class FormattingError(SchemaDiffError):
    """Rendering a record into diff text failed."""
