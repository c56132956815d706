"""Custom exceptions for asql.

Every operation either returns a result or raises one of these:
- Argument-shape errors are raised before any SQL is compiled or executed
- Engine failures keep the driver's original diagnostic text
"""

from __future__ import annotations

from typing import Any


class ASQLError(Exception):
    """Base exception for all asql errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class StateError(ASQLError):
    """Database used before `init()` or after `close()`."""

    def __init__(self, operation: str) -> None:
        message = (
            f"Cannot run '{operation}': no database has been initialized. "
            f"Call init() first."
        )
        super().__init__(message, {"operation": operation})
        self.operation = operation


class SchemaError(ASQLError):
    """Column block could not be parsed, or a table is not defined."""

    pass


class TableNotDefinedError(SchemaError):
    """Table has not been defined on this database."""

    def __init__(self, table: str, defined_tables: list[str] | None = None) -> None:
        defined = defined_tables or []
        if defined:
            message = f"Table '{table}' is not defined. Defined tables: {', '.join(defined)}"
        else:
            message = f"Table '{table}' is not defined. No tables have been defined yet."
        super().__init__(message, {"table": table, "defined_tables": defined})
        self.table = table
        self.defined_tables = defined


class ArgumentError(ASQLError):
    """Missing or contradictory operation arguments."""

    pass


class FormatError(ArgumentError):
    """Unsupported result format requested."""

    VALID_FORMATS = ["list", "dict"]

    def __init__(self, result_format: Any) -> None:
        message = (
            f"Invalid format '{result_format}'. Valid formats: {', '.join(self.VALID_FORMATS)}"
        )
        super().__init__(
            message, {"format": str(result_format), "valid_formats": self.VALID_FORMATS}
        )
        self.result_format = result_format


class EngineError(ASQLError):
    """The database engine rejected or failed a statement."""

    def __init__(self, message: str, statement: str | None = None) -> None:
        super().__init__(message, {"statement": statement} if statement else None)
        self.statement = statement
