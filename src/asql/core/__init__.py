"""Core components for asql."""

from asql.core.connection import DatabaseConnection, StatementResult
from asql.core.hooks import UpdateHookBroadcaster, format_event
from asql.core.types import (
    ColumnSpec,
    HookOperation,
    OperationKind,
    OperationRequest,
    QueryOptions,
    ResultFormat,
    TableSchema,
)

__all__ = [
    "DatabaseConnection",
    "StatementResult",
    "UpdateHookBroadcaster",
    "format_event",
    "ColumnSpec",
    "TableSchema",
    "QueryOptions",
    "OperationKind",
    "OperationRequest",
    "HookOperation",
    "ResultFormat",
]
