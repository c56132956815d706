"""Operation dispatcher.

Turns an OperationRequest into a statement, runs it and shapes the result.
Holds no state between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from asql.core.types import OperationKind, OperationRequest, QueryOptions, ResultFormat
from asql.exceptions import ArgumentError, EngineError, FormatError
from asql.query import compiler
from asql.query.binder import ParameterBinder, bound_parameters

if TYPE_CHECKING:
    from asql.core.connection import DatabaseConnection, StatementResult
    from asql.core.hooks import UpdateHookBroadcaster

logger = logging.getLogger(__name__)

WILDCARD = "*"


def build_options(**options: Any) -> QueryOptions:
    """Validate operation options.

    Unset options (None) are left out so that ``model_fields_set`` only
    reports what the caller actually passed.

    Raises:
        FormatError: If ``format`` is not 'list' or 'dict'
        ArgumentError: For any other invalid option
    """
    given = {name: value for name, value in options.items() if value is not None}
    try:
        return QueryOptions(**given)
    except ValidationError as e:
        errors = e.errors()
        if any(err["loc"] and err["loc"][0] == "format" for err in errors):
            raise FormatError(given.get("format")) from e
        first = errors[0]
        option = str(first["loc"][0]) if first["loc"] else "options"
        raise ArgumentError(
            f"Invalid value for option '{option}': {first['msg']}",
            {"option": option},
        ) from e


def normalize_columns(columns: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Return the projection as a list; empty means ``*``."""
    if columns is None or columns == "":
        return [WILDCARD]
    if isinstance(columns, str):
        return [columns]
    names = [str(c) for c in columns]
    return names or [WILDCARD]


class OperationDispatcher:
    """Routes table operations to the clause compiler and the engine."""

    def __init__(self, connection: DatabaseConnection, hooks: UpdateHookBroadcaster) -> None:
        """Initialize the dispatcher.

        Args:
            connection: Connection statements are executed on
            hooks: Broadcaster notified after every successful statement
        """
        self._connection = connection
        self._hooks = hooks

    def dispatch(self, request: OperationRequest) -> Any:
        """Run one operation and return its normalized result."""
        match request.kind:
            case OperationKind.ADD:
                return self._add(request.table, request.values)
            case OperationKind.DEL:
                return self._delete(request.table, request.wildcard, request.options)
            case OperationKind.MOD:
                return self._mod(request.table, request.values, request.options)
            case OperationKind.MOD_OR_ADD:
                return self._mod_or_add(request.table, request.values, request.options)
            case OperationKind.GET:
                return self._get(request.table, request.columns, request.options)
            case OperationKind.COLS:
                return self._connection.table_columns(request.table)
        raise ArgumentError(
            f"Unknown operation '{request.kind}'. Valid operations: "
            f"{', '.join(OperationKind.values())}",
            {"operation": str(request.kind)},
        )

    def _execute(
        self,
        sql: str,
        binder: ParameterBinder,
        options: QueryOptions | None = None,
    ) -> StatementResult:
        """Execute a compiled statement and deliver its hook events."""
        params = binder.merge(options.params if options else None)
        logger.debug(f"Executing: {sql} params={sorted(params)}")
        try:
            result = self._connection.execute(sql, params)
        except EngineError:
            self._hooks.discard()
            raise
        self._hooks.flush()
        return result

    def _add(self, table: str, values: dict[str, Any]) -> int | None:
        if not values:
            raise ArgumentError(
                f"Cannot add to '{table}': no column values given.", {"table": table}
            )
        with bound_parameters() as binder:
            sql = f"INSERT INTO {table} {compiler.values(values, binder)}"
            return self._execute(sql, binder).lastrowid

    def _delete(self, table: str, wildcard: bool, options: QueryOptions) -> int:
        if wildcard:
            if options.model_fields_set:
                raise ArgumentError(
                    f"When deleting all rows with '{table}.delete(\"*\")', "
                    f"no other arguments may be present.",
                    {"table": table, "options": sorted(options.model_fields_set)},
                )
            with bound_parameters() as binder, self._hooks.muted():
                result = self._execute(f"DELETE FROM {table}", binder)
            self._hooks.emit("delete_all", table, None)
            return result.rowcount

        where = compiler.where(options)
        if not where:
            raise ArgumentError(
                f"Must provide argument(s) to '{table}.delete': "
                f"either '*', or expr=<expression> and/or rowid=<id>.",
                {"table": table},
            )
        with bound_parameters() as binder:
            return self._execute(f"DELETE FROM {table} {where}", binder, options).rowcount

    def _mod(self, table: str, values: dict[str, Any], options: QueryOptions) -> int:
        if not values:
            raise ArgumentError(
                f"Cannot modify '{table}': no column values given.", {"table": table}
            )
        with bound_parameters() as binder:
            sql = compiler.join_clauses(
                f"UPDATE {table}",
                compiler.set_clause(values, binder),
                compiler.where(options),
            )
            return self._execute(sql, binder, options).rowcount

    def _mod_or_add(self, table: str, values: dict[str, Any], options: QueryOptions) -> Any:
        if not values:
            raise ArgumentError(
                f"Cannot modify or add to '{table}': no column values given.", {"table": table}
            )
        if self._get(table, ["count()"], options.selector()):
            return self._mod(table, values, options)
        return self._add(table, values)

    def _get(self, table: str, columns: list[str], options: QueryOptions) -> Any:
        columns = columns or [WILDCARD]
        with bound_parameters() as binder:
            sql = compiler.join_clauses(
                f"SELECT {', '.join(columns)} FROM {table}",
                compiler.where(options),
                compiler.orderby(options),
                compiler.limit(options),
            )
            result = self._execute(sql, binder, options)

        if options.format == ResultFormat.DICT:
            if not result.rows:
                return {}
            return dict(zip(result.columns, result.rows[0], strict=False))

        flat = [value for row in result.rows for value in row]
        # One column of one row: return the bare value
        if (
            len(result.columns) == 1
            and WILDCARD not in columns
            and compiler.effective_limit(options) == 1
        ):
            return flat[0] if flat else None
        return flat
