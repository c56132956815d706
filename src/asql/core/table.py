"""Per-table operation handle."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from asql.core.types import OperationKind, OperationRequest, TableSchema
from asql.exceptions import ArgumentError
from asql.query.dispatcher import WILDCARD, build_options, normalize_columns

if TYPE_CHECKING:
    from asql.query.dispatcher import OperationDispatcher


class Table:
    """Operations bound to one defined table.

    Example:
        car = db.define("car", '''
            make    text
            model   text
            year    integer
        ''')
        car.add({"make": "Ford", "model": "Ranger", "year": 1996})
        car.get("model", expr="make = 'Ford'")            # "Ranger"
        car.get(["make", "model"], limit="none", order_desc="year")
        car.mod({"model": "Ranger XL"}, rowid=1)
        car.delete(rowid=1)
    """

    def __init__(self, schema: TableSchema, dispatcher: OperationDispatcher) -> None:
        """Initialize table handle.

        Args:
            schema: Parsed definition of the table
            dispatcher: Dispatcher that runs the operations
        """
        self._schema = schema
        self._dispatcher = dispatcher

    @property
    def name(self) -> str:
        """Get table name."""
        return self._schema.name

    @property
    def schema(self) -> TableSchema:
        """Get the definition this handle was created from."""
        return self._schema

    def _run(self, kind: OperationKind, **fields: Any) -> Any:
        return self._dispatcher.dispatch(OperationRequest(kind=kind, table=self.name, **fields))

    def add(self, values: dict[str, Any]) -> int | None:
        """Insert a row.

        Args:
            values: Column -> value map

        Returns:
            rowid of the new row
        """
        return self._run(OperationKind.ADD, values=dict(values))

    def get(
        self,
        columns: str | list[str] | tuple[str, ...] | None = None,
        *,
        rowid: Any = None,
        expr: str | None = None,
        params: dict[str, Any] | None = None,
        order: str | None = None,
        order_asc: str | None = None,
        order_desc: str | None = None,
        limit: int | str | None = None,
        format: str | None = None,
    ) -> Any:
        """Select rows.

        The limit is 1 unless ``limit`` says otherwise (``"none"`` for all
        rows); ``format="dict"`` always returns a single row as a mapping.
        With the default list format, asking for exactly one column (not
        ``*``) of one row returns the bare value.

        Args:
            columns: Column, expression (e.g. ``"max(year)"``) or list of them
            rowid: Select one row by rowid
            expr: WHERE expression; ``~=``, ``&&``, ``||`` become LIKE, AND, OR
            params: Values for ``:name`` placeholders in ``expr``
            order: ORDER BY column
            order_asc: ORDER BY column ASC (ignored if ``order`` is given)
            order_desc: ORDER BY column DESC (ignored if ``order``/``order_asc`` is given)
            limit: ``"none"`` or an integer
            format: ``"list"`` (flat values) or ``"dict"``

        Returns:
            Flat list of values, a dict, or a single value
        """
        options = build_options(
            rowid=rowid,
            expr=expr,
            params=params,
            order=order,
            order_asc=order_asc,
            order_desc=order_desc,
            limit=limit,
            format=format,
        )
        return self._run(OperationKind.GET, columns=normalize_columns(columns), options=options)

    def mod(
        self,
        values: dict[str, Any],
        *,
        rowid: Any = None,
        expr: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> int:
        """Update matching rows (every row when no selector is given).

        Returns:
            Number of rows changed
        """
        options = build_options(rowid=rowid, expr=expr, params=params)
        return self._run(OperationKind.MOD, values=dict(values), options=options)

    def mod_or_add(
        self,
        values: dict[str, Any],
        *,
        rowid: Any = None,
        expr: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Update matching rows, or insert ``values`` if none match."""
        options = build_options(rowid=rowid, expr=expr, params=params)
        return self._run(OperationKind.MOD_OR_ADD, values=dict(values), options=options)

    upsert = mod_or_add

    def delete(
        self,
        target: str | None = None,
        *,
        rowid: Any = None,
        expr: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> int:
        """Delete rows.

        ``delete("*")`` removes every row and must be called alone; otherwise
        ``rowid`` and/or ``expr`` is required.

        Returns:
            Number of rows deleted
        """
        if target is not None and target != WILDCARD:
            raise ArgumentError(
                f"Invalid delete target '{target}' for '{self.name}'. "
                f"Use '*' to delete all rows, or rowid=/expr= to select rows.",
                {"table": self.name, "target": target},
            )
        options = build_options(rowid=rowid, expr=expr, params=params)
        return self._run(OperationKind.DEL, wildcard=target == WILDCARD, options=options)

    def cols(self) -> list[str]:
        """Column names as stored by the engine."""
        return self._run(OperationKind.COLS)

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={self._schema.column_names!r})"
