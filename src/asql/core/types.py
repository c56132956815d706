"""Core types and specifications for asql."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field


class OperationKind(StrEnum):
    """Operations generated for every defined table."""

    ADD = "add"
    GET = "get"
    MOD = "mod"
    MOD_OR_ADD = "mod+"
    DEL = "del"
    COLS = "cols"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid operation names."""
        return [k.value for k in cls]


class HookOperation(StrEnum):
    """Row-change operations reported to the update hook."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_ALL = "delete_all"  # Synthetic, fired once by `del *`


class ResultFormat(StrEnum):
    """Shapes a `get` result can take."""

    LIST = "list"  # Flat, row-major sequence of values
    DICT = "dict"  # Column -> value mapping of a single row


class ColumnSpec(BaseModel):
    """A column parsed from a column block.

    The type text is opaque: it is handed to the engine verbatim.
    """

    name: str = Field(..., description="Column name")
    type_spec: str = Field(default="", description="Type affinity and constraints")

    model_config = {"frozen": True}

    def definition(self) -> str:
        """Return the column definition as it appears in CREATE TABLE."""
        return f"{self.name} {self.type_spec}".rstrip()


class TableSchema(BaseModel):
    """Registered definition of one table.

    Table constraints (e.g. a composite primary key) are kept apart from the
    columns and emitted after them.
    """

    name: str = Field(..., description="Table name")
    columns: tuple[ColumnSpec, ...] = Field(default=(), description="Columns in source order")
    constraints: tuple[str, ...] = Field(
        default=(), description="Table-level constraint clauses, e.g. 'primary key (x, y)'"
    )

    model_config = {"frozen": True}

    @property
    def column_names(self) -> list[str]:
        """Names of the declared columns."""
        return [c.name for c in self.columns]

    def definitions(self) -> list[str]:
        """Column definitions followed by table constraints."""
        return [c.definition() for c in self.columns] + list(self.constraints)

    def create_statement(self) -> str:
        """Return the CREATE TABLE statement for this schema."""
        return f"CREATE TABLE {self.name} ({', '.join(self.definitions())})"


class QueryOptions(BaseModel):
    """Options recognized by the table operations.

    `rowid` is deliberately untyped: a value that is not an integer selects
    nothing instead of failing.
    """

    rowid: Any = Field(default=None, description="Select a single row by rowid")
    expr: str | None = Field(default=None, description="WHERE expression (~=, &&, ||)")
    params: dict[str, Any] | None = Field(
        default=None, description="Values for :name placeholders used in expr"
    )
    order: str | None = Field(default=None, description="ORDER BY column/expression")
    order_asc: str | None = Field(default=None, description="ORDER BY ... ASC")
    order_desc: str | None = Field(default=None, description="ORDER BY ... DESC")
    limit: int | Literal["none"] | None = Field(
        default=None, description="Row limit; 'none' for unbounded, default 1"
    )
    format: ResultFormat = Field(default=ResultFormat.LIST, description="Result shape")

    model_config = {"extra": "forbid"}

    def selector(self) -> QueryOptions:
        """Return only the row-selecting options (rowid, expr, params)."""
        return QueryOptions(rowid=self.rowid, expr=self.expr, params=self.params)


class OperationRequest(BaseModel):
    """One table-scoped operation, alive for a single dispatch call."""

    kind: OperationKind
    table: str
    values: dict[str, Any] = Field(default_factory=dict, description="Column -> value map")
    columns: list[str] = Field(default_factory=list, description="Projection for get")
    wildcard: bool = Field(default=False, description="`del *` form")
    options: QueryOptions = Field(default_factory=QueryOptions)
