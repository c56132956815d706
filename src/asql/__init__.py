"""asql - declarative tables and safe queries over SQLite.

Describe a table once, get a handle with typed operations bound to it, and
query with a compact expression syntax. Values are always bound as
parameters, never spliced into SQL.

Example:
    import asql

    db = asql.init()  # in-memory; pass a filename to persist

    db.hook("operation=%o, table=%t, rowid=%r", print)

    car = db.define("car", '''
        make    text                    # The make of the car.
        model   text
        year    integer
        color   "text collate nocase"   # Case-insensitive.
    ''')

    car.add({"make": "Ford", "model": "Ranger", "year": 1996, "color": "tan"})
    car.get("color", expr="model='Ranger' && make='Ford'")          # "tan"
    car.get("*", expr="model ~= :model", params={"model": "ranger"})
    car.mod({"model": "Ranger XL"}, rowid=1)
    car.get(["make", "model"], limit="none", order_desc="year")
    car.get("max(year)")
    car.delete("*")
"""

from asql.core.engine import Database, init
from asql.core.table import Table
from asql.core.types import (
    ColumnSpec,
    HookOperation,
    OperationKind,
    OperationRequest,
    QueryOptions,
    ResultFormat,
    TableSchema,
)
from asql.exceptions import (
    ArgumentError,
    ASQLError,
    EngineError,
    FormatError,
    SchemaError,
    StateError,
    TableNotDefinedError,
)

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "Database",
    "Table",
    "init",
    # Types
    "ColumnSpec",
    "TableSchema",
    "QueryOptions",
    "OperationKind",
    "OperationRequest",
    "HookOperation",
    "ResultFormat",
    # Exceptions
    "ASQLError",
    "StateError",
    "SchemaError",
    "TableNotDefinedError",
    "ArgumentError",
    "FormatError",
    "EngineError",
]
