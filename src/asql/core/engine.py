"""Main asql entry point: the Database session."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from asql.core.connection import DatabaseConnection
from asql.core.hooks import HookCallback, UpdateHookBroadcaster
from asql.core.table import Table
from asql.exceptions import StateError
from asql.query.dispatcher import OperationDispatcher
from asql.schema.registrar import SchemaRegistrar


class Database:
    """A session over one SQLite store.

    Every piece of state (connection, defined tables, hook) lives on the
    instance, so independent databases never interfere.

    Example:
        db = Database().init()
        db.hook("operation=%o, table=%t, rowid=%r", print)
        car = db.define("car", '''
            make    text                    # The make of the car.
            model   text
            year    integer
            color   "text collate nocase"   # Case-insensitive.
        ''')
        car.add({"make": "Ford", "model": "Ranger", "year": 1996, "color": "tan"})
        car.get("color", expr="model='Ranger' && make='Ford'")     # "tan"
    """

    def __init__(self) -> None:
        self._connection: DatabaseConnection | None = None
        self._hooks = UpdateHookBroadcaster()
        self._registrar: SchemaRegistrar | None = None

    def init(self, filename: str | Path | None = None, echo: bool = False) -> Database:
        """Open the store.

        Args:
            filename: SQLite file to create or reuse; in-memory when omitted
            echo: Whether to echo SQL statements (for debugging)

        Returns:
            self, for chaining
        """
        self.close()
        self._hooks = UpdateHookBroadcaster()
        connection = DatabaseConnection(filename, echo=echo)
        connection.set_row_listener(self._hooks.row_changed)
        connection.open()

        self._connection = connection
        self._registrar = SchemaRegistrar(connection, OperationDispatcher(connection, self._hooks))
        return self

    @property
    def is_initialized(self) -> bool:
        """Whether `init()` has been called and the store is open."""
        return self._registrar is not None

    def _require_registrar(self, operation: str) -> SchemaRegistrar:
        if self._registrar is None:
            raise StateError(operation)
        return self._registrar

    def define(self, table: str, columns: str | Mapping[str, str]) -> Table:
        """Define a table, creating it in the store if it does not exist.

        Table and column names are used verbatim in SQL and must come from
        program text, never from untrusted input.

        Args:
            table: Table name
            columns: Column block (``<column> <type> [# comment]`` per line)
                     or a ``{column: type}`` mapping

        Returns:
            Table handle with add/get/mod/mod_or_add/delete/cols

        Raises:
            StateError: If the database is not initialized
            SchemaError: If the column definitions cannot be parsed
        """
        return self._require_registrar("define").define(table, columns)

    def hook(self, template: str | None, callback: HookCallback | None = None) -> None:
        """Set the update hook, replacing any previous one.

        The template is formatted for every inserted, updated and deleted
        row (and once for ``delete("*")``) and passed to ``callback``. Without
        a callback the message is logged at INFO level.

        Args:
            template: Text with %%, %o, %t, %r tokens; None removes the hook
            callback: Receives the formatted message

        Raises:
            StateError: If the database is not initialized
        """
        self._require_registrar("hook")
        self._hooks.subscribe(template, callback)

    def table(self, name: str) -> Table:
        """Get the handle of a defined table.

        Raises:
            StateError: If the database is not initialized
            TableNotDefinedError: If the table was not defined
        """
        return self._require_registrar("table").get(name)

    def __getitem__(self, name: str) -> Table:
        return self.table(name)

    @property
    def tables(self) -> list[str]:
        """Names of defined tables."""
        return self._require_registrar("tables").list_tables()

    def close(self) -> None:
        """Close the store. The database can be initialized again afterwards."""
        if self._connection is not None:
            self._connection.close()
        self._connection = None
        self._registrar = None

    def __enter__(self) -> Database:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


def init(filename: str | Path | None = None, echo: bool = False) -> Database:
    """Create and initialize a Database."""
    return Database().init(filename, echo=echo)
