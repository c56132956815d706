"""Schema registrar: table creation and per-table handles."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from asql.core.hooks import trigger_statements
from asql.core.table import Table
from asql.exceptions import TableNotDefinedError
from asql.schema.parser import parse_columns

if TYPE_CHECKING:
    from asql.core.connection import DatabaseConnection
    from asql.core.types import TableSchema
    from asql.query.dispatcher import OperationDispatcher

logger = logging.getLogger(__name__)


class SchemaRegistrar:
    """Owns the table name -> Table mapping of one database.

    Defining a table creates it only if it is missing. An existing table is
    never altered: this is not a migration mechanism.
    """

    def __init__(self, connection: DatabaseConnection, dispatcher: OperationDispatcher) -> None:
        """Initialize the registrar.

        Args:
            connection: Connection used for DDL and metadata lookups
            dispatcher: Dispatcher handed to every generated Table
        """
        self._connection = connection
        self._dispatcher = dispatcher
        self._tables: dict[str, Table] = {}

    def define(self, table: str, columns: str | Mapping[str, str]) -> Table:
        """Parse, create if absent, and register a table.

        Args:
            table: Table name (trusted identifier)
            columns: Column block text or ``{column: type}`` mapping

        Returns:
            Table handle for the operations

        Raises:
            SchemaError: If the column definitions cannot be parsed
            EngineError: If the engine rejects the CREATE TABLE
        """
        schema = parse_columns(table, columns)
        self.create_table(schema)
        self.install_triggers(schema.name)

        handle = Table(schema, self._dispatcher)
        self._tables[schema.name] = handle
        return handle

    def create_table(self, schema: TableSchema) -> bool:
        """Create the table unless it exists. Returns True if it was created."""
        if self._connection.table_exists(schema.name):
            logger.debug(f"Table '{schema.name}' already exists; definition not applied")
            return False
        self._connection.execute(schema.create_statement())
        logger.info(f"Created table '{schema.name}' ({', '.join(schema.column_names)})")
        return True

    def install_triggers(self, table: str) -> None:
        """Report row changes of ``table`` to the update hook."""
        for statement in trigger_statements(table):
            self._connection.execute(statement)

    def get(self, table: str) -> Table:
        """Get a defined table.

        Raises:
            TableNotDefinedError: If the table was never defined
        """
        if table not in self._tables:
            raise TableNotDefinedError(table, self.list_tables())
        return self._tables[table]

    def list_tables(self) -> list[str]:
        """Names of defined tables in definition order."""
        return list(self._tables)

    def __contains__(self, table: object) -> bool:
        return table in self._tables
