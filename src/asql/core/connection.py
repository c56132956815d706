"""Database connection management for asql."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlalchemy import Connection, Engine, create_engine, event, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from asql.core.hooks import ROW_CHANGED_FUNCTION
from asql.exceptions import EngineError, StateError

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

RowListener = Callable[[str, str, Any], None]


def _to_sqlite_url(filename: str | Path | None) -> str:
    """Build a SQLite URL from a filename.

    Supports:
    - None or ":memory:" for an in-memory store
    - a file path (relative or absolute)
    - an explicit "sqlite://..." URL, used as-is

    Args:
        filename: Database filename, or None

    Returns:
        SQLAlchemy URL
    """
    if filename is None or str(filename) == MEMORY:
        return "sqlite://"
    name = str(filename)
    if "://" in name:
        return name
    return f"sqlite:///{name}"


def _engine_message(error: SQLAlchemyError) -> str:
    """Return the driver's own diagnostic when there is one."""
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


@dataclass
class StatementResult:
    """Materialized outcome of one statement."""

    columns: list[str] = field(default_factory=list)
    rows: list[tuple[Any, ...]] = field(default_factory=list)
    rowcount: int = -1
    lastrowid: int | None = None


class DatabaseConnection:
    """Holds the single SQLite connection of a database.

    Statements run one at a time, each inside its own transaction. The same
    DBAPI connection is kept for the lifetime of the object, so TEMP triggers
    and ``last_insert_rowid()`` stay meaningful between calls.
    """

    SUPPORTED_DIALECTS = ("sqlite",)

    def __init__(self, filename: str | Path | None = None, echo: bool = False) -> None:
        """Initialize database connection.

        Args:
            filename: SQLite file, ":memory:"/None for an in-memory store,
                      or a full "sqlite://" URL
            echo: Whether to echo SQL statements (for debugging)
        """
        self._url = _to_sqlite_url(filename)
        self._echo = echo
        self._engine: Engine | None = None
        self._connection: Connection | None = None
        self._row_listener: RowListener | None = None

    @property
    def url(self) -> str:
        """SQLAlchemy URL of the store."""
        return self._url

    @property
    def is_memory(self) -> bool:
        """Whether the store lives in memory."""
        return self._url in ("sqlite://", f"sqlite:///{MEMORY}")

    @property
    def engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            try:
                backend = make_url(self._url).get_backend_name()
            except SQLAlchemyError as e:
                raise EngineError(f"Invalid database URL '{self._url}': {e}") from e

            # Validate dialect before any driver gets imported
            if backend not in self.SUPPORTED_DIALECTS:
                raise EngineError(
                    f"Unsupported database dialect: {backend}. "
                    f"Supported: {', '.join(self.SUPPORTED_DIALECTS)}"
                )

            options: dict[str, Any] = {"echo": self._echo}
            if self.is_memory:
                # One shared connection, or every checkout sees an empty store
                options["poolclass"] = StaticPool
                options["connect_args"] = {"check_same_thread": False}
            try:
                engine = create_engine(self._url, **options)
            except SQLAlchemyError as e:
                raise EngineError(f"Failed to create database engine: {e}") from e

            event.listen(engine, "connect", self._register_functions)
            self._engine = engine
        return self._engine

    def _register_functions(self, dbapi_connection: Any, connection_record: Any) -> None:
        """Install the row-change SQL function on a new DBAPI connection."""
        dbapi_connection.create_function(ROW_CHANGED_FUNCTION, 3, self._row_changed)

    def _row_changed(self, operation: str, table: str, rowid: Any) -> None:
        if self._row_listener is not None:
            self._row_listener(operation, table, rowid)

    def set_row_listener(self, listener: RowListener | None) -> None:
        """Route engine row-change events to ``listener``."""
        self._row_listener = listener

    @property
    def is_open(self) -> bool:
        """Whether a connection is currently held."""
        return self._connection is not None

    def open(self) -> None:
        """Check out the connection used for every statement."""
        if self._connection is not None:
            return
        try:
            self._connection = self.engine.connect()
        except SQLAlchemyError as e:
            raise EngineError(f"Failed to open database: {_engine_message(e)}") from e
        logger.info(f"Opened database {self._url}")

    def _require_connection(self) -> Connection:
        if self._connection is None:
            raise StateError("execute")
        return self._connection

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> StatementResult:
        """Execute one statement in its own transaction.

        Args:
            sql: Statement text with ``:name`` placeholders
            params: Values for the placeholders

        Returns:
            StatementResult with fetched rows (if any)

        Raises:
            EngineError: If the engine rejects or fails the statement
        """
        conn = self._require_connection()
        try:
            with conn.begin():
                # Driver-level execution: the sqlite3 tokenizer leaves ':name'
                # inside string literals alone
                result = conn.exec_driver_sql(sql, dict(params or {}))
                if result.returns_rows:
                    return StatementResult(
                        columns=list(result.keys()),
                        rows=[tuple(row) for row in result.fetchall()],
                    )
                return StatementResult(rowcount=result.rowcount, lastrowid=result.lastrowid)
        except SQLAlchemyError as e:
            raise EngineError(_engine_message(e), statement=sql) from e

    def table_exists(self, table: str) -> bool:
        """Check if a table exists.

        Args:
            table: The table name to check

        Returns:
            True if table exists
        """
        result = self.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name = :table",
            {"table": table},
        )
        return bool(result.rows)

    def table_columns(self, table: str) -> list[str]:
        """Return the column names of a table in declaration order."""
        result = self.execute(f"PRAGMA table_info({table})")
        index = result.columns.index("name") if "name" in result.columns else 1
        return [row[index] for row in result.rows]

    def close(self) -> None:
        """Close the held connection and dispose of the engine."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> DatabaseConnection:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
