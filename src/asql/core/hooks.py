"""Update hook broadcaster.

Row changes are reported by the engine through the ``asql_row_changed`` SQL
function, called from per-table TEMP triggers. Events are queued while a
statement runs and delivered once it has succeeded, so the callback may
safely query the database.

Template tokens:
    %%  ->  %
    %o  ->  insert | update | delete | delete_all
    %t  ->  table name
    %r  ->  rowid ('' for delete_all)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from asql.core.types import HookOperation

logger = logging.getLogger(__name__)

ROW_CHANGED_FUNCTION = "asql_row_changed"

TRIGGER_EVENTS: dict[HookOperation, tuple[str, str]] = {
    HookOperation.INSERT: ("INSERT", "NEW"),
    HookOperation.UPDATE: ("UPDATE", "NEW"),
    HookOperation.DELETE: ("DELETE", "OLD"),
}

_TOKEN_PATTERN = re.compile(r"%%|%o|%t|%r")

HookCallback = Callable[[str], object]


def format_event(template: str, operation: str, table: str, rowid: int | str | None) -> str:
    """Substitute the hook tokens in one left-to-right pass."""
    replacements = {
        "%%": "%",
        "%o": operation.lower(),
        "%t": table,
        "%r": "" if rowid is None else str(rowid),
    }
    return _TOKEN_PATTERN.sub(lambda m: replacements[m.group(0)], template)


def trigger_statements(table: str) -> list[str]:
    """TEMP trigger DDL that reports every row change of ``table``."""
    literal = table.replace("'", "''")
    statements = []
    for operation, (event, row) in TRIGGER_EVENTS.items():
        statements.append(
            f"CREATE TEMP TRIGGER IF NOT EXISTS asql_hook_{table}_{operation} "
            f"AFTER {event} ON {table} BEGIN "
            f"SELECT {ROW_CHANGED_FUNCTION}('{operation}', '{literal}', {row}.rowid); END"
        )
    return statements


def _log_message(message: str) -> None:
    logger.info(message)


class UpdateHookBroadcaster:
    """Holds the single hook subscription of a database."""

    def __init__(self) -> None:
        self._template: str | None = None
        self._callback: HookCallback = _log_message
        self._pending: list[tuple[str, str, int | str | None]] = []
        self._muted = False

    @property
    def template(self) -> str | None:
        """Current template, or None when no hook is set."""
        return self._template

    def subscribe(self, template: str | None, callback: HookCallback | None = None) -> None:
        """Replace the subscription. ``template=None`` removes it."""
        self._template = template or None
        self._callback = callback or _log_message

    def row_changed(self, operation: str, table: str, rowid: int | None) -> None:
        """Engine-side listener; queues the event until the statement finishes."""
        if self._muted or self._template is None:
            return
        self._pending.append((operation, table, rowid))

    def flush(self) -> None:
        """Deliver queued events in the order the engine reported them."""
        events, self._pending = self._pending, []
        for operation, table, rowid in events:
            self.emit(operation, table, rowid)

    def discard(self) -> None:
        """Forget queued events of a failed statement."""
        self._pending.clear()

    def emit(self, operation: str, table: str, rowid: int | str | None) -> None:
        """Invoke the callback for one event, if a hook is set."""
        if self._template is None:
            return
        self._callback(format_event(self._template, operation, table, rowid))

    @contextmanager
    def muted(self) -> Iterator[None]:
        """Ignore engine events inside the block."""
        self._muted = True
        try:
            yield
        finally:
            self._muted = False
