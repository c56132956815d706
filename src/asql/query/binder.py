"""Bind parameters for a single statement.

Caller values never appear in SQL text. Each value gets a named slot
(`:asql_p1`, `:asql_p2`, ...) that the engine binds at execution time.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from asql.exceptions import ArgumentError

PARAMETER_PREFIX = "asql_p"


class ParameterBinder:
    """Allocates bind slots for one statement.

    Names come from a counter local to the binder, so two slots of the same
    statement can never collide.
    """

    def __init__(self, prefix: str = PARAMETER_PREFIX) -> None:
        self._prefix = prefix
        self._slot_name = re.compile(rf"{re.escape(prefix)}\d+")
        self._counter = 0
        self._values: dict[str, Any] = {}

    def bind(self, value: Any) -> str:
        """Store a value and return its placeholder (e.g. ``:asql_p1``)."""
        self._counter += 1
        name = f"{self._prefix}{self._counter}"
        self._values[name] = value
        return f":{name}"

    @property
    def params(self) -> dict[str, Any]:
        """Bound values keyed by slot name."""
        return dict(self._values)

    def merge(self, caller_params: Mapping[str, Any] | None) -> dict[str, Any]:
        """Combine bound values with caller ``params`` for an expression.

        Raises:
            ArgumentError: If a caller name uses the binder's namespace
        """
        merged = self.params
        for name, value in (caller_params or {}).items():
            if self._slot_name.fullmatch(name):
                raise ArgumentError(
                    f"Parameter name '{name}' is reserved. "
                    f"Names of the form '{self._prefix}<n>' are used for bound values.",
                    {"param": name},
                )
            merged[name] = value
        return merged

    def release(self) -> None:
        """Drop every bound value."""
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


@contextmanager
def bound_parameters(prefix: str = PARAMETER_PREFIX) -> Iterator[ParameterBinder]:
    """Yield a fresh binder and release its values when the block exits."""
    binder = ParameterBinder(prefix)
    try:
        yield binder
    finally:
        binder.release()
