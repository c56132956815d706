"""Clause compiler.

Pure functions turning operation arguments into SQL fragments. Nothing here
executes a statement.

Identifiers (column names, projections, order columns) and `expr` text are
emitted as given: they must come from program text, never from untrusted
input. Only values go through the binder.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from asql.core.types import QueryOptions, ResultFormat
from asql.query.binder import ParameterBinder

# Informal expression operators and their SQL spelling
EXPRESSION_OPERATORS: dict[str, str] = {
    "~=": " LIKE ",
    "&&": " AND ",
    "||": " OR ",
}

_OPERATOR_PATTERN = re.compile("|".join(re.escape(op) for op in EXPRESSION_OPERATORS))
_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# SQLite treats a negative LIMIT as "no limit"
UNLIMITED = -1


def values(column_values: Mapping[str, Any], binder: ParameterBinder) -> str:
    """Build ``(c1, c2) VALUES (:p1, :p2)``."""
    names = list(column_values)
    placeholders = [binder.bind(column_values[name]) for name in names]
    return f"({', '.join(names)}) VALUES ({', '.join(placeholders)})"


def set_clause(column_values: Mapping[str, Any], binder: ParameterBinder) -> str:
    """Build ``SET c1 = :p1, c2 = :p2``."""
    assignments = [f"{name} = {binder.bind(value)}" for name, value in column_values.items()]
    return f"SET {', '.join(assignments)}"


def parse_rowid(rowid: Any) -> int | None:
    """Return rowid as an integer, or None if it is not a 64-bit integer."""
    if isinstance(rowid, bool):
        return None
    if isinstance(rowid, int):
        number = rowid
    elif isinstance(rowid, str) and _INTEGER_PATTERN.match(rowid):
        number = int(rowid)
    else:
        return None
    if _INT64_MIN <= number <= _INT64_MAX:
        return number
    return None


def rewrite_expression(expr: str) -> str:
    """Replace ``~=``, ``&&`` and ``||`` with LIKE, AND and OR.

    Single left-to-right pass; replaced text is not scanned again.
    """
    return _OPERATOR_PATTERN.sub(lambda m: EXPRESSION_OPERATORS[m.group(0)], expr)


def where(options: QueryOptions) -> str:
    """Build the WHERE clause from ``rowid`` and ``expr``, or return ""."""
    expression = ""

    if options.rowid is not None:
        number = parse_rowid(options.rowid)
        # An invalid rowid matches nothing
        expression = f"rowid = {number}" if number is not None else "rowid = ''"

    if options.expr:
        if expression:
            expression += " AND "
        expression += rewrite_expression(options.expr)

    if expression:
        return f"WHERE {expression}"
    return ""


def orderby(options: QueryOptions) -> str:
    """Build ORDER BY. Precedence: ``order``, then ``order_asc``, then ``order_desc``."""
    if options.order:
        return f"ORDER BY {options.order}"
    if options.order_asc:
        return f"ORDER BY {options.order_asc} ASC"
    if options.order_desc:
        return f"ORDER BY {options.order_desc} DESC"
    return ""


def effective_limit(options: QueryOptions) -> int:
    """Row limit that `limit()` will emit."""
    if options.format == ResultFormat.DICT:
        return 1
    if options.limit == "none":
        return UNLIMITED
    if options.limit is not None:
        return int(options.limit)
    return 1


def limit(options: QueryOptions) -> str:
    """Build LIMIT. Defaults to 1; ``format="dict"`` always forces 1."""
    return f"LIMIT {effective_limit(options)}"


def join_clauses(*clauses: str) -> str:
    """Join non-empty fragments with single spaces."""
    return " ".join(c for c in clauses if c)
