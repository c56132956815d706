"""Column block parsing.

A column block is line-oriented text::

    make    text                    # The make of the car.
    model   text
    color   "text collate nocase"   # Case-insensitive.
    "primary key"   "(make, model)"

Everything from the first ``#`` on a line is dropped. The first word (shell
quoting rules) names the column and the rest of the line is its type.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable, Mapping

from asql.core.types import ColumnSpec, TableSchema
from asql.exceptions import SchemaError

COMMENT_MARKER = "#"

# Pseudo-column names kept verbatim as table-level constraints
TABLE_CONSTRAINTS = ("primary key", "unique", "check")


def _constraint_keyword(tokens: list[str]) -> str | None:
    """Return the constraint keyword a line starts with, if any."""
    head = tokens[0].lower()
    if head in TABLE_CONSTRAINTS:
        return head
    # Unquoted form: primary key (x, y)
    if head == "primary" and len(tokens) > 1 and tokens[1].lower() == "key":
        return "primary key"
    return None


def split_line(line: str) -> tuple[str, str] | None:
    """Split one line into its column name and type text.

    The name follows shell quoting. The type is the rest of the line as
    written, unwrapped only when it is a single quoted word, so SQL string
    literals such as ``default 'two words'`` keep their quotes.

    Returns:
        (name, type) or None for a line without a name

    Raises:
        ValueError: If the line has unbalanced quotes
    """
    content = line.split(COMMENT_MARKER, 1)[0]
    shlex.split(content)

    lexer = shlex.shlex(content, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    name = lexer.get_token()
    if not name:
        return None

    type_spec = content[lexer.instream.tell() :].strip()
    if len(type_spec) > 1 and type_spec[0] in "\"'" and type_spec[-1] == type_spec[0]:
        words = shlex.split(type_spec)
        if len(words) == 1:
            type_spec = words[0]
    return name, type_spec


def _classify(
    table: str,
    entries: Iterable[tuple[str, str]],
) -> TableSchema:
    columns: list[ColumnSpec] = []
    constraints: list[str] = []
    for name, type_spec in entries:
        tokens = [name, *type_spec.split()] if type_spec else [name]
        if _constraint_keyword(tokens):
            constraints.append(f"{name} {type_spec}".strip())
        else:
            columns.append(ColumnSpec(name=name, type_spec=type_spec))

    if not columns:
        raise SchemaError(
            f"Table '{table}' has no columns. Provide at least one '<column> <type>' line.",
            {"table": table},
        )
    return TableSchema(name=table, columns=tuple(columns), constraints=tuple(constraints))


def parse_column_block(table: str, block: str) -> TableSchema:
    """Parse a column block into a TableSchema.

    Args:
        table: Table name
        block: Line-oriented column definitions

    Returns:
        The parsed schema

    Raises:
        SchemaError: If a line has unbalanced quotes or no column is defined
    """
    entries: list[tuple[str, str]] = []
    for lineno, line in enumerate(block.splitlines(), start=1):
        try:
            entry = split_line(line)
        except ValueError as e:
            raise SchemaError(
                f"Cannot parse line {lineno} of table '{table}': {e}",
                {"table": table, "line": lineno},
            ) from e
        if entry is not None:
            entries.append(entry)
    return _classify(table, entries)


def parse_column_mapping(table: str, columns: Mapping[str, str]) -> TableSchema:
    """Build a TableSchema from a ``{column: type}`` mapping."""
    return _classify(table, ((name, str(spec or "")) for name, spec in columns.items() if name))


def parse_columns(table: str, columns: str | Mapping[str, str]) -> TableSchema:
    """Parse either form of column definitions."""
    if isinstance(columns, str):
        return parse_column_block(table, columns)
    return parse_column_mapping(table, columns)
