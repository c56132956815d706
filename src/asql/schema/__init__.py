"""Schema parsing and table registration."""

from asql.schema.parser import parse_column_block, parse_column_mapping, parse_columns
from asql.schema.registrar import SchemaRegistrar

__all__ = [
    "SchemaRegistrar",
    "parse_columns",
    "parse_column_block",
    "parse_column_mapping",
]
