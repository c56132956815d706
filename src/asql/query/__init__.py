"""Query compilation and dispatch.

- ParameterBinder: named bind slots for the values of one statement
- compiler: VALUES, SET, WHERE, ORDER BY and LIMIT fragments
- OperationDispatcher: runs table operations against the engine
"""

from asql.query.binder import ParameterBinder, bound_parameters
from asql.query.dispatcher import OperationDispatcher, build_options, normalize_columns

__all__ = [
    "ParameterBinder",
    "bound_parameters",
    "OperationDispatcher",
    "build_options",
    "normalize_columns",
]
