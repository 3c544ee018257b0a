"""String matching -> $regex.

Patterns are built from the raw value; regex metacharacters in the value
are not escaped.
"""

from __future__ import annotations

from typing import Any

from ..exceptions import MongoQueryError
from ..filter_operators import FilterOperator

_STRING_OPS = frozenset(
    {FilterOperator.STARTSWITH, FilterOperator.ENDSWITH, FilterOperator.CONTAINS}
)


def compile_string(field: str, op: str, val: Any) -> dict[str, Any] | None:
    """Compile string operators to MongoDB $regex. Returns None if not a string op."""
    try:
        filter_op = FilterOperator(op)
    except ValueError:
        return None
    if filter_op not in _STRING_OPS:
        return None
    if not isinstance(val, str):
        raise MongoQueryError(
            f"String operator {filter_op.value} requires string value"
        )
    if filter_op == FilterOperator.STARTSWITH:
        return {field: {"$regex": f"^{val}.*$"}}
    if filter_op == FilterOperator.ENDSWITH:
        return {field: {"$regex": f"^.*{val}$"}}
    return {field: {"$regex": f".*{val}.*"}}
