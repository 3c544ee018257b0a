"""Null checks -> null equality, $ne."""

from __future__ import annotations

from typing import Any

from ..filter_operators import FilterOperator


def compile_null(field: str, op: str, _val: Any) -> dict[str, Any] | None:
    """Compile null operators. Returns None if not a null op."""
    try:
        filter_op = FilterOperator(op)
    except ValueError:
        return None
    if filter_op == FilterOperator.IS_NULL:
        return {field: None}
    if filter_op == FilterOperator.IS_NOT_NULL:
        return {field: {"$ne": None}}
    return None
