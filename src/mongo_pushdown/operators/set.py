"""Set membership -> $in."""

from __future__ import annotations

from typing import Any

from ..filter_operators import FilterOperator


def compile_set(field: str, op: str, val: Any) -> dict[str, Any] | None:
    """Compile set membership. Returns None if not a set op.

    Members are passed through as given; no identifier coercion.
    """
    try:
        filter_op = FilterOperator(op)
    except ValueError:
        return None
    if filter_op == FilterOperator.IN:
        return {field: {"$in": list(val) if isinstance(val, (list, tuple)) else [val]}}
    return None
