"""Equality and range comparisons for MongoDB query compilation."""

from __future__ import annotations

from typing import Any

from ..filter_operators import FilterOperator
from ..object_id import ID_FIELD, coerce_object_id

_MONGO_OP_MAP: dict[FilterOperator, str] = {
    FilterOperator.GT: "$gt",
    FilterOperator.GE: "$gte",
    FilterOperator.LT: "$lt",
    FilterOperator.LE: "$lte",
}


def compile_standard(
    field: str, op: str, val: Any, *, id_field: str = ID_FIELD
) -> dict[str, Any] | None:
    """Compile equality and range operators. Returns None if not one of them.

    Values on the identifier field go through :func:`coerce_object_id`.
    """
    try:
        filter_op = FilterOperator(op)
    except ValueError:
        return None

    if filter_op == FilterOperator.EQ:
        return {field: coerce_object_id(field, val, id_field=id_field)}

    mongo_op = _MONGO_OP_MAP.get(filter_op)
    if mongo_op:
        return {field: {mongo_op: coerce_object_id(field, val, id_field=id_field)}}
    return None
