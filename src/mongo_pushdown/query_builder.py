"""Mongo query and projection builders from filter trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import UnsupportedFilterError
from .filters import And, Filter, In, Not, Or, _NullFilter, _ValueFilter
from .object_id import ID_FIELD
from .operators import compile_null, compile_set, compile_standard, compile_string

if TYPE_CHECKING:
    from collections.abc import Sequence

_COMPILERS = [
    compile_set,
    compile_null,
    compile_string,
]


def _is_operator_doc(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and bool(value)
        and all(isinstance(k, str) and k.startswith("$") for k in value)
    )


def _conjoin(query: dict[str, Any], *clauses: dict[str, Any]) -> None:
    query.setdefault("$and", []).extend(clauses)


def _merge(query: dict[str, Any], fragment: dict[str, Any]) -> None:
    """AND a compiled fragment into ``query`` without dropping a constraint.

    ``$and`` lists accumulate and operator documents with disjoint keys
    merge. Any other clash on a key moves both constraints under ``$and``.
    """
    for key, value in fragment.items():
        if key not in query:
            query[key] = value
            continue
        existing = query[key]
        if key == "$and":
            existing.extend(value)
        elif (
            _is_operator_doc(value)
            and _is_operator_doc(existing)
            and not existing.keys() & value.keys()
        ):
            query[key] = {**existing, **value}
        elif key == "$or":
            _conjoin(query, {key: value})
        else:
            del query[key]
            _conjoin(query, {key: existing}, {key: value})


def _leaf_parts(node: Filter) -> tuple[str, str, Any]:
    if isinstance(node, In):
        return node.attribute, node.op.value, list(node.values)
    if isinstance(node, _ValueFilter):
        return node.attribute, node.op.value, node.value
    if isinstance(node, _NullFilter):
        return node.attribute, node.op.value, None
    raise UnsupportedFilterError(f"Unsupported filter node: {node!r}")


def _compile_leaf(node: Filter, id_field: str) -> dict[str, Any]:
    """Compile a single attribute condition to a MongoDB query fragment."""
    field, op_str, val = _leaf_parts(node)
    result = compile_standard(field, op_str, val, id_field=id_field)
    if result is not None:
        return result
    for compiler in _COMPILERS:
        result = compiler(field, op_str, val)
        if result is not None:
            return result
    raise UnsupportedFilterError(
        f"No MongoDB translation for operator '{op_str}'", operator=op_str
    )


def _compile_node(node: Filter, id_field: str) -> dict[str, Any]:
    """Recursively compile a filter node to a MongoDB query fragment."""
    if isinstance(node, Not):
        raise UnsupportedFilterError(
            f"Negation cannot be pushed down to MongoDB: {node!r}", operator="not"
        )
    if isinstance(node, And):
        return {
            "$and": [
                compile_filters([node.left], id_field=id_field),
                compile_filters([node.right], id_field=id_field),
            ]
        }
    if isinstance(node, Or):
        return {
            "$or": [
                compile_filters([node.left], id_field=id_field),
                compile_filters([node.right], id_field=id_field),
            ]
        }
    return _compile_leaf(node, id_field)


def compile_filters(
    filters: Sequence[Filter], *, id_field: str = ID_FIELD
) -> dict[str, Any]:
    """Compile filters to a single MongoDB query document.

    Top-level filters are conjoined by writing them into the same
    document. Raises :class:`UnsupportedFilterError` if any node in the
    tree cannot be translated; no partial document is returned.
    """
    query: dict[str, Any] = {}
    for node in filters:
        if not isinstance(node, Filter):
            raise UnsupportedFilterError(f"Not a filter: {node!r}")
        _merge(query, _compile_node(node, id_field))
    return query


def build_projection(
    fields: Sequence[str], *, id_field: str = ID_FIELD
) -> dict[str, int]:
    """Build a find() projection. An empty result means all fields.

    The identifier is excluded explicitly unless requested, since MongoDB
    returns it by default.
    """
    if not fields:
        return {}
    projection = dict.fromkeys((f for f in fields if f != id_field), 1)
    projection[id_field] = 1 if id_field in fields else 0
    return projection


class MongoQueryBuilder:
    """Compiles filter trees and column lists to MongoDB documents."""

    def __init__(self, id_field: str = ID_FIELD) -> None:
        self.id_field = id_field

    def build_match(self, filters: Sequence[Filter]) -> dict[str, Any]:
        """Build the find() filter document for ``filters``."""
        return compile_filters(filters, id_field=self.id_field)

    def build_project(self, fields: Sequence[str]) -> dict[str, int] | None:
        """Build the find() projection. None means no projection."""
        return build_projection(fields, id_field=self.id_field) or None
