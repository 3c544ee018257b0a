"""
Filter tree pushed down by the query engine.

Filters form a closed set of immutable node types. Leaves constrain a
single attribute; ``And`` / ``Or`` combine two sub-trees. ``Not`` can be
expressed but has no MongoDB translation and is rejected at compile time.

Trees can be built directly::

    EqualTo("status", "active") & (GreaterThan("age", 18) | IsNull("age"))

or parsed from the operator-dict form used on the wire::

    {"op": "and", "conditions": [
        {"op": "=", "attr": "status", "val": "active"},
        {"op": ">", "attr": "age", "val": 18},
    ]}
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from functools import reduce
from typing import Any, ClassVar

from .exceptions import MongoQueryError, UnsupportedFilterError
from .filter_operators import FilterOperator


class Filter(ABC):
    """Base class for all filter nodes."""

    op: ClassVar[FilterOperator]

    def __and__(self, other: Filter) -> And:
        return And(self, other)

    def __or__(self, other: Filter) -> Or:
        return Or(self, other)

    def __invert__(self) -> Not:
        return Not(self)

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialise to the operator-dict form read by filter_from_dict()."""


# -- leaves -------------------------------------------------------------------


@dataclass(frozen=True)
class _ValueFilter(Filter):
    attribute: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.attribute, "val": self.value}


@dataclass(frozen=True)
class EqualTo(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.EQ


@dataclass(frozen=True)
class GreaterThan(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.GT


@dataclass(frozen=True)
class GreaterThanOrEqual(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.GE


@dataclass(frozen=True)
class LessThan(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.LT


@dataclass(frozen=True)
class LessThanOrEqual(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.LE


@dataclass(frozen=True)
class StringStartsWith(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.STARTSWITH
    value: str


@dataclass(frozen=True)
class StringEndsWith(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.ENDSWITH
    value: str


@dataclass(frozen=True)
class StringContains(_ValueFilter):
    op: ClassVar[FilterOperator] = FilterOperator.CONTAINS
    value: str


@dataclass(frozen=True)
class In(Filter):
    op: ClassVar[FilterOperator] = FilterOperator.IN
    attribute: str
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        # Accept any iterable but keep the node hashable; a lone string or
        # scalar is one member.
        values: Any = self.values
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            values = (values,)
        object.__setattr__(self, "values", tuple(values))

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.attribute, "val": list(self.values)}


@dataclass(frozen=True)
class _NullFilter(Filter):
    attribute: str

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.attribute}


@dataclass(frozen=True)
class IsNull(_NullFilter):
    op: ClassVar[FilterOperator] = FilterOperator.IS_NULL


@dataclass(frozen=True)
class IsNotNull(_NullFilter):
    op: ClassVar[FilterOperator] = FilterOperator.IS_NOT_NULL


# -- composites ---------------------------------------------------------------


@dataclass(frozen=True)
class _BinaryFilter(Filter):
    left: Filter
    right: Filter

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "conditions": [self.left.to_dict(), self.right.to_dict()],
        }


@dataclass(frozen=True)
class And(_BinaryFilter):
    op: ClassVar[FilterOperator] = FilterOperator.AND


@dataclass(frozen=True)
class Or(_BinaryFilter):
    op: ClassVar[FilterOperator] = FilterOperator.OR


@dataclass(frozen=True)
class Not(Filter):
    """Logical negation. Representable, but not translatable to MongoDB."""

    op: ClassVar[FilterOperator] = FilterOperator.NOT
    child: Filter

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "conditions": [self.child.to_dict()]}


_LEAF_TYPES: dict[FilterOperator, type[Filter]] = {
    cls.op: cls
    for cls in (
        EqualTo,
        GreaterThan,
        GreaterThanOrEqual,
        LessThan,
        LessThanOrEqual,
        StringStartsWith,
        StringEndsWith,
        StringContains,
    )
}

_VALID_OPERATORS: list[str] = [m.value for m in FilterOperator]


# -- parsing ------------------------------------------------------------------


def filter_from_dict(data: dict[str, Any], *, path: str = "<root>") -> Filter:
    """Build a filter tree from its operator-dict form.

    ``and`` / ``or`` nodes with more than two conditions are folded
    left into nested binary nodes.
    """
    if not isinstance(data, dict):
        raise MongoQueryError(f"Expected a dict at {path}, got {type(data).__name__}")
    op_str = data.get("op")
    if not op_str or not isinstance(op_str, str):
        raise MongoQueryError(f"Missing or empty 'op' key at {path}")
    try:
        op = FilterOperator(op_str.lower())
    except ValueError:
        raise UnsupportedFilterError(
            f"Unknown filter operator '{op_str}' at {path}.",
            operator=op_str,
            valid_operators=_VALID_OPERATORS,
        ) from None

    if op in (FilterOperator.AND, FilterOperator.OR, FilterOperator.NOT):
        return _logical_from_dict(op, data, path)

    attr = data.get("attr")
    if not attr or not isinstance(attr, str):
        raise MongoQueryError(f"Leaf filter missing 'attr' at {path}: {data}")
    if op == FilterOperator.IS_NULL:
        return IsNull(attr)
    if op == FilterOperator.IS_NOT_NULL:
        return IsNotNull(attr)
    val = data.get("val")
    if op == FilterOperator.IN:
        return In(attr, val if isinstance(val, (list, tuple)) else [val])
    return _LEAF_TYPES[op](attr, val)  # type: ignore[call-arg]


def _logical_from_dict(op: FilterOperator, data: dict[str, Any], path: str) -> Filter:
    conditions = data.get("conditions")
    if conditions is None and "condition" in data:
        conditions = [data["condition"]]
    if not isinstance(conditions, list) or not conditions:
        raise MongoQueryError(
            f"Logical operator '{op.value}' requires 'conditions' list at {path}"
        )
    children = [
        filter_from_dict(child, path=f"{path}.conditions[{idx}]")
        for idx, child in enumerate(conditions)
    ]
    if op == FilterOperator.NOT:
        if len(children) != 1:
            raise MongoQueryError(f"'not' takes exactly one condition at {path}")
        return Not(children[0])
    if len(children) < 2:
        raise MongoQueryError(
            f"Logical operator '{op.value}' requires at least two conditions at {path}"
        )
    node_type = And if op == FilterOperator.AND else Or
    return reduce(node_type, children)


def filters_from_json(text: str) -> list[Filter]:
    """Parse a JSON document holding one filter object or a list of them."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MongoQueryError(f"Invalid JSON: {exc}") from exc
    if isinstance(data, dict):
        return [filter_from_dict(data)]
    if isinstance(data, list):
        return [
            filter_from_dict(item, path=f"<root>[{i}]") for i, item in enumerate(data)
        ]
    raise MongoQueryError("Top-level JSON value must be an object or a list")
