"""Coercion of textual ``ObjectId("...")`` literals on the identifier field."""

from __future__ import annotations

import re
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from .exceptions import MongoQueryError

ID_FIELD = "_id"

# Whole-string match of ObjectId("<hex>") or ObjectId('<hex>').
OBJECT_ID_LITERAL = re.compile(r"""ObjectId\(["'](\w*)["']\)""")


def coerce_object_id(attribute: str, value: Any, *, id_field: str = ID_FIELD) -> Any:
    """Return ``value`` as a :class:`bson.ObjectId` when it is an id literal.

    Only applies to ``id_field``; values for any other attribute, and
    non-literal values for the identifier, are returned unchanged.

    Raises:
        MongoQueryError: the literal wraps text that is not a valid id.
    """
    if attribute != id_field or not isinstance(value, str):
        return value
    match = OBJECT_ID_LITERAL.fullmatch(value)
    if match is None:
        return value
    try:
        return ObjectId(match.group(1))
    except InvalidId as e:
        raise MongoQueryError(
            f"Invalid ObjectId literal for {attribute}: {value}"
        ) from e
