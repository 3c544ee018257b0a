"""Predicate pushdown and partitioned cursor reads for MongoDB.

Translates filter trees and column lists into MongoDB query and projection
documents, and reads one partition of a collection through a key-range
bounded cursor.
"""

from __future__ import annotations

from .config import MongoCredentials, MongoReaderConfig
from .connection import MongoConnectionManager
from .exceptions import (
    MongoConfigError,
    MongoConnectionError,
    MongoPushdownError,
    MongoQueryError,
    MongoReadError,
    ReaderStateError,
    UnsupportedFilterError,
)
from .filter_operators import FilterOperator
from .filters import (
    And,
    EqualTo,
    Filter,
    GreaterThan,
    GreaterThanOrEqual,
    In,
    IsNotNull,
    IsNull,
    LessThan,
    LessThanOrEqual,
    Not,
    Or,
    StringContains,
    StringEndsWith,
    StringStartsWith,
    filter_from_dict,
    filters_from_json,
)
from .object_id import coerce_object_id
from .partition import MongoPartition, PartitionRange
from .query_builder import MongoQueryBuilder, build_projection, compile_filters
from .reader import MongoReader, ReaderState, read_partition

__all__ = [
    # Reader
    "MongoReader",
    "ReaderState",
    "read_partition",
    "MongoConnectionManager",
    # Configuration
    "MongoReaderConfig",
    "MongoCredentials",
    "MongoPartition",
    "PartitionRange",
    # Filters
    "Filter",
    "FilterOperator",
    "EqualTo",
    "GreaterThan",
    "GreaterThanOrEqual",
    "LessThan",
    "LessThanOrEqual",
    "In",
    "IsNull",
    "IsNotNull",
    "StringStartsWith",
    "StringEndsWith",
    "StringContains",
    "And",
    "Or",
    "Not",
    "filter_from_dict",
    "filters_from_json",
    # Translation
    "MongoQueryBuilder",
    "compile_filters",
    "build_projection",
    "coerce_object_id",
    # Exceptions
    "MongoPushdownError",
    "MongoConfigError",
    "MongoConnectionError",
    "MongoQueryError",
    "UnsupportedFilterError",
    "MongoReadError",
    "ReaderStateError",
]
