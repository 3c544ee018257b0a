"""Partition descriptors consumed by the reader."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pymongo import ASCENDING


class PartitionRange(BaseModel):
    """Optional inclusive lower / exclusive upper index-key bounds.

    Each bound maps index key fields to bound values, in index key order,
    e.g. ``{"_id": ObjectId(...)}``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    min_key: dict[str, Any] | None = None
    max_key: dict[str, Any] | None = None

    @property
    def is_bounded(self) -> bool:
        return bool(self.min_key) or bool(self.max_key)

    def index_key(self) -> list[tuple[str, int]]:
        """Key pattern of the index the bounds refer to."""
        fields = self.min_key or self.max_key or {}
        return [(name, ASCENDING) for name in fields]


class MongoPartition(BaseModel):
    """One shard of a collection scan: where to read it and which key range."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index: int = 0
    hosts: tuple[str, ...] = Field(min_length=1)
    partition_range: PartitionRange = Field(default_factory=PartitionRange)
