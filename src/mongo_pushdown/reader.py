"""
Partitioned cursor reader.

A :class:`MongoReader` is bound to a single partition of a collection. The
caller constructs it with the pushed-down columns and filters, calls
``init(partition)`` once, pulls documents with ``has_next()`` / ``next()``
and finally calls ``close()``::

    reader = MongoReader(config, ["name", "age"], [GreaterThan("age", 18)])
    try:
        reader.init(partition)
        while reader.has_next():
            handle(reader.next())
    finally:
        reader.close()

Readers are not thread-safe; one task drives one reader. Retrying a failed
partition means constructing a fresh reader.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator, Mapping, Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Any

from .config import MongoReaderConfig
from .connection import ClientFactory, MongoConnectionManager
from .exceptions import MongoReadError, ReaderStateError
from .query_builder import MongoQueryBuilder

if TYPE_CHECKING:
    from .filters import Filter
    from .partition import MongoPartition, PartitionRange

logger = logging.getLogger("mongo_pushdown.reader")


class ReaderState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    CLOSED = "closed"


class MongoReader:
    """Reads the documents of one partition through a bounded find() cursor."""

    def __init__(
        self,
        config: MongoReaderConfig | Mapping[str, Any],
        required_columns: Sequence[str],
        filters: Sequence[Filter],
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = (
            config
            if isinstance(config, MongoReaderConfig)
            else MongoReaderConfig.from_mapping(config)
        )
        self._required_columns = tuple(required_columns)
        self._filters = tuple(filters)
        self._client_factory = client_factory
        self._query_builder = MongoQueryBuilder(self._config.id_field)

        self._state = ReaderState.UNINITIALIZED
        self._connection: MongoConnectionManager | None = None
        self._cursor: Any = None
        # One-document lookahead filled by has_next().
        self._buffer: list[dict[str, Any]] = []

    @property
    def state(self) -> ReaderState:
        return self._state

    # -- lifecycle -------------------------------------------------------------

    def init(self, partition: MongoPartition) -> None:
        """Connect to the partition's hosts and open its cursor.

        Raises:
            ReaderStateError: the reader was already initialized or closed.
            MongoReadError: anything failed while connecting, resolving the
                collection, compiling the query or creating the cursor.
        """
        if self._state is not ReaderState.UNINITIALIZED:
            raise ReaderStateError(
                f"Reader cannot be initialized from state {self._state.value}"
            )

        connection: MongoConnectionManager | None = None
        try:
            connection = MongoConnectionManager(
                partition.hosts,
                self._config.credentials,
                server_selection_timeout_ms=self._config.server_selection_timeout_ms,
                connect_timeout_ms=self._config.connect_timeout_ms,
                client_factory=self._client_factory,
                **self._config.client_options,
            )
            client = connection.connect()
            connection.ping()
            collection = client[self._config.database][self._config.collection]
            query = self._query_builder.build_match(self._filters)
            projection = self._query_builder.build_project(self._required_columns)
            cursor = collection.find(query, projection)
            if self._config.batch_size is not None:
                cursor = cursor.batch_size(self._config.batch_size)
            cursor = _apply_range(cursor, partition.partition_range)
        except Exception as e:
            logger.warning(
                "Failed to initialize reader for partition %s: %s",
                getattr(partition, "index", None),
                e,
            )
            if connection is not None:
                connection.close()
            raise MongoReadError(str(e), e) from e

        self._connection = connection
        self._cursor = cursor
        self._state = ReaderState.INITIALIZED
        logger.debug(
            "Reader initialized for %s.%s partition %s (query keys=%s, fields=%s)",
            self._config.database,
            self._config.collection,
            partition.index,
            sorted(query),
            sorted(projection or ()),
        )

    def close(self) -> None:
        """Release the cursor, then the connection. Safe to call repeatedly."""
        cursor, self._cursor = self._cursor, None
        connection, self._connection = self._connection, None
        self._buffer.clear()
        if self._state is not ReaderState.CLOSED:
            logger.debug("Closing reader (state=%s)", self._state.value)
        self._state = ReaderState.CLOSED
        try:
            if cursor is not None:
                cursor.close()
        finally:
            if connection is not None:
                connection.close()

    # -- iteration -------------------------------------------------------------

    def has_next(self) -> bool:
        """Whether another document is available. False when not initialized."""
        if self._buffer:
            return True
        cursor = self._cursor
        if cursor is None:
            return False
        for doc in cursor:
            self._buffer.append(doc)
            return True
        return False

    def next(self) -> dict[str, Any]:
        """Return the next document.

        Raises:
            ReaderStateError: the reader holds no cursor.
            StopIteration: the partition is exhausted.
        """
        if self._cursor is None:
            raise ReaderStateError("Cursor is not initialized")
        if self._buffer:
            return self._buffer.pop()
        return next(self._cursor)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        while self.has_next():
            yield self.next()

    def __enter__(self) -> MongoReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def _apply_range(cursor: Any, partition_range: PartitionRange) -> Any:
    """Restrict ``cursor`` to the partition's index key range."""
    if not partition_range.is_bounded:
        return cursor
    # MongoDB 4.2+ requires an index hint alongside min()/max().
    cursor = cursor.hint(partition_range.index_key())
    if partition_range.min_key:
        cursor = cursor.min(list(partition_range.min_key.items()))
    if partition_range.max_key:
        cursor = cursor.max(list(partition_range.max_key.items()))
    return cursor


def read_partition(
    config: MongoReaderConfig | Mapping[str, Any],
    required_columns: Sequence[str],
    filters: Sequence[Filter],
    partition: MongoPartition,
    *,
    client_factory: ClientFactory | None = None,
) -> Iterator[dict[str, Any]]:
    """Yield every document of ``partition``; the reader is always closed."""
    with MongoReader(
        config, required_columns, filters, client_factory=client_factory
    ) as reader:
        reader.init(partition)
        yield from reader
