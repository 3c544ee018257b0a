"""Test configuration for the mongo-pushdown package."""

from __future__ import annotations

from unittest.mock import MagicMock

import mongomock
import pytest

from mongo_pushdown import MongoPartition, MongoReaderConfig

PEOPLE = [
    {"_id": 1, "name": "alice", "age": 31, "city": "Athens"},
    {"_id": 2, "name": "bob", "age": 17, "city": "Berlin"},
    {"_id": 3, "name": "carol", "age": 45, "city": None},
    {"_id": 4, "name": "dave", "age": 22, "city": "Boston"},
]


@pytest.fixture
def reader_config() -> MongoReaderConfig:
    return MongoReaderConfig(
        database="test_db",
        collection="people",
        credentials=(("reader", "admin", "secret"),),
    )


@pytest.fixture
def partition() -> MongoPartition:
    return MongoPartition(index=0, hosts=("localhost:27017",))


@pytest.fixture
def mongo_client():
    """In-memory client pre-loaded with the ``people`` collection."""
    client = mongomock.MongoClient()
    client["test_db"]["people"].insert_many([dict(doc) for doc in PEOPLE])
    return client


class RecordingFactory:
    """Client factory returning a fixed client and recording its arguments."""

    def __init__(self, client):
        self.client = client
        self.calls: list[tuple[tuple, dict]] = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.client


@pytest.fixture
def mongomock_factory(mongo_client) -> RecordingFactory:
    return RecordingFactory(mongo_client)


@pytest.fixture
def mock_cursor() -> MagicMock:
    """pymongo-like cursor whose chaining methods return itself."""
    cursor = MagicMock(name="cursor")
    cursor.hint.return_value = cursor
    cursor.min.return_value = cursor
    cursor.max.return_value = cursor
    cursor.batch_size.return_value = cursor
    cursor.__iter__.return_value = iter([])
    return cursor


@pytest.fixture
def mock_client(mock_cursor) -> MagicMock:
    client = MagicMock(name="client")
    collection = client.__getitem__.return_value.__getitem__.return_value
    collection.find.return_value = mock_cursor
    return client


@pytest.fixture
def mock_factory(mock_client) -> RecordingFactory:
    return RecordingFactory(mock_client)
