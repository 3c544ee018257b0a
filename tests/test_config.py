"""Unit tests for reader configuration and partition descriptors."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mongo_pushdown.config import MongoCredentials, MongoReaderConfig
from mongo_pushdown.exceptions import MongoConfigError
from mongo_pushdown.partition import MongoPartition, PartitionRange


class TestMongoReaderConfig:
    def test_from_mapping(self):
        config = MongoReaderConfig.from_mapping(
            {
                "database": "db",
                "collection": "coll",
                "credentials": [
                    ["user", "admin", "pw"],
                    {"user": "u2", "database": "db", "password": "pw2"},
                ],
            }
        )
        assert config.credentials == (
            MongoCredentials(user="user", database="admin", password="pw"),
            MongoCredentials(user="u2", database="db", password="pw2"),
        )
        assert config.id_field == "_id"
        assert config.batch_size is None

    def test_missing_collection(self):
        with pytest.raises(MongoConfigError, match="collection"):
            MongoReaderConfig.from_mapping({"database": "db"})

    def test_unknown_key_rejected(self):
        with pytest.raises(MongoConfigError):
            MongoReaderConfig.from_mapping(
                {"database": "db", "collection": "c", "colection": "c"}
            )

    def test_malformed_credential_triple(self):
        with pytest.raises(MongoConfigError):
            MongoReaderConfig.from_mapping(
                {"database": "db", "collection": "c", "credentials": [["only-user"]]}
            )

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            MongoReaderConfig(database="db", collection="c", batch_size=0)

    def test_password_hidden_from_repr(self):
        cred = MongoCredentials(user="u", database="d", password="hunter2")
        assert "hunter2" not in repr(cred)

    def test_frozen(self):
        config = MongoReaderConfig(database="db", collection="c")
        with pytest.raises(ValidationError):
            config.database = "other"  # type: ignore[misc]


class TestPartition:
    def test_requires_hosts(self):
        with pytest.raises(ValidationError):
            MongoPartition(hosts=())

    def test_unbounded_by_default(self):
        partition = MongoPartition(hosts=("h1:27017",))
        assert partition.partition_range.is_bounded is False

    def test_index_key_from_bounds(self):
        bounds = PartitionRange(min_key={"a": 1, "b": 2})
        assert bounds.is_bounded
        assert bounds.index_key() == [("a", 1), ("b", 1)]

    def test_index_key_from_max_only(self):
        assert PartitionRange(max_key={"_id": 10}).index_key() == [("_id", 1)]
