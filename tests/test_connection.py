"""Unit tests for MongoConnectionManager (without real MongoDB)."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from mongo_pushdown.config import MongoCredentials
from mongo_pushdown.connection import MongoConnectionManager
from mongo_pushdown.exceptions import MongoConnectionError


def test_client_raises_before_connect() -> None:
    mgr = MongoConnectionManager(["localhost:27017"])
    with pytest.raises(MongoConnectionError, match="Not connected"):
        _ = mgr.client


def test_close_idempotent() -> None:
    mgr = MongoConnectionManager(["localhost:27017"])
    mgr.close()
    mgr.close()


def test_connect_passes_hosts_and_credentials() -> None:
    factory = MagicMock()
    creds = [MongoCredentials(user="u", database="admin", password="pw")]
    mgr = MongoConnectionManager(
        ["h1:27017", "h2:27017"],
        creds,
        connect_timeout_ms=1234,
        client_factory=factory,
        appname="reader",
    )

    client = mgr.connect()

    assert client is factory.return_value
    factory.assert_called_once_with(
        ["h1:27017", "h2:27017"],
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=1234,
        username="u",
        password="pw",
        authSource="admin",
        appname="reader",
    )


def test_connect_without_credentials() -> None:
    factory = MagicMock()
    MongoConnectionManager(["h1"], client_factory=factory).connect()
    _, kwargs = factory.call_args
    assert "username" not in kwargs


def test_extra_credentials_ignored_with_warning(caplog) -> None:
    factory = MagicMock()
    creds = [
        MongoCredentials(user="u1", database="admin", password="pw"),
        MongoCredentials(user="u2", database="admin", password="pw"),
    ]
    with caplog.at_level(logging.WARNING, logger="mongo_pushdown.connection"):
        MongoConnectionManager(["h1"], creds, client_factory=factory).connect()
    assert factory.call_args.kwargs["username"] == "u1"
    assert "ignoring 1 extra credential" in caplog.text


def test_multiple_connect_calls_return_same_client() -> None:
    factory = MagicMock()
    mgr = MongoConnectionManager(["h1"], client_factory=factory)
    assert mgr.connect() is mgr.connect()
    factory.assert_called_once()


def test_connect_failure_wrapped() -> None:
    factory = MagicMock(side_effect=ValueError("bad host"))
    mgr = MongoConnectionManager(["h1"], client_factory=factory)
    with pytest.raises(MongoConnectionError, match="bad host") as exc_info:
        mgr.connect()
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_close_closes_client_once() -> None:
    factory = MagicMock()
    mgr = MongoConnectionManager(["h1"], client_factory=factory)
    mgr.connect()
    mgr.close()
    mgr.close()
    factory.return_value.close.assert_called_once()


def test_health_check() -> None:
    factory = MagicMock()
    mgr = MongoConnectionManager(["h1"], client_factory=factory)
    assert mgr.health_check() is False
    mgr.connect()
    assert mgr.health_check() is True
    factory.return_value.admin.command.side_effect = RuntimeError("down")
    assert mgr.health_check() is False


def test_ping_before_connect_raises() -> None:
    mgr = MongoConnectionManager(["h1"])
    with pytest.raises(MongoConnectionError, match="Not connected"):
        mgr.ping()


def test_ping_failure_wrapped() -> None:
    factory = MagicMock()
    factory.return_value.admin.command.side_effect = TimeoutError("no servers")
    mgr = MongoConnectionManager(["h1"], client_factory=factory)
    mgr.connect()
    with pytest.raises(MongoConnectionError, match="no servers") as exc_info:
        mgr.ping()
    assert isinstance(exc_info.value.__cause__, TimeoutError)
    factory.return_value.admin.command.assert_called_once_with("ping")
