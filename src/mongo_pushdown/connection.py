"""MongoConnectionManager — pymongo client lifecycle for one partition."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from pymongo import MongoClient

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from .config import MongoCredentials

logger = logging.getLogger("mongo_pushdown.connection")

ClientFactory = Callable[..., Any]


class MongoConnectionManager:
    """Wrap a pymongo client bound to a host list and credentials."""

    def __init__(
        self,
        hosts: Sequence[str],
        credentials: Sequence[MongoCredentials] = (),
        *,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        client_factory: ClientFactory | None = None,
        **kwargs: Any,
    ) -> None:
        self._hosts = list(hosts)
        self._credentials = list(credentials)
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._connect_timeout_ms = connect_timeout_ms
        self._client_factory = client_factory or MongoClient
        self._kwargs = kwargs
        self._client: Any = None

    def _auth_options(self) -> dict[str, Any]:
        if not self._credentials:
            return {}
        if len(self._credentials) > 1:
            logger.warning(
                "Client authenticates as a single user; "
                "ignoring %d extra credential(s)",
                len(self._credentials) - 1,
            )
        cred = self._credentials[0]
        return {
            "username": cred.user,
            "password": cred.password,
            "authSource": cred.database,
        }

    def connect(self) -> Any:
        """Create and cache the client. Idempotent."""
        if self._client is not None:
            return self._client
        try:
            self._client = self._client_factory(
                self._hosts,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                connectTimeoutMS=self._connect_timeout_ms,
                **self._auth_options(),
                **self._kwargs,
            )
        except Exception as e:
            raise MongoConnectionError(str(e)) from e
        logger.debug("Connected to %s", ",".join(self._hosts))
        return self._client

    @property
    def client(self) -> Any:
        """Return the client; raises if not connected."""
        if self._client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        return self._client

    def close(self) -> None:
        """Close the client. Idempotent."""
        if self._client is not None:
            client, self._client = self._client, None
            client.close()

    def ping(self) -> None:
        """Round-trip to the server; the client itself connects lazily.

        Raises:
            MongoConnectionError: not connected, or no server answered.
        """
        try:
            self.client.admin.command("ping")
        except MongoConnectionError:
            raise
        except Exception as e:
            raise MongoConnectionError(str(e)) from e

    def health_check(self) -> bool:
        """Ping the server; return True if reachable."""
        try:
            self.ping()
            return True
        except MongoConnectionError:
            return False
