"""Reader configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import MongoConfigError
from .object_id import ID_FIELD


class MongoCredentials(BaseModel):
    """A user authenticating against ``database``."""

    model_config = ConfigDict(frozen=True)

    user: str
    database: str
    password: str = Field(repr=False)


class MongoReaderConfig(BaseModel):
    """Where a reader connects to and how.

    Host addresses are not part of the config; they come with each
    partition.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    database: str = Field(min_length=1)
    collection: str = Field(min_length=1)
    credentials: tuple[MongoCredentials, ...] = ()
    id_field: str = ID_FIELD
    batch_size: int | None = Field(default=None, gt=0)
    server_selection_timeout_ms: int = Field(default=5000, gt=0)
    connect_timeout_ms: int = Field(default=10000, gt=0)
    client_options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("credentials", mode="before")
    @classmethod
    def _coerce_credentials(cls, value: Any) -> Any:
        # Accept (user, database, password) triples alongside mappings.
        if value is None:
            return ()
        return tuple(
            dict(zip(("user", "database", "password"), item, strict=True))
            if isinstance(item, (list, tuple))
            else item
            for item in value
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MongoReaderConfig:
        """Validate an already loaded configuration mapping."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise MongoConfigError(f"Invalid reader configuration: {e}") from e
