"""Exceptions raised by the MongoDB pushdown reader."""

from __future__ import annotations

from difflib import get_close_matches


class MongoPushdownError(Exception):
    """Root exception for the mongo-pushdown package."""


class MongoConfigError(MongoPushdownError):
    """Raised when reader configuration is invalid."""


class MongoConnectionError(MongoPushdownError):
    """Raised when connection to MongoDB fails."""


class MongoQueryError(MongoPushdownError):
    """Raised when a filter or projection cannot be compiled."""


class UnsupportedFilterError(MongoQueryError):
    """Raised for filters that have no MongoDB translation (e.g. ``Not``).

    When raised for an unknown operator name, close matches from
    ``valid_operators`` are offered as suggestions.
    """

    def __init__(
        self,
        message: str,
        *,
        operator: str | None = None,
        valid_operators: list[str] | None = None,
    ) -> None:
        self.operator = operator
        self.suggestions: list[str] = []
        if operator is not None and valid_operators:
            self.suggestions = get_close_matches(
                operator, valid_operators, n=3, cutoff=0.6
            )
            if self.suggestions:
                message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)


class MongoReadError(MongoPushdownError):
    """Raised when a reader fails to initialize against its partition.

    Wraps whatever went wrong (connection, collection lookup, query
    compilation, cursor creation); the original exception is kept in
    ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ReaderStateError(MongoPushdownError):
    """Raised when a reader operation is invalid for its current state."""
