"""
Error Types

Exception hierarchy shared by the store, ledgers, reports and API layers.
"""


class BookkeepingError(Exception):
    """Base class for all bookkeeping errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(BookkeepingError):
    """Required external-service credentials or settings are missing."""

    status_code = 500


class RemoteCallError(BookkeepingError):
    """A call to the record store or identity provider failed."""

    status_code = 502


class ConflictError(BookkeepingError):
    """A write collided with a unique or primary key constraint."""

    status_code = 409


class NotFoundError(BookkeepingError):
    """An expected row does not exist."""

    status_code = 404


class AuthenticationError(BookkeepingError):
    """No valid session for the request."""

    status_code = 401


class AuthorizationError(BookkeepingError):
    """The acting identity lacks a required capability."""

    status_code = 403


class InvalidInputError(BookkeepingError):
    """Malformed input that passed schema validation but was rejected."""

    status_code = 400

    def __init__(self, message: str, details: list[dict] | None = None):
        super().__init__(message)
        self.details = details or []
