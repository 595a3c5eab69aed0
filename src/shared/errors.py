"""Request and domain errors shared by every bounded context.

Rule violations are raised as Protean ``ValidationError`` subclasses so they
behave like every other domain error, but each one also carries the HTTP
status it maps to and a single human-readable message.
"""

from protean.exceptions import ValidationError


class RequestRejected(ValidationError):
    """A request that can never succeed as sent (client's fault)."""

    status_code = 400

    def __init__(self, message: str, field: str = "request"):
        super().__init__({field: [message]})
        self.field = field
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFound(RequestRejected):
    """A referenced entity does not exist."""

    status_code = 404


class Conflict(RequestRejected):
    """The request collides with existing state (duplicate code, entity in use)."""

    status_code = 409


class UpstreamUnavailable(RequestRejected):
    """A third-party service answered with a failure."""

    status_code = 502


class TransactionFailed(Exception):
    """Persistence failed part-way; nothing was committed."""

    status_code = 500

    def __init__(self, message: str = "Failed to process stock movement"):
        super().__init__(message)
        self.message = message
