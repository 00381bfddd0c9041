"""Exception types raised by collection resources.

Field-level validation failures are not exceptions: they are returned as an
ErrorMap in place of the saved record. The classes below cover the failures
that abort an operation.
"""


class RecordGateError(Exception):
    """Base exception for resource operations.

    Attributes:
        message: Human-readable description
        status: HTTP-style status code suggested to the transport layer
    """

    default_status = 400

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status if status is not None else self.default_status

    def to_dict(self) -> dict:
        return {"message": self.message, "status": self.status}


class CancellationError(RecordGateError):
    """Raised when a hook calls ``cancel()`` for a non-root session."""

    pass


class PreconditionError(RecordGateError):
    """Raised before any store interaction when a request is malformed."""

    pass


class StoreError(RecordGateError):
    """Raised by store implementations for their own failures."""

    default_status = 500
