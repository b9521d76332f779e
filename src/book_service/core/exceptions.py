"""Error taxonomy for the book service.

Every error carries the HTTP status it maps to and a public message that is
safe to return to clients. Storage errors keep the underlying database error
as ``__cause__`` for logging only.
"""

from typing import Any


class BookServiceError(Exception):
    """Base class for errors rendered at the request boundary."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(BookServiceError):
    """A submitted book is missing a required field."""

    status_code = 400

    def __init__(self, field: str, reason: str, index: int | None = None) -> None:
        self.field = field
        self.reason = reason
        self.index = index
        if index is None:
            message = f"{field} {reason}"
        else:
            message = f"book {index}: {field} {reason}"
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["field"] = self.field
        if self.index is not None:
            payload["index"] = self.index
        return payload

    def at_index(self, index: int) -> "ValidationError":
        """Return a copy of this error tagged with its position in a batch."""
        return ValidationError(self.field, self.reason, index=index)


class BadRequestError(BookServiceError):
    """Malformed path or query parameters."""

    status_code = 400
    message = "Bad request"


class NotFoundError(BookServiceError):
    """No live book matches the requested id."""

    status_code = 404
    message = "Book not found"


class StorageError(BookServiceError):
    """Any other persistence failure."""

    status_code = 500
    message = "Storage error"
