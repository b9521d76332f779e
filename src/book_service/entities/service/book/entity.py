"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, Field

from book_service.core.exceptions import ValidationError
from book_service.entities.core._base import Entity

REQUIRED_FIELDS = ("author", "title", "publisher")


class Book(Entity):
    """Book entity representing one catalog item.

    This is the domain model returned to callers. It carries no persistence
    behaviour; storage goes through ``BookRepository``.
    """

    author: str = Field(description="Author")
    title: str = Field(description="Title")
    publisher: str = Field(description="Publisher")

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.author == other.author
            and self.title == other.title
            and self.publisher == other.publisher
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.author,
            self.title,
            self.publisher,
        ))


class BookPayload(BaseModel):
    """One element of a create request.

    Fields default to empty strings so that a missing field is reported by
    ``validate_book`` with its name instead of failing body parsing.
    """

    author: str = ""
    title: str = ""
    publisher: str = ""


def validate_book(payload: BookPayload) -> BookPayload:
    """Check that every required field is non-empty after trimming.

    Returns a new payload with trimmed values. Raises ``ValidationError`` for
    the first failing field, in ``author``, ``title``, ``publisher`` order.
    """
    cleaned = {}
    for field in REQUIRED_FIELDS:
        value = getattr(payload, field).strip()
        if not value:
            raise ValidationError(field, "is required")
        cleaned[field] = value
    return BookPayload(**cleaned)
