"""Book resource service.

Parses raw request inputs, validates them and drives the repository. Errors
are raised as ``BookServiceError`` subclasses and rendered into responses at
the HTTP boundary.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from book_service.core.exceptions import BadRequestError, NotFoundError, ValidationError
from book_service.entities.service.book import (
    Book,
    BookPayload,
    BookRepository,
    validate_book,
)
from book_service.runtime.config.config_data import PaginationConfig


@dataclass(frozen=True)
class Page:
    """One page of books plus the total number of live books."""

    books: list[Book]
    total: int
    page: int
    limit: int


# Largest value a BIGINT column or OFFSET clause accepts.
MAX_ROW_ID = 2**63 - 1


def _parse_int(raw: str, *, signed: bool = False) -> int:
    """Parse a plain run of ASCII digits, rejecting ``int()`` extras like ``1_0`` or ``+5``."""
    digits = raw[1:] if signed and raw.startswith("-") else raw
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"not an integer: {raw!r}")
    return int(raw)


def parse_book_id(raw_id: str) -> int:
    """Parse a path identifier; only positive integers are accepted.

    Ids beyond the storage range cannot belong to any book and raise
    ``NotFoundError`` without querying.
    """
    try:
        book_id = _parse_int(raw_id)
    except (TypeError, ValueError):
        raise BadRequestError("Invalid id") from None
    if book_id < 1:
        raise BadRequestError("Invalid id")
    if book_id > MAX_ROW_ID:
        raise NotFoundError()
    return book_id


def parse_pagination(
    raw_page: str | None,
    raw_limit: str | None,
    config: PaginationConfig,
) -> tuple[int, int]:
    """Turn ``page``/``limit`` query strings into validated integers.

    Absent values fall back to the configured defaults. ``limit`` above
    ``config.max_limit`` is clamped.
    """
    try:
        page = config.default_page if raw_page is None else _parse_int(raw_page, signed=True)
    except ValueError:
        raise BadRequestError("Invalid page number") from None

    try:
        limit = config.default_limit if raw_limit is None else _parse_int(raw_limit, signed=True)
    except ValueError:
        raise BadRequestError("Invalid limit number") from None

    if page < 1 or limit < 1:
        raise BadRequestError("Page and limit must be greater than 0")

    return page, min(limit, config.max_limit)


class BookService:
    """Implements create, delete, get and list for books."""

    def __init__(self, repository: BookRepository, pagination: PaginationConfig) -> None:
        self._repository = repository
        self._pagination = pagination

    def create_books(self, payloads: Sequence[BookPayload]) -> list[Book]:
        """Validate every payload, then persist the whole batch at once.

        Nothing is persisted when any element fails validation.
        """
        if not payloads:
            raise BadRequestError("At least one book is required")

        validated = []
        for index, payload in enumerate(payloads):
            try:
                validated.append(validate_book(payload))
            except ValidationError as e:
                logger.warning("Validation failed for book {}: {}", index, e.message)
                raise e.at_index(index) from None

        return self._repository.insert(validated)

    def delete_book(self, raw_id: str) -> None:
        self._repository.soft_delete(parse_book_id(raw_id))

    def get_book(self, raw_id: str) -> Book:
        return self._repository.find_by_id(parse_book_id(raw_id))

    def list_books(self, raw_page: str | None, raw_limit: str | None) -> Page:
        page, limit = parse_pagination(raw_page, raw_limit, self._pagination)
        offset = (page - 1) * limit

        total = self._repository.count()
        if offset > MAX_ROW_ID:
            # No row lies beyond the BIGINT range.
            return Page(books=[], total=total, page=page, limit=limit)
        books = self._repository.find_page(offset, limit)
        return Page(books=books, total=total, page=page, limit=limit)
