"""Book repository: data access for book records."""

from collections.abc import Sequence

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from book_service.core.exceptions import NotFoundError, StorageError
from book_service.entities.core._base import utcnow
from book_service.entities.service.book.entity import Book, BookPayload
from book_service.entities.service.book.table import BookTable


class BookRepository:
    """Data-access layer for books.

    Reads only ever see live rows: every query filters on
    ``deleted_at IS NULL`` explicitly.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _live():
        return col(BookTable.deleted_at).is_(None)

    @staticmethod
    def _to_entity(row: BookTable) -> Book:
        return Book.model_validate(row, from_attributes=True)

    def _get_live_row(self, book_id: int) -> BookTable:
        statement = select(BookTable).where(BookTable.id == book_id, self._live())
        row = self._session.exec(statement).first()
        if row is None:
            raise NotFoundError()
        return row

    def insert(self, books: Sequence[BookPayload]) -> list[Book]:
        """Persist a batch in one transaction; any failure rolls back the whole batch."""
        rows = [BookTable(**book.model_dump()) for book in books]
        try:
            self._session.add_all(rows)
            self._session.commit()
            for row in rows:
                self._session.refresh(row)
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception("Failed to insert {} books", len(rows))
            raise StorageError("Failed to create books") from e
        logger.info("Inserted {} books", len(rows))
        return [self._to_entity(row) for row in rows]

    def find_by_id(self, book_id: int) -> Book:
        try:
            row = self._get_live_row(book_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch book {}", book_id)
            raise StorageError("Failed to fetch book") from e
        return self._to_entity(row)

    def find_page(self, offset: int, limit: int) -> list[Book]:
        """Return up to ``limit`` live books starting at ``offset``, ordered by id."""
        statement = (
            select(BookTable)
            .where(self._live())
            .order_by(col(BookTable.id).asc())
            .offset(offset)
            .limit(limit)
        )
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch books (offset={}, limit={})", offset, limit)
            raise StorageError("Failed to fetch books") from e
        return [self._to_entity(row) for row in rows]

    def count(self) -> int:
        statement = select(func.count()).select_from(BookTable).where(self._live())
        try:
            return self._session.exec(statement).one()
        except SQLAlchemyError as e:
            logger.exception("Failed to count books")
            raise StorageError("Failed to fetch books count") from e

    def soft_delete(self, book_id: int) -> None:
        """Mark a live book deleted. Raises ``NotFoundError`` if none matches."""
        try:
            row = self._get_live_row(book_id)
            now = utcnow()
            row.deleted_at = now
            row.updated_at = now
            self._session.add(row)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception("Failed to delete book {}", book_id)
            raise StorageError("Failed to delete book") from e
        logger.info("Soft-deleted book {}", book_id)
