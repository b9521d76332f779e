"""Book API router: batch create, soft delete, lookup and paginated list."""

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from book_service.api.http.deps import get_book_service
from book_service.core.services import BookService
from book_service.entities.service.book import Book, BookPayload

router = APIRouter(tags=["books"])


class MessageResponse(BaseModel):
    message: str


class BookResponse(MessageResponse):
    data: Book


class BookListResponse(MessageResponse):
    data: list[Book]


class BookPageResponse(BookListResponse):
    total: int


@router.post(
    "/create_books",
    response_model=BookListResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_books(
    books: list[BookPayload],
    service: BookService = Depends(get_book_service),
) -> BookListResponse:
    """Create a batch of books; nothing is stored if any element is invalid."""
    created = service.create_books(books)
    return BookListResponse(message="Books created successfully", data=created)


@router.delete("/delete_book/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> MessageResponse:
    """Soft-delete a book."""
    service.delete_book(book_id)
    return MessageResponse(message="Book deleted successfully")


@router.get("/get_books/{book_id}", response_model=BookResponse)
def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    """Get a book by ID."""
    book = service.get_book(book_id)
    return BookResponse(message="Book fetched successfully", data=book)


@router.get("/books", response_model=BookPageResponse)
def list_books(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    service: BookService = Depends(get_book_service),
) -> BookPageResponse:
    """List live books one page at a time, ordered by id."""
    result = service.list_books(page, limit)
    return BookPageResponse(
        message="Books fetched successfully",
        data=result.books,
        total=result.total,
    )
