"""Unit tests for BookService and its input parsing helpers."""

from unittest.mock import Mock

import pytest

from book_service.core.exceptions import BadRequestError, NotFoundError, ValidationError
from book_service.core.services import BookService, parse_book_id, parse_pagination
from book_service.core.services.book_service import MAX_ROW_ID
from book_service.entities.service.book import BookPayload, BookRepository
from book_service.runtime.config.config_data import PaginationConfig


class TestParseBookId:
    def test_positive_integer(self):
        assert parse_book_id("17") == 17

    @pytest.mark.parametrize("raw", ["abc", "", "1.5", "0", "-3", "1_0", " 5", "+5", "\u0665"])
    def test_invalid(self, raw: str):
        with pytest.raises(BadRequestError) as exc_info:
            parse_book_id(raw)

        assert exc_info.value.message == "Invalid id"
        assert exc_info.value.status_code == 400

    def test_beyond_storage_range_is_not_found(self):
        assert parse_book_id(str(MAX_ROW_ID)) == MAX_ROW_ID

        with pytest.raises(NotFoundError):
            parse_book_id(str(MAX_ROW_ID + 1))


class TestParsePagination:
    def test_defaults_when_absent(self):
        assert parse_pagination(None, None, PaginationConfig()) == (1, 10)

    def test_configured_defaults(self):
        config = PaginationConfig(default_page=2, default_limit=25)

        assert parse_pagination(None, None, config) == (2, 25)

    def test_explicit_values(self):
        assert parse_pagination("3", "5", PaginationConfig()) == (3, 5)

    def test_invalid_page(self):
        with pytest.raises(BadRequestError, match="Invalid page number"):
            parse_pagination("first", "10", PaginationConfig())

    def test_invalid_limit(self):
        with pytest.raises(BadRequestError, match="Invalid limit number"):
            parse_pagination("1", "ten", PaginationConfig())

    @pytest.mark.parametrize("raw", ["1_0", "+2", " 3", "\u0663", "-"])
    def test_rejects_non_plain_digits(self, raw: str):
        with pytest.raises(BadRequestError, match="Invalid page number"):
            parse_pagination(raw, None, PaginationConfig())

        with pytest.raises(BadRequestError, match="Invalid limit number"):
            parse_pagination(None, raw, PaginationConfig())

    def test_page_checked_before_limit(self):
        with pytest.raises(BadRequestError, match="Invalid page number"):
            parse_pagination("x", "y", PaginationConfig())

    @pytest.mark.parametrize("page,limit", [("0", "10"), ("1", "0"), ("-1", "5")])
    def test_non_positive(self, page: str, limit: str):
        with pytest.raises(BadRequestError, match="Page and limit must be greater than 0"):
            parse_pagination(page, limit, PaginationConfig())

    def test_limit_clamped_to_max(self):
        assert parse_pagination("1", "1000", PaginationConfig(max_limit=50)) == (1, 50)


class TestCreateBooks:
    def test_creates_batch(self, book_service: BookService):
        books = book_service.create_books([
            BookPayload(author="A1", title="T1", publisher="P1"),
            BookPayload(author="A2", title="T2", publisher="P2"),
        ])

        assert [b.title for b in books] == ["T1", "T2"]

    def test_empty_batch_rejected(self, book_service: BookService):
        with pytest.raises(BadRequestError, match="At least one book is required"):
            book_service.create_books([])

    def test_invalid_element_persists_nothing(self, book_service: BookService, book_repository: BookRepository):
        with pytest.raises(ValidationError) as exc_info:
            book_service.create_books([
                BookPayload(author="A1", title="T1", publisher="P1"),
                BookPayload(author="A2", title="", publisher="P2"),
            ])

        assert exc_info.value.index == 1
        assert exc_info.value.field == "title"
        assert book_repository.count() == 0

    def test_validates_before_inserting(self):
        repository = Mock(spec=BookRepository)
        service = BookService(repository, PaginationConfig())

        with pytest.raises(ValidationError):
            service.create_books([BookPayload(author="", title="T", publisher="P")])

        repository.insert.assert_not_called()

    def test_inserts_trimmed_values_in_one_call(self):
        repository = Mock(spec=BookRepository)
        service = BookService(repository, PaginationConfig())

        service.create_books([
            BookPayload(author=" A ", title="T", publisher="P"),
            BookPayload(author="B", title=" U", publisher="Q "),
        ])

        repository.insert.assert_called_once()
        (inserted,), _ = repository.insert.call_args
        assert [(b.author, b.title, b.publisher) for b in inserted] == [
            ("A", "T", "P"),
            ("B", "U", "Q"),
        ]


class TestGetAndDelete:
    def test_get_book(self, book_service: BookService):
        created = book_service.create_books([BookPayload(author="A", title="T", publisher="P")])[0]

        book = book_service.get_book(str(created.id))

        assert book == created

    def test_get_invalid_id(self, book_service: BookService):
        with pytest.raises(BadRequestError):
            book_service.get_book("abc")

    def test_delete_then_get(self, book_service: BookService):
        created = book_service.create_books([BookPayload(author="A", title="T", publisher="P")])[0]

        book_service.delete_book(str(created.id))

        with pytest.raises(NotFoundError):
            book_service.get_book(str(created.id))

    def test_delete_missing(self, book_service: BookService):
        with pytest.raises(NotFoundError):
            book_service.delete_book("12345")


class TestListBooks:
    def test_page_and_total(self, book_service: BookService):
        book_service.create_books(
            [BookPayload(author=f"A{n}", title=f"T{n}", publisher=f"P{n}") for n in range(5)]
        )

        first = book_service.list_books("1", "2")
        last = book_service.list_books("3", "2")
        beyond = book_service.list_books("4", "2")

        assert [b.title for b in first.books] == ["T0", "T1"]
        assert [b.title for b in last.books] == ["T4"]
        assert beyond.books == []
        assert first.total == last.total == beyond.total == 5

    def test_offset_arithmetic(self):
        repository = Mock(spec=BookRepository)
        repository.count.return_value = 0
        repository.find_page.return_value = []
        service = BookService(repository, PaginationConfig())

        service.list_books("3", "7")

        repository.find_page.assert_called_once_with(14, 7)

    def test_offset_beyond_storage_range_is_empty(self):
        repository = Mock(spec=BookRepository)
        repository.count.return_value = 3
        service = BookService(repository, PaginationConfig())

        page = service.list_books(str(10**18), "10")

        assert page.books == []
        assert page.total == 3
        repository.find_page.assert_not_called()
