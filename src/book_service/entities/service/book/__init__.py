"""Entity package: Book."""

from .entity import Book, BookPayload, validate_book
from .repository import BookRepository
from .table import BookTable

__all__ = ["Book", "BookPayload", "BookRepository", "BookTable", "validate_book"]
