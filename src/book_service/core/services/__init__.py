"""Core services exports."""

from .book_service import BookService, Page, parse_book_id, parse_pagination
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

__all__ = [
    "BookService",
    "DbManageService",
    "DbSessionService",
    "Page",
    "parse_book_id",
    "parse_pagination",
]
