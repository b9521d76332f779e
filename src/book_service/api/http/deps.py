"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from book_service.api.http.app_data import ApplicationDependencies
from book_service.core.services import BookService, DbSessionService
from book_service.entities.service.book import BookRepository
from book_service.runtime.context import get_config


def get_database_service(request: Request) -> DbSessionService:
    """Get the database session service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a request-scoped database session, closed when the request ends."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_repository(db: Session = Depends(get_db_session)) -> BookRepository:
    return BookRepository(db)


def get_book_service(
    repository: BookRepository = Depends(get_book_repository),
) -> BookService:
    return BookService(repository, get_config().pagination)
