from dataclasses import dataclass

from book_service.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
