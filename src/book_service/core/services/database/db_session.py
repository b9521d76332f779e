"""Database engine and session factory used across the application."""

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from book_service.runtime.config.config_data import ConfigData
from book_service.runtime.context import get_config


def build_engine(config: ConfigData) -> Engine:
    """Create the SQLAlchemy engine described by ``config.database``."""
    db_config = config.database
    engine_kwargs: dict = {
        "echo": db_config.echo,
        "connect_args": _get_connect_args(config),
    }

    if db_config.is_sqlite:
        if ":memory:" in db_config.url:
            # A single shared connection so every session sees the same database.
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }
        )

    logger.info(
        "Initializing database engine for {} ({})",
        "sqlite" if db_config.is_sqlite else "postgresql",
        config.app.environment,
    )
    return create_engine(db_config.connection_string, **engine_kwargs)


def _get_connect_args(config: ConfigData) -> dict:
    """Get database-specific connection arguments."""
    db_config = config.database
    connect_args: dict = {}

    if db_config.is_sqlite:
        connect_args.update(
            {
                "check_same_thread": False,
                "timeout": max(1, db_config.statement_timeout_ms // 1000),
            }
        )
        if config.app.environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )
    elif "postgresql" in db_config.url:
        connect_args.update(
            {
                "application_name": f"{config.app.name}_{config.app.environment}",
                "connect_timeout": 30,
                # Bounds every storage call so a request never hangs on the database.
                "options": f"-c statement_timeout={db_config.statement_timeout_ms}",
            }
        )

    return connect_args


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine, building one from config if not given."""
        self._engine = engine if engine is not None else build_engine(get_config())

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed: {}: {}", type(e).__name__, e
            )
            return False

    def dispose(self) -> None:
        self._engine.dispose()
