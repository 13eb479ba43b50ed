"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, StaticPool, text
from sqlmodel import Session, create_engine

from src.addressbook.runtime.config.config_data import DatabaseConfig
from src.addressbook.runtime.context import get_config


def build_engine(db_config: DatabaseConfig) -> Engine:
    """Create an engine tuned for the configured backend."""
    engine_kwargs: dict[str, Any] = {"echo": db_config.echo}

    if db_config.backend == "sqlite":
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,  # sessions are used from the threadpool
            "timeout": 20,  # lock timeout
        }
        if db_config.is_memory:
            # A single shared connection, otherwise every session sees an empty database
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

    logger.info("Initializing database engine for backend {}", db_config.backend)
    return create_engine(db_config.url, **engine_kwargs)


class DbSessionService:
    def __init__(
        self,
        db_config: DatabaseConfig | None = None,
        engine: Engine | None = None,
    ):
        """Wrap ``engine``, or build one from ``db_config`` (default: current config)."""
        if engine is None:
            main_config = get_config()
            if main_config.app.environment == "production" and (
                db_config or main_config.database
            ).backend == "sqlite":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
            engine = build_engine(db_config or main_config.database)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # returned entities stay readable after commit
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for repositories and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed: {}: {}", type(e).__name__, e
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            return False

    def dispose(self) -> None:
        self._engine.dispose()
