"""Unit-of-Work Factory — short-lived async sessions with automatic rollback and health checks.

Invariants:
    - Every unit of work is a fresh AsyncSession, used for one logical operation, then closed
    - Units of work are never cached, pooled, or stored on long-lived objects
    - Every unit of work auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: entities stay readable after their unit of work closes
    - Pool arguments only for server databases (SQLite uses its own pool classes)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from socialnet.core.errors import DatabaseError
from socialnet.db.session import create_engine_for, create_session_factory

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _describe_failure(exc: SQLAlchemyError) -> tuple[str, str]:
    for exc_type, message, operation in _FAILURES:
        if isinstance(exc, exc_type):
            return message, operation
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Produces independent units of work against one engine."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_engine_for(database_url, **engine_kwargs)
        self._session_factory = create_session_factory(self.engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Bind a manager to an existing engine (tests, migrations)."""
        manager = cls.__new__(cls)
        manager.engine = engine
        manager._session_factory = create_session_factory(engine)
        return manager

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a fresh unit of work with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _describe_failure(e)
            logger.error(f"{message}: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError(message, operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.unit_of_work() as uow:
                await uow.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency for the unit-of-work factory."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
