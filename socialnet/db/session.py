"""Async Engine & Session Factory — engine construction shared by app, migrations and tests.

Invariants:
    - SQLite connections always run with foreign keys enforced (cascades and CHECKs match PostgreSQL)
    - Sessions never expire attributes on commit

Design Decisions:
    - Separate from infrastructure/database.py: alembic and test fixtures need a raw
      engine/session factory without the unit-of-work error mapping
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; SQLite gets the foreign-key pragma on every connection."""
    engine = create_async_engine(database_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
