"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - Services under test use a DatabaseSessionManager bound to that database
    - Collaborators (mailer, token store, media probe) are in-memory fakes

Design Decisions:
    - StaticPool: every unit of work shares the one in-memory connection, so rows
      written by one unit of work are visible to the next
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MAIL_TRANSPORT", "log")
os.environ.setdefault("PUBLIC_BASE_URL", "http://test")

import pytest
from sqlalchemy.pool import StaticPool

from socialnet.db.base import Base
from socialnet.db.session import create_engine_for
from socialnet.infrastructure.database import DatabaseSessionManager
from socialnet.models import LoginSession, Post, User, build_key_registry
from socialnet.services.entity_service import EntityService
from tests.fakes import FakeMediaProbe, MemoryTokenStore, RecordingMailer


@pytest.fixture
async def test_engine():
    engine = create_engine_for(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def registry():
    return build_key_registry()


@pytest.fixture
def users(db, registry):
    return EntityService(User, db, registry)


@pytest.fixture
def posts(db, registry):
    return EntityService(Post, db, registry)


@pytest.fixture
def sessions(db, registry):
    return EntityService(LoginSession, db, registry)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def token_store():
    return MemoryTokenStore()


@pytest.fixture
def media_probe():
    return FakeMediaProbe()


@pytest.fixture
def make_user(users):
    """Insert a user; username, email and phone derived from `name`."""
    counter = iter(range(1, 10_000))

    async def _make(name: str = None, **fields) -> User:
        n = next(counter)
        name = name or f"user{n}"
        fields.setdefault("email_address", f"{name}@example.com")
        fields.setdefault("phone_number", f"+1555000{n:04d}")
        return await users.insert(User(username=name, **fields))

    return _make


@pytest.fixture
async def alice(make_user):
    return await make_user("alice", email_address="a@example.com")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob")
