"""API test fixtures — FastAPI app wired to the per-test database and fakes.

Invariants:
    - Every provider touching IO is overridden (db manager, registry, mailer, media probe)
    - dependency_overrides cleared after each test

Design Decisions:
    - ASGITransport does not run the lifespan, so no real engine is created
    - Authenticated calls send the bearer token in the Authorization header
"""

from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from socialnet.api.dependencies import (
    get_key_registry,
    get_mailer,
    get_media_probe,
)
from socialnet.infrastructure.database import get_db_manager
from socialnet.main import app
from socialnet.models.login_session import LoginSession


@pytest.fixture
async def client(db, registry, mailer, media_probe):
    app.dependency_overrides[get_db_manager] = lambda: db
    app.dependency_overrides[get_key_registry] = lambda: registry
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_media_probe] = lambda: media_probe

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def login(client, mailer, db):
    """Run the magic-link flow over HTTP; returns Authorization headers."""

    async def _login(identifier: str) -> dict[str, str]:
        res = await client.post("/api/v1/auth/login", json={"identifier": identifier})
        request_id = UUID(res.json()["request_id"])
        secret = mailer.sent[-1].secret
        res = await client.post(
            "/api/v1/auth/login/complete",
            json={"request_id": str(request_id), "secret": secret},
        )
        assert res.json() == {"success": True}
        client.cookies.clear()
        async with db.unit_of_work() as uow:
            token = (await uow.execute(
                select(LoginSession.bearer_token)
                .where(LoginSession.request_id == request_id),
            )).scalar_one()
        return {"Authorization": f"Bearer {token}"}

    return _login
