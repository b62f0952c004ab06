"""Auth Routes — verifies the HTTP magic-link flow and bearer handling.

Tests:
    - /login answers a request id whether or not the identifier matched
    - The identifier is matched as sent, surrounding whitespace included
    - /login/complete sets the token cookie on success, answers false on replay
    - The mailed link path completes the login
    - /me needs a validated bearer token and includes contact details
    - /logout deletes the token cookie
"""

from uuid import uuid4


async def test_login_answers_request_id_for_unknown_identifier(client, mailer):
    res = await client.post(
        "/api/v1/auth/login", json={"identifier": "ghost@example.com"},
    )
    assert res.status_code == 200
    assert "request_id" in res.json()
    assert mailer.sent == []


async def test_blank_identifier_rejected(client):
    res = await client.post("/api/v1/auth/login", json={"identifier": "   "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_padded_identifier_is_not_trimmed(client, mailer, alice):
    res = await client.post(
        "/api/v1/auth/login", json={"identifier": "  a@example.com "},
    )
    assert res.status_code == 200
    assert mailer.sent == []


async def test_complete_sets_cookie_once(client, mailer, alice):
    res = await client.post("/api/v1/auth/login", json={"identifier": "a@example.com"})
    body = {"request_id": res.json()["request_id"], "secret": mailer.sent[0].secret}

    res = await client.post("/api/v1/auth/login/complete", json=body)
    assert res.json() == {"success": True}
    assert res.headers["set-cookie"].startswith("savedToken=")

    client.cookies.clear()
    res = await client.post("/api/v1/auth/login/complete", json=body)
    assert res.json() == {"success": False}
    assert "set-cookie" not in res.headers


async def test_mailed_link_completes_login(client, mailer, alice):
    await client.post("/api/v1/auth/login", json={"identifier": "a@example.com"})
    link = mailer.sent[0].complete_link
    path = link[link.index("/auth/complete/"):]

    res = await client.get(path)
    assert res.status_code == 200
    assert res.json() == {"success": True}


async def test_me_requires_authentication(client):
    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "NOT_AUTHENTICATED"

    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {uuid4()}"},
    )
    assert res.status_code == 401


async def test_me_returns_own_profile(client, login, alice):
    headers = await login("a@example.com")

    res = await client.get("/api/v1/auth/me", headers=headers)
    assert res.status_code == 200
    me = res.json()
    assert me["user_id"] == alice.user_id
    assert me["email_address"] == "a@example.com"
    assert me["following_ids"] == []
    assert me["liked_post_ids"] == []


async def test_logout_deletes_cookie(client, login, alice):
    headers = await login("a@example.com")
    res = await client.post("/api/v1/auth/logout", headers=headers)
    assert res.status_code == 200
    assert res.headers["set-cookie"].startswith("savedToken=")
    assert "Max-Age=0" in res.headers["set-cookie"]
