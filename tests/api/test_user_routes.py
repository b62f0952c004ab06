"""User Routes — verifies profiles, profile edits, follows and indexes over HTTP.

Tests:
    - Public profile hides contact details and lists follow edges
    - PATCH /users/me edits the profile (blank unsets)
    - Follow/unfollow are idempotent; following oneself changes nothing
    - Post and reply indexes; unknown users are 404
"""


async def test_public_profile_hides_contact_details(client, alice):
    res = await client.get(f"/api/v1/users/{alice.user_id}")
    assert res.status_code == 200
    body = res.json()
    assert body["username"] == "alice"
    assert "email_address" not in body
    assert body["follower_ids"] == []


async def test_update_me(client, login, alice):
    headers = await login("a@example.com")
    res = await client.patch(
        "/api/v1/users/me", json={"display_name": "Ally", "bio": "hello"}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["display_name"] == "Ally"

    res = await client.patch("/api/v1/users/me", json={"display_name": ""}, headers=headers)
    assert res.json()["display_name"] == "alice"
    assert res.json()["bio"] == "hello"


async def test_follow_and_unfollow(client, login, alice, bob):
    headers = await login("a@example.com")

    res = await client.put(f"/api/v1/users/{bob.user_id}/follow", headers=headers)
    assert res.json() == {"changed": True, "following": True}
    res = await client.put(f"/api/v1/users/{bob.user_id}/follow", headers=headers)
    assert res.json() == {"changed": False, "following": True}

    profile = (await client.get(f"/api/v1/users/{bob.user_id}")).json()
    assert profile["follower_ids"] == [alice.user_id]

    res = await client.delete(f"/api/v1/users/{bob.user_id}/follow", headers=headers)
    assert res.json() == {"changed": True, "following": False}


async def test_follow_self_changes_nothing(client, login, alice):
    headers = await login("a@example.com")
    res = await client.put(f"/api/v1/users/{alice.user_id}/follow", headers=headers)
    assert res.json() == {"changed": False, "following": False}


async def test_indexes(client, login, alice):
    headers = await login("a@example.com")
    res = await client.post("/api/v1/posts", json={"text": "root"}, headers=headers)
    root_id = res.json()["post_id"]
    await client.post(
        "/api/v1/posts", json={"text": "re", "parent_id": root_id}, headers=headers,
    )

    roots = (await client.get(f"/api/v1/users/{alice.user_id}/posts")).json()
    replies = (await client.get(f"/api/v1/users/{alice.user_id}/replies")).json()
    assert [p["post_id"] for p in roots] == [root_id]
    assert [p["parent_id"] for p in replies] == [root_id]


async def test_unknown_user_is_404(client):
    assert (await client.get("/api/v1/users/999")).status_code == 404
    assert (await client.get("/api/v1/users/999/posts")).status_code == 404
