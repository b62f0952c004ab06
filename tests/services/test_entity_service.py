"""Entity Access Service — verifies keyed reads, dual-fetch mutation, insert and delete.

Tests:
    - insert then find returns an entity equal by key
    - Absent keys answer None
    - Named relations are loaded; unnamed ones stay unloaded
    - apply_change: precondition reads the fresh copy; false => nothing written,
      caller's copy untouched; true => stored row and caller's copy both changed
    - apply_change on a vanished entity raises ResourceNotFoundError
    - Store failures surface as DatabaseError
    - delete reports whether a row was removed
"""

import pytest

from socialnet.core.errors import DatabaseError, KeyRegistrationError, ResourceNotFoundError
from socialnet.db.key_registry import KeyRegistry
from socialnet.db.relations import is_loaded
from socialnet.models.user import User
from socialnet.services.entity_service import EntityService


async def test_insert_then_find_round_trips_by_key(users, registry):
    user = await users.insert(
        User(username="carol", email_address="c@example.com", phone_number="+1"),
    )
    assert user.user_id is not None

    found = await users.find(user.user_id)
    assert found is not user
    assert registry.same_key(found, user)
    assert found.username == "carol"


async def test_find_absent_key_returns_none(users):
    assert await users.find(424242) is None
    assert await users.fetch(424242, ("followers",)) is None


async def test_fetch_loads_only_named_relations(users, alice):
    fetched = await users.fetch(alice.user_id, ("followers",))
    assert is_loaded(fetched, "followers")
    assert not is_loaded(fetched, "following")
    assert fetched.followers == []


async def test_first_where_and_list_where(users, alice, bob):
    found = await users.first_where(User.email_address == "a@example.com")
    assert found.user_id == alice.user_id

    listed = await users.list_where(order_by=(User.user_id.desc(),))
    assert [u.user_id for u in listed] == [bob.user_id, alice.user_id]

    assert await users.first_where(User.username == "nobody") is None


async def test_apply_change_writes_store_and_caller_copy(users, alice):
    applied = await users.apply_change(
        alice, lambda u: setattr(u, "bio", "hello"),
    )
    assert applied
    assert alice.bio == "hello"
    assert (await users.find(alice.user_id)).bio == "hello"


async def test_apply_change_precondition_sees_fresh_copy(users, alice):
    # A stale local edit must not influence the precondition
    alice.bio = "stale local value"
    seen = []

    def precondition(fresh: User) -> bool:
        seen.append(fresh.bio)
        return False

    applied = await users.apply_change(
        alice, lambda u: setattr(u, "bio", "never"), precondition=precondition,
    )
    assert not applied
    assert seen == [None]
    assert alice.bio == "stale local value"
    assert (await users.find(alice.user_id)).bio is None


async def test_apply_change_on_deleted_entity_raises(users, alice):
    assert await users.delete(alice.user_id)
    with pytest.raises(ResourceNotFoundError):
        await users.apply_change(alice, lambda u: setattr(u, "bio", "x"))


async def test_integrity_failure_maps_to_database_error(users, alice):
    with pytest.raises(DatabaseError):
        await users.insert(
            User(username="alice", email_address="dup@example.com", phone_number="+2"),
        )


async def test_delete_reports_removal(users, alice):
    assert await users.delete(alice.user_id) is True
    assert await users.delete(alice.user_id) is False
    assert await users.find(alice.user_id) is None


def test_unregistered_entity_type_rejected(db):
    with pytest.raises(KeyRegistrationError):
        EntityService(User, db, KeyRegistry())
