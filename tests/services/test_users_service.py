"""Users Service — verifies profile edits, the follow graph and post indexes.

Tests:
    - Profile update reaches the store and the caller's copy; empty update is a no-op
    - Follow adds one edge on both sides; following again is a no-op
    - Following oneself is a no-op
    - Unfollow removes the edge; unfollowing a non-followed user is a no-op
    - Follow and unfollow succeed whether or not the target holds its followers
    - Root and reply indexes are newest first and split by parent
"""

import pytest
from sqlalchemy import func, select

from socialnet.core.profile_update import ProfileUpdate
from socialnet.models.associations import user_follows
from socialnet.models.post import Post
from socialnet.models.user import User
from socialnet.services.users_service import UsersService

DEFAULT_PICTURE = "http://img.test/default.png"


@pytest.fixture
def users_service(db, registry):
    return UsersService(db, registry, DEFAULT_PICTURE)


@pytest.fixture
async def follower(users_service, alice):
    return await users_service.fetch(alice.user_id, User.DEFAULT_RELATIONS)


@pytest.fixture
async def target(users_service, bob):
    return await users_service.fetch(bob.user_id, ("followers",))


async def _edges(db) -> int:
    async with db.unit_of_work() as uow:
        return (await uow.execute(select(func.count()).select_from(user_follows))).scalar_one()


async def test_profile_update_applies(users_service, alice):
    applied = await users_service.apply_update(
        alice, ProfileUpdate(display_name="Ally", bio="hi", picture=""),
    )
    assert applied
    assert alice.display_name == "Ally"
    stored = await users_service.find(alice.user_id)
    assert stored.chosen_name == "Ally"
    assert stored.bio == "hi"
    assert stored.picture == DEFAULT_PICTURE


async def test_empty_profile_update_is_noop(users_service, alice):
    assert not await users_service.apply_update(alice, ProfileUpdate())


async def test_follow_adds_single_edge(users_service, follower, target, db):
    assert await users_service.follow(follower, target)
    assert [u.user_id for u in follower.following] == [target.user_id]
    assert [u.user_id for u in target.followers] == [follower.user_id]
    assert await _edges(db) == 1

    assert not await users_service.follow(follower, target)
    assert len(follower.following) == 1
    assert await _edges(db) == 1


async def test_follow_self_is_noop(users_service, follower, db):
    same = await users_service.fetch(follower.user_id, ("followers",))
    assert not await users_service.follow(follower, same)
    assert follower.following == []
    assert await _edges(db) == 0


async def test_unfollow(users_service, follower, target, db):
    assert not await users_service.unfollow(follower, target)

    await users_service.follow(follower, target)
    assert await users_service.unfollow(follower, target)
    assert follower.following == []
    assert target.followers == []
    assert await _edges(db) == 0

    stored = await users_service.fetch(target.user_id, ("followers",))
    assert stored.followers == []


async def test_unfollow_plainly_fetched_target(users_service, follower, bob, db):
    target = await users_service.fetch(bob.user_id)

    assert await users_service.follow(follower, target)
    assert await users_service.unfollow(follower, target)
    assert follower.following == []
    assert await _edges(db) == 0


async def test_indexes_split_roots_and_replies(users_service, posts, alice, bob):
    first = await posts.attach_then_insert(Post(text="1", author=alice), alice)
    second = await posts.attach_then_insert(Post(text="2", author=alice), alice)
    reply = await posts.attach_then_insert(
        Post(text="re", author=alice, parent=first), alice, first,
    )
    await posts.attach_then_insert(Post(text="other", author=bob), bob)

    roots = await users_service.root_index(alice.user_id)
    replies = await users_service.reply_index(alice.user_id)

    assert [p.post_id for p in roots] == [second.post_id, first.post_id]
    assert [p.post_id for p in replies] == [reply.post_id]
    assert replies[0].parent.post_id == first.post_id
