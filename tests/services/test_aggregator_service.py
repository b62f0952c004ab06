"""Aggregator Service — verifies the home feed selection and ordering.

Tests:
    - Feed holds own posts and posts of followed users, newest first
    - Posts of users not followed are excluded
    - roots_only drops replies
"""

import pytest

from socialnet.models.post import Post
from socialnet.models.user import User
from socialnet.services.aggregator_service import AggregatorService
from socialnet.services.users_service import UsersService


@pytest.fixture
def aggregator(db, registry):
    return AggregatorService(db, registry)


async def test_feed_contains_own_and_followed_posts(
    aggregator, db, registry, posts, make_user, alice, bob,
):
    carol = await make_user("carol")
    users_service = UsersService(db, registry, "http://img.test/d.png")
    follower = await users_service.fetch(alice.user_id, User.DEFAULT_RELATIONS)
    await users_service.follow(follower, bob)

    own = await posts.attach_then_insert(Post(text="mine", author=alice), alice)
    followed = await posts.attach_then_insert(Post(text="bob's", author=bob), bob)
    await posts.attach_then_insert(Post(text="carol's", author=carol), carol)
    reply = await posts.attach_then_insert(
        Post(text="re", author=bob, parent=own), bob, own,
    )

    feed = await aggregator.aggregate(follower)
    assert [p.post_id for p in feed] == [reply.post_id, followed.post_id, own.post_id]
    assert feed[0].author.username == "bob"

    roots = await aggregator.aggregate(follower, roots_only=True)
    assert [p.post_id for p in roots] == [followed.post_id, own.post_id]


async def test_feed_of_isolated_user_is_own_posts_only(aggregator, posts, alice, bob):
    await posts.attach_then_insert(Post(text="bob's", author=bob), bob)
    assert await aggregator.aggregate(alice) == []
