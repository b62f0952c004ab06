"""Aggregator Service — the home feed of an authenticated user.

Invariants:
    - The feed holds posts (roots and replies) authored by the user or by anyone the user follows
    - Newest first (descending post key)
"""

from sqlalchemy import or_, select

from socialnet.db.key_registry import KeyRegistry
from socialnet.infrastructure.database import DatabaseSessionManager
from socialnet.models.associations import user_follows
from socialnet.models.post import Post
from socialnet.models.user import User
from socialnet.services.entity_service import EntityService

FEED_RELATIONS = ("author", "likes", "parent", "replies")


class AggregatorService:
    def __init__(self, db: DatabaseSessionManager, registry: KeyRegistry):
        self._posts: EntityService[Post, int] = EntityService(Post, db, registry)

    async def aggregate(
        self,
        user: User,
        *,
        roots_only: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Post]:
        followed = select(user_follows.c.following_id).where(
            user_follows.c.follower_id == user.user_id,
        )
        criteria = [or_(Post.author_id == user.user_id, Post.author_id.in_(followed))]
        if roots_only:
            criteria.append(Post.parent_id.is_(None))
        return await self._posts.list_where(
            *criteria,
            relations=FEED_RELATIONS,
            order_by=(Post.post_id.desc(),),
            limit=limit,
            offset=offset,
        )
