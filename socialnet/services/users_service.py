"""Users Service — profile edits, the follow graph and per-user post indexes.

Invariants:
    - A user never follows themselves; follow/unfollow are no-ops when already in that state
    - Profile edits go through apply_change: the stored row and the caller's copy converge
    - Indexes are newest first (descending post key)
    - The fresh follower holds `following` and the fresh target holds `followers` while
      an edge is added or removed

Design Decisions:
    - Composes a Post EntityService for the indexes instead of reaching into the session
    - follow mutates the follower's `following`; the inverse side follows through the backref
"""

import logging

from socialnet.core.profile_update import ProfileUpdate, apply_profile_update
from socialnet.db.key_registry import KeyRegistry
from socialnet.db.relations import is_loaded
from socialnet.infrastructure.database import DatabaseSessionManager
from socialnet.models.post import Post
from socialnet.models.user import User
from socialnet.services.entity_service import EntityService

logger = logging.getLogger(__name__)

INDEX_RELATIONS = ("author", "likes", "replies")


class UsersService(EntityService[User, int]):
    def __init__(
        self,
        db: DatabaseSessionManager,
        registry: KeyRegistry,
        default_picture: str,
    ):
        super().__init__(User, db, registry)
        self._posts: EntityService[Post, int] = EntityService(Post, db, registry)
        self._default_picture = default_picture

    async def apply_update(self, user: User, update: ProfileUpdate) -> bool:
        if update.is_empty:
            return False
        return await self.apply_change(
            user,
            lambda u: apply_profile_update(u, update, self._default_picture),
        )

    async def follow(self, follower: User, target: User) -> bool:
        """`follower` must hold `following`; `target`'s followers are updated if loaded."""
        registry = self.registry

        def can_follow(f: User, t: User) -> bool:
            return (
                not registry.same_key(f, t)
                and not registry.contains_key(f.following, t)
            )

        def add_edge(f: User, t: User) -> None:
            f.following.append(t)

        return await self.apply_change_many(
            follower, target, add_edge,
            precondition=can_follow,
            relations=("following",), other_relations=("followers",),
        )

    async def unfollow(self, follower: User, target: User) -> bool:
        registry = self.registry

        def follows(f: User, t: User) -> bool:
            return registry.contains_key(f.following, t)

        def remove_edge(f: User, t: User) -> None:
            registry.remove_by_key(f.following, t)
            if is_loaded(t, "followers"):
                registry.remove_by_key(t.followers, f)

        return await self.apply_change_many(
            follower, target, remove_edge,
            precondition=follows,
            relations=("following",), other_relations=("followers",),
        )

    async def root_index(
        self, user_id: int, limit: int | None = None, offset: int = 0,
    ) -> list[Post]:
        """Top-level posts authored by the user."""
        return await self._posts.list_where(
            Post.author_id == user_id,
            Post.parent_id.is_(None),
            relations=INDEX_RELATIONS,
            order_by=(Post.post_id.desc(),),
            limit=limit,
            offset=offset,
        )

    async def reply_index(
        self, user_id: int, limit: int | None = None, offset: int = 0,
    ) -> list[Post]:
        """Replies authored by the user."""
        return await self._posts.list_where(
            Post.author_id == user_id,
            Post.parent_id.is_not(None),
            relations=INDEX_RELATIONS + ("parent",),
            order_by=(Post.post_id.desc(),),
            limit=limit,
            offset=offset,
        )
