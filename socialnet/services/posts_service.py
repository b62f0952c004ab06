"""Posts Service — post creation, likes and deletion.

Invariants:
    - Content presence is checked before any unit of work is opened or any probe is made
    - Media posts carry the MIME type the probe reported, and it is on the allowed list
    - A user likes a post at most once; like/unlike are no-ops when already in that state
    - Deleting a post removes its like rows and its replies (database cascade)
    - Both sides of the like edge are loaded on the fresh copies; the backref never
      touches an unloaded collection inside a unit of work

Design Decisions:
    - Validation failures are returned as a ValidationResult, never raised: the HTTP edge
      decides how to surface them
    - The author and parent are passed as references to attach_then_insert, so an
      already-stored author is attached rather than re-inserted
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from socialnet.core.boundary_protocols import MediaProbe
from socialnet.core.post_validation import (
    ValidationResult,
    normalize_optional_text,
    validate_content_presence,
    validate_media_type,
    validate_post_content,
)
from socialnet.db.key_registry import KeyRegistry
from socialnet.db.relations import is_loaded
from socialnet.infrastructure.database import DatabaseSessionManager
from socialnet.models.post import Post
from socialnet.models.user import User
from socialnet.services.entity_service import EntityService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostCreation:
    """Outcome of create_post: the stored post, or the reason it was rejected."""
    validation: ValidationResult
    post: Post | None = None

    @property
    def ok(self) -> bool:
        return self.validation.ok


class PostsService(EntityService[Post, int]):
    def __init__(
        self,
        db: DatabaseSessionManager,
        registry: KeyRegistry,
        media_probe: MediaProbe,
        allowed_media_types: Iterable[str],
    ):
        super().__init__(Post, db, registry)
        self._media_probe = media_probe
        self._allowed_media_types = tuple(allowed_media_types)

    async def create_post(
        self,
        author: User,
        *,
        text: str | None = None,
        content_location: str | None = None,
        parent: Post | None = None,
    ) -> PostCreation:
        """Validate, probe the media type, then insert with author/parent attached."""
        text = normalize_optional_text(text) if text is not None else None
        if content_location is not None:
            content_location = normalize_optional_text(content_location)

        presence = validate_content_presence(content_location, text)
        if not presence.ok:
            return PostCreation(validation=presence)

        content_type = None
        if content_location is not None:
            content_type = await self._media_probe.content_type(content_location)
            media = validate_media_type(content_type, self._allowed_media_types)
            if not media.ok:
                logger.info(
                    f"Rejected media post: {media.reason}",
                    extra={"user_id": author.user_id},
                )
                return PostCreation(validation=media)

        validation = validate_post_content(content_location, content_type, text)
        if not validation.ok:
            return PostCreation(validation=validation)

        post = Post(
            text=text,
            content_location=content_location,
            content_type=content_type,
            author=author,
            parent=parent,
        )
        await self.attach_then_insert(post, author, parent)
        return PostCreation(validation=validation, post=post)

    async def put_like(self, post: Post, user: User) -> bool:
        """Like `post` as `user`. `post` must hold its likes."""
        registry = self.registry

        def not_liked(p: Post, u: User) -> bool:
            return not registry.contains_key(p.likes, u)

        def like(p: Post, u: User) -> None:
            p.likes.append(u)

        return await self.apply_change_many(
            post, user, like, precondition=not_liked,
            relations=("likes",), other_relations=("liked_posts",),
        )

    async def delete_like(self, post: Post, user: User) -> bool:
        """Withdraw `user`'s like of `post`. `post` must hold its likes."""
        registry = self.registry

        def liked(p: Post, u: User) -> bool:
            return registry.contains_key(p.likes, u)

        def unlike(p: Post, u: User) -> None:
            registry.remove_by_key(p.likes, u)
            if is_loaded(u, "liked_posts"):
                registry.remove_by_key(u.liked_posts, p)

        return await self.apply_change_many(
            post, user, unlike, precondition=liked,
            relations=("likes",), other_relations=("liked_posts",),
        )

    async def delete_post(self, post_id: int) -> bool:
        return await self.delete(post_id)
