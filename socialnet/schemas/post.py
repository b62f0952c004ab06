"""Post Schemas — post creation body and post views.

Invariants:
    - PostCreate rejects a body with neither media nor text (same rule as the service)
    - Relation-backed fields are emitted only when the relation was loaded, else None
"""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from socialnet.core.domain_types import MediaKind
from socialnet.core.post_validation import validate_content_presence
from socialnet.db.relations import is_loaded
from socialnet.models.post import Post
from socialnet.schemas.user import UserSummary


class PostCreate(BaseModel):
    text: str | None = Field(None, max_length=5000)
    content_location: str | None = Field(None, max_length=2048)
    parent_id: int | None = None

    @model_validator(mode="after")
    def check_media_or_text(self) -> "PostCreate":
        result = validate_content_presence(self.content_location, self.text)
        if not result.ok:
            raise ValueError(result.reason)
        return self


class PostResponse(BaseModel):
    post_id: int
    author_id: int
    parent_id: int | None = None
    text: str | None = None
    content_location: str | None = None
    content_type: str | None = None
    media_kind: MediaKind | None = None
    created_at: datetime
    author: UserSummary | None = None
    reply_ids: list[int] | None = None
    liker_ids: list[int] | None = None
    like_count: int | None = None

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        likers = (
            [u.user_id for u in post.likes] if is_loaded(post, "likes") else None
        )
        return cls(
            post_id=post.post_id,
            author_id=post.author_id,
            parent_id=post.parent_id,
            text=post.text,
            content_location=post.content_location,
            content_type=post.content_type,
            media_kind=post.media_kind,
            created_at=post.created_at,
            author=(
                UserSummary.from_user(post.author)
                if is_loaded(post, "author") and post.author is not None else None
            ),
            reply_ids=(
                [r.post_id for r in post.replies]
                if is_loaded(post, "replies") else None
            ),
            liker_ids=likers,
            like_count=len(likers) if likers is not None else None,
        )


class LikeResponse(BaseModel):
    changed: bool
    liked: bool
