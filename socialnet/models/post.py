"""Post ORM — a root post or a reply.

Invariants:
    - post_id is the sole key (integer identity)
    - At least one of content_location / text is set (CHECK)
    - content_location set => content_type set (CHECK)
    - parent_id null => root post
    - author is required

Design Decisions:
    - content_type is captured once at creation; a later mismatch means the media changed
    - Deleting a post cascades to its replies and like rows at the database level
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.core.domain_types import MediaKind
from socialnet.db.base import Base, KeyedEntity
from socialnet.models.associations import post_likes


class Post(KeyedEntity, Base):
    """Post entity — text and/or embedded media by one author."""
    __tablename__ = "posts"
    __key_field__ = "post_id"
    __table_args__ = (
        CheckConstraint(
            "NOT (content_location IS NULL AND text IS NULL)",
            name="ck_post_declares_media_or_text",
        ),
        CheckConstraint(
            "NOT (content_location IS NOT NULL AND content_type IS NULL)",
            name="ck_post_media_declares_content_type",
        ),
    )

    DEFAULT_RELATIONS = ("parent", "author", "replies", "likes")

    post_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    content_location: Mapped[str | None] = mapped_column(
        String(2048), nullable=True,
    )
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    text: Mapped[str | None] = mapped_column(String(5000), nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.post_id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    parent: Mapped["Post | None"] = relationship(
        "Post", remote_side=[post_id], back_populates="replies", lazy="raise",
    )
    replies: Mapped[list["Post"]] = relationship(
        "Post", back_populates="parent", lazy="raise", passive_deletes=True,
    )
    likes: Mapped[list["User"]] = relationship(
        "User", secondary=post_likes, back_populates="liked_posts", lazy="raise",
    )
    author: Mapped["User"] = relationship("User", lazy="raise")

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def media_kind(self) -> MediaKind | None:
        return MediaKind.from_content_type(self.content_type)
