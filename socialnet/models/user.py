"""User ORM — an actor in the social network.

Invariants:
    - user_id is the sole key (integer identity)
    - username is unique
    - email_address and phone_number are both login identifiers (exact match)
    - followers never contains the user itself
    - picture is never null: falls back to the configured default image

Design Decisions:
    - Relations use lazy="raise": a relation is readable only if the fetch named it
    - display_name is computed, not stored
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.config import get_settings
from socialnet.db.base import Base, KeyedEntity
from socialnet.models.associations import post_likes, user_follows


def _default_picture() -> str:
    return get_settings().default_user_image


class User(KeyedEntity, Base):
    """User entity — owns posts, likes and follow edges."""
    __tablename__ = "users"
    __key_field__ = "user_id"

    DEFAULT_RELATIONS = ("followers", "following", "liked_posts")

    user_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    username: Mapped[str] = mapped_column(
        String(40), nullable=False, unique=True,
    )
    chosen_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    phone_number: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True,
    )
    email_address: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True,
    )
    picture: Mapped[str] = mapped_column(
        String(2048), nullable=False, default=_default_picture,
    )
    banner: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    bio: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Relationships
    followers: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_follows,
        primaryjoin=lambda: User.user_id == user_follows.c.following_id,
        secondaryjoin=lambda: User.user_id == user_follows.c.follower_id,
        back_populates="following",
        lazy="raise",
    )
    following: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_follows,
        primaryjoin=lambda: User.user_id == user_follows.c.follower_id,
        secondaryjoin=lambda: User.user_id == user_follows.c.following_id,
        back_populates="followers",
        lazy="raise",
    )
    liked_posts: Mapped[list["Post"]] = relationship(
        "Post",
        secondary=post_likes,
        back_populates="likes",
        lazy="raise",
    )

    @property
    def display_name(self) -> str:
        return self.chosen_name or self.username
