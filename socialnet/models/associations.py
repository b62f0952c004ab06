"""Association Tables — follow graph and post likes.

Invariants:
    - (follower_id, following_id) and (post_id, user_id) are composite primary keys: no duplicate edges
    - A user never follows themselves (CHECK constraint)
    - Edges disappear with either endpoint (ON DELETE CASCADE)
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Table

from socialnet.db.base import Base


user_follows = Table(
    "user_follows",
    Base.metadata,
    Column(
        "follower_id", Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "following_id", Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True,
    ),
    CheckConstraint(
        "follower_id <> following_id", name="ck_user_follows_cannot_follow_self",
    ),
)

post_likes = Table(
    "post_likes",
    Base.metadata,
    Column(
        "post_id", Integer,
        ForeignKey("posts.post_id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "user_id", Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True,
    ),
)
