"""Initial schema — users, posts, login_sessions, user_follows, post_likes.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(40), nullable=False, unique=True),
        sa.Column("chosen_name", sa.String(50), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("email_address", sa.String(255), nullable=False),
        sa.Column("picture", sa.String(2048), nullable=False),
        sa.Column("banner", sa.String(2048), nullable=True),
        sa.Column("bio", sa.String(1000), nullable=True),
    )
    op.create_index("ix_users_phone_number", "users", ["phone_number"])
    op.create_index("ix_users_email_address", "users", ["email_address"])

    op.create_table(
        "posts",
        sa.Column("post_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("content_location", sa.String(2048), nullable=True),
        sa.Column("content_type", sa.String(100), nullable=True),
        sa.Column("text", sa.String(5000), nullable=True),
        sa.Column(
            "parent_id", sa.Integer,
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column(
            "author_id", sa.Integer,
            sa.ForeignKey("users.user_id"), nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "NOT (content_location IS NULL AND text IS NULL)",
            name="ck_post_declares_media_or_text",
        ),
        sa.CheckConstraint(
            "NOT (content_location IS NOT NULL AND content_type IS NULL)",
            name="ck_post_media_declares_content_type",
        ),
    )
    op.create_index("ix_posts_parent_id", "posts", ["parent_id"])
    op.create_index("ix_posts_author_id", "posts", ["author_id"])

    op.create_table(
        "login_sessions",
        sa.Column("session_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("request_id", sa.Uuid, nullable=False, unique=True),
        sa.Column("secret_hash", sa.LargeBinary(32), nullable=False),
        sa.Column("secret_entropy", sa.Uuid, nullable=False),
        sa.Column("bearer_token", sa.Uuid, nullable=False, unique=True),
        sa.Column("validated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "owner_id", sa.Integer,
            sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "length(secret_hash) = 32", name="ck_login_session_digest_size",
        ),
    )
    op.create_index("ix_login_sessions_owner_id", "login_sessions", ["owner_id"])

    op.create_table(
        "user_follows",
        sa.Column(
            "follower_id", sa.Integer,
            sa.ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "following_id", sa.Integer,
            sa.ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.CheckConstraint(
            "follower_id <> following_id", name="ck_user_follows_cannot_follow_self",
        ),
    )

    op.create_table(
        "post_likes",
        sa.Column(
            "post_id", sa.Integer,
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("post_likes")
    op.drop_table("user_follows")
    op.drop_index("ix_login_sessions_owner_id", table_name="login_sessions")
    op.drop_table("login_sessions")
    op.drop_index("ix_posts_author_id", table_name="posts")
    op.drop_index("ix_posts_parent_id", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_users_email_address", table_name="users")
    op.drop_index("ix_users_phone_number", table_name="users")
    op.drop_table("users")
