"""LoginSession ORM — a magic-link login request and, once validated, an authenticated session.

Invariants:
    - session_id is the sole key (integer identity)
    - request_id and bearer_token are unique
    - secret_hash is exactly DIGEST_SIZE bytes (CHECK)
    - validated only ever goes False -> True
    - bearer_token authenticates only while validated is True

Design Decisions:
    - Only the digest and its entropy are stored: the secret lives in the delivered link
    - No expiry column: sessions are never expired or deleted by this core
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, ForeignKey, Integer, LargeBinary, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.core.domain_types import SessionState
from socialnet.core.login_digest import DIGEST_SIZE
from socialnet.db.base import Base, KeyedEntity


class LoginSession(KeyedEntity, Base):
    """Login session — Pending until the emailed secret is presented, then Validated."""
    __tablename__ = "login_sessions"
    __key_field__ = "session_id"
    __table_args__ = (
        CheckConstraint(
            f"length(secret_hash) = {DIGEST_SIZE}",
            name="ck_login_session_digest_size",
        ),
    )

    DEFAULT_RELATIONS = ("owner",)

    session_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    request_id: Mapped[UUID] = mapped_column(
        Uuid, nullable=False, unique=True,
    )
    secret_hash: Mapped[bytes] = mapped_column(
        LargeBinary(DIGEST_SIZE), nullable=False,
    )
    secret_entropy: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    bearer_token: Mapped[UUID] = mapped_column(
        Uuid, nullable=False, unique=True,
    )
    validated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship("User", lazy="raise")

    @property
    def state(self) -> SessionState:
        return SessionState.from_flag(self.validated)
