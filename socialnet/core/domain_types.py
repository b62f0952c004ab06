"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, PostId, LoginSessionId wrap int identity keys
    - RequestId and BearerToken wrap UUIDs — never compared as strings
    - Login session states encoded as an Enum — no raw bool matching outside the model

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
PostId = NewType("PostId", int)
LoginSessionId = NewType("LoginSessionId", int)

RequestId = NewType("RequestId", UUID)
BearerToken = NewType("BearerToken", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class SessionState(str, Enum):
    """Login session states. PENDING -> VALIDATED is the only transition."""
    PENDING = "pending"
    VALIDATED = "validated"

    @classmethod
    def from_flag(cls, validated: bool) -> "SessionState":
        return cls.VALIDATED if validated else cls.PENDING


class MediaKind(str, Enum):
    """How embedded post media is rendered, derived from the MIME type prefix."""
    VIDEO = "video"
    IMAGE = "image"
    OTHER = "other"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> "MediaKind | None":
        if not content_type:
            return None
        prefix = content_type.split("/", 1)[0].lower()
        if prefix == "video":
            return cls.VIDEO
        if prefix == "image":
            return cls.IMAGE
        return cls.OTHER
