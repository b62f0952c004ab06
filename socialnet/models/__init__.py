"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py) and KeyedEntity
    - Every model is registered in the KeyRegistry before any query runs

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
    - Explicit registration list over auto-discovery
"""

from socialnet.db.key_registry import KeyRegistry
from socialnet.models.associations import post_likes, user_follows  # noqa: F401
from socialnet.models.user import User  # noqa: F401
from socialnet.models.post import Post  # noqa: F401
from socialnet.models.login_session import LoginSession  # noqa: F401

ENTITY_TYPES = (User, Post, LoginSession)


def build_key_registry() -> KeyRegistry:
    """Register every entity type; raises KeyRegistrationError on misconfiguration."""
    registry = KeyRegistry()
    for entity_type in ENTITY_TYPES:
        registry.register(entity_type)
    return registry
