"""SQLAlchemy Declarative Base — shared base class and key capability for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Every model also inherits KeyedEntity and names its sole key field in __key_field__

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Key field declared as a class attribute, checked once at startup by KeyRegistry
      (no per-call reflection over the mapper)
"""

from typing import Any, ClassVar

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all socialnet ORM models."""
    pass


class KeyedEntity:
    """Capability mixin: an entity with exactly one key field."""

    __key_field__: ClassVar[str]

    # Relations a full view of the entity needs (names or dotted paths)
    DEFAULT_RELATIONS: ClassVar[tuple[str, ...]] = ()

    @property
    def key(self) -> Any:
        return getattr(self, type(self).__key_field__)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {type(self).__key_field__}={self.key!r}>"
