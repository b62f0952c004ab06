"""Relation Loading & Entity State — named-relation eager loading and persisted-state checks.

Invariants:
    - A relation reference is a relationship name or a dotted path ("owner.followers")
    - Unknown relation names fail loudly (ValueError), never silently skipped
    - is_persisted is True exactly when the instance carries an identity issued by the store

Design Decisions:
    - selectinload for every hop: one extra SELECT per relation, no row explosion on collections
    - Persisted state read from SQLAlchemy's instance state instead of a hand-kept flag
"""

from typing import Any, Iterable

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import selectinload

RelationRef = str


def relation_loaders(entity_type: type, relations: Iterable[RelationRef]) -> list:
    """Translate relation references into loader options for a select() on entity_type."""
    options = []
    for path in relations:
        current_type = entity_type
        loader = None
        for name in path.split("."):
            prop = sa_inspect(current_type).relationships.get(name)
            if prop is None:
                raise ValueError(
                    f"{current_type.__name__} has no relation '{name}' (in '{path}')",
                )
            attr = getattr(current_type, name)
            loader = selectinload(attr) if loader is None else loader.selectinload(attr)
            current_type = prop.mapper.class_
        if loader is not None:
            options.append(loader)
    return options


def is_persisted(entity: Any) -> bool:
    """True for persistent/detached instances, False for transient/pending ones."""
    return sa_inspect(entity).has_identity


def is_loaded(entity: Any, attribute: str) -> bool:
    return attribute not in sa_inspect(entity).unloaded
