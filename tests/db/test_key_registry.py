"""Key Registry — verifies startup validation and key-based equality helpers.

Tests:
    - All socialnet models register
    - Missing key field, composite key, wrong key field and unmapped types are rejected
    - same_key compares family + key only; unsaved entities never match
    - contains_key / remove_by_key work across distinct objects of one row
"""

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from socialnet.core.errors import KeyRegistrationError
from socialnet.db.key_registry import KeyRegistry
from socialnet.models import ENTITY_TYPES, Post, User, build_key_registry


class _OtherBase(DeclarativeBase):
    pass


class _NoKeyField(_OtherBase):
    __tablename__ = "no_key_field"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class _CompositeKey(_OtherBase):
    __tablename__ = "composite_key"
    __key_field__ = "a"
    a: Mapped[int] = mapped_column(Integer, primary_key=True)
    b: Mapped[int] = mapped_column(Integer, primary_key=True)


class _WrongKeyField(_OtherBase):
    __tablename__ = "wrong_key_field"
    __key_field__ = "name"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(10))


class _Unmapped:
    __key_field__ = "id"


def test_all_models_register():
    registry = build_key_registry()
    for entity_type in ENTITY_TYPES:
        assert entity_type in registry
    assert registry.descriptor(User).field_name == "user_id"
    assert registry.descriptor(Post).field_name == "post_id"


@pytest.mark.parametrize(
    "entity_type", [_NoKeyField, _CompositeKey, _WrongKeyField, _Unmapped],
)
def test_misconfigured_types_rejected(entity_type):
    with pytest.raises(KeyRegistrationError):
        KeyRegistry().register(entity_type)


def test_unregistered_type_lookup_raises():
    with pytest.raises(KeyRegistrationError):
        KeyRegistry().descriptor(User)


def test_same_key_compares_family_and_key():
    registry = build_key_registry()
    assert registry.same_key(User(user_id=1), User(user_id=1))
    assert not registry.same_key(User(user_id=1), User(user_id=2))
    assert not registry.same_key(User(user_id=1), Post(post_id=1))


def test_unsaved_entities_never_share_a_key():
    registry = build_key_registry()
    assert not registry.same_key(User(), User())
    assert not registry.same_key(User(user_id=1), None)


def test_collection_helpers_match_by_key():
    registry = build_key_registry()
    items = [User(user_id=1), User(user_id=2)]

    assert registry.contains_key(items, User(user_id=2))
    assert registry.remove_by_key(items, User(user_id=1))
    assert [u.user_id for u in items] == [2]
    assert not registry.remove_by_key(items, User(user_id=1))


def test_key_predicate_targets_key_column():
    registry = build_key_registry()
    predicate = registry.key_predicate(User, 5)
    assert predicate.left.key == "user_id"
