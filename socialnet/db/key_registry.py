"""Key Registry — maps each entity type to its sole key field.

Invariants:
    - A registered type has exactly one primary-key column and it is the declared __key_field__
    - Misconfigured types fail at registration (startup), never at query time
    - Key equality compares entity family + key value only; unsaved (None) keys never compare equal

Design Decisions:
    - Predicates built from the mapped column attribute: one generic code path for every type
    - Collection helpers work by key because the same row fetched in two units of work
      yields two distinct Python objects
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, MutableSequence

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstrumentedAttribute, Mapper

from socialnet.core.errors import KeyRegistrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyDescriptor:
    """Resolved key field of one entity type."""
    entity_type: type
    field_name: str
    column: InstrumentedAttribute


class KeyRegistry:
    """Typed registry of key descriptors, populated once at process start."""

    def __init__(self) -> None:
        self._descriptors: dict[type, KeyDescriptor] = {}

    def register(self, entity_type: type) -> KeyDescriptor:
        name = entity_type.__name__
        field_name = getattr(entity_type, "__key_field__", None)
        if not field_name:
            raise KeyRegistrationError(name, "no key field declared (__key_field__)")

        mapper: Mapper | None = sa_inspect(entity_type, raiseerr=False)
        if mapper is None:
            raise KeyRegistrationError(name, "not a mapped entity type")

        primary_key = mapper.primary_key
        if len(primary_key) != 1:
            raise KeyRegistrationError(
                name, f"expected exactly one key column, found {len(primary_key)}",
            )
        key_prop = mapper.get_property_by_column(primary_key[0])
        if key_prop.key != field_name:
            raise KeyRegistrationError(
                name,
                f"declared key field '{field_name}' is not the primary key "
                f"('{key_prop.key}')",
            )

        descriptor = KeyDescriptor(
            entity_type=entity_type,
            field_name=field_name,
            column=getattr(entity_type, field_name),
        )
        self._descriptors[entity_type] = descriptor
        logger.debug(
            f"Registered key {name}.{field_name}",
            extra={"entity_type": name},
        )
        return descriptor

    def __contains__(self, entity_type: type) -> bool:
        return entity_type in self._descriptors

    def descriptor(self, entity_type: type) -> KeyDescriptor:
        try:
            return self._descriptors[entity_type]
        except KeyError:
            raise KeyRegistrationError(
                entity_type.__name__, "entity type was never registered",
            ) from None

    def key_column(self, entity_type: type) -> InstrumentedAttribute:
        return self.descriptor(entity_type).column

    def key_predicate(self, entity_type: type, value: Any):
        """SQL expression `entity.key == value`."""
        return self.key_column(entity_type) == value

    def key_of(self, entity: Any) -> Any:
        return getattr(entity, self.descriptor(type(entity)).field_name)

    def same_key(self, a: Any, b: Any) -> bool:
        if a is None or b is None:
            return False
        if a is b:
            return True
        if type(a) is not type(b):
            return False
        key_a = self.key_of(a)
        return key_a is not None and key_a == self.key_of(b)

    def contains_key(self, collection: Iterable[Any], entity: Any) -> bool:
        return any(self.same_key(item, entity) for item in collection)

    def remove_by_key(self, collection: MutableSequence[Any], entity: Any) -> bool:
        """Remove the first item sharing entity's key. Returns whether one was removed."""
        for item in list(collection):
            if self.same_key(item, entity):
                collection.remove(item)
                return True
        return False
