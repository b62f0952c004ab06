"""Attach-or-Insert Coordinator — persists a new entity alongside the entities it references.

Invariants:
    - The new entity is always inserted and must be unpersisted (no store-issued identity)
    - A persisted reference is attached by key, never re-inserted and never written
    - An unpersisted reference is inserted
    - An unpersisted reference whose key already names a stored row raises AttachConflictError
      before anything is added to the unit of work
    - Everything commits together in the caller's unit of work

Design Decisions:
    - Persisted references are re-loaded into the unit of work by key and the new graph's
      relations are re-pointed at those instances: the caller's detached copies (which may
      carry local, uncommitted mutations) are never added to a session
    - Autoflush disabled while the graph is prepared: nothing is written before the
      collision checks have passed
"""

import logging
from typing import Any, Iterable

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.errors import AttachConflictError, ResourceNotFoundError
from socialnet.db.key_registry import KeyRegistry
from socialnet.db.relations import is_persisted

logger = logging.getLogger(__name__)

_Attached = dict[tuple[type, Any], Any]


class AttachOrInsertCoordinator:
    """Prepares and adds an object graph to one unit of work."""

    def __init__(self, registry: KeyRegistry):
        self._registry = registry

    async def persist(
        self, uow: AsyncSession, new_entity: Any, references: Iterable[Any] = (),
    ) -> None:
        if is_persisted(new_entity):
            raise ValueError(
                f"{type(new_entity).__name__} is already persisted; "
                "mutate it through apply_change instead",
            )
        refs = [r for r in references if r is not None and r is not new_entity]
        attached: _Attached = {}
        visited: set[int] = set()
        inserts = [new_entity]

        with uow.no_autoflush:
            for ref in refs:
                if is_persisted(ref):
                    await self._attach(uow, ref, attached)
                else:
                    inserts.append(ref)
            for obj in inserts:
                await self._prepare_unpersisted(uow, obj, attached, visited)

        for obj in inserts:
            uow.add(obj)
        await uow.flush()
        logger.info(
            f"Inserted {type(new_entity).__name__} "
            f"({len(inserts) - 1} new, {len(attached)} attached references)",
            extra={
                "entity_type": type(new_entity).__name__,
                "entity_key": self._registry.key_of(new_entity),
            },
        )

    async def _attach(self, uow: AsyncSession, ref: Any, attached: _Attached) -> Any:
        entity_type = type(ref)
        key = self._registry.key_of(ref)
        slot = (entity_type, key)
        if slot not in attached:
            instance = await uow.get(entity_type, key)
            if instance is None:
                raise ResourceNotFoundError(entity_type.__name__, str(key))
            attached[slot] = instance
        return attached[slot]

    async def _reject_key_collision(self, uow: AsyncSession, obj: Any) -> None:
        entity_type = type(obj)
        if entity_type not in self._registry:
            return
        key = self._registry.key_of(obj)
        if key is None:
            return
        if await uow.get(entity_type, key) is not None:
            logger.warning(
                "Rejected unpersisted entity carrying an existing key",
                extra={"entity_type": entity_type.__name__, "entity_key": key},
            )
            raise AttachConflictError(entity_type.__name__, str(key))

    async def _resolve(
        self, uow: AsyncSession, item: Any, attached: _Attached, visited: set[int],
    ) -> Any:
        if is_persisted(item):
            return await self._attach(uow, item, attached)
        await self._prepare_unpersisted(uow, item, attached, visited)
        return item

    async def _prepare_unpersisted(
        self, uow: AsyncSession, obj: Any, attached: _Attached, visited: set[int],
    ) -> None:
        """Check obj's key, then re-point its set relations at unit-of-work instances."""
        if id(obj) in visited:
            return
        visited.add(id(obj))
        await self._reject_key_collision(uow, obj)

        state = sa_inspect(obj)
        for rel in state.mapper.relationships:
            value = state.dict.get(rel.key)
            if value is None:
                continue
            if rel.uselist:
                items = list(value)
                resolved = [
                    await self._resolve(uow, item, attached, visited) for item in items
                ]
                if any(a is not b for a, b in zip(items, resolved)):
                    setattr(obj, rel.key, resolved)
            else:
                resolved = await self._resolve(uow, value, attached, visited)
                if resolved is not value:
                    setattr(obj, rel.key, resolved)
