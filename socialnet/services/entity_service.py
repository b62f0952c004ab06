"""Entity Access Service — generic keyed fetch, insert, delete and dual-fetch mutation.

Invariants:
    - Every operation opens its own unit of work and releases it before returning
    - Absence is None, never an exception
    - apply_change*: the precondition sees a fresh copy fetched in a new unit of work;
      false => nothing persisted and the caller's copy untouched
    - apply_change*: on success the mutation lands on the fresh copy (committed) and on the
      caller's copy, so the caller's view and the store converge
    - Store failures surface as DatabaseError (mapped by the unit of work)

Design Decisions:
    - Generic over entity type E and key type K; key predicate built by the KeyRegistry
    - The caller's copy is mutated only after the commit succeeded: a failed commit leaves
      it as it was
    - No version column: two concurrent apply_change calls on one entity are last-writer-wins
"""

import logging
from typing import Any, Callable, Generic, Hashable, Iterable, Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.errors import KeyRegistrationError, ResourceNotFoundError
from socialnet.db.base import KeyedEntity
from socialnet.db.key_registry import KeyRegistry
from socialnet.db.relations import RelationRef, relation_loaders
from socialnet.infrastructure.database import DatabaseSessionManager
from socialnet.services.attach_coordinator import AttachOrInsertCoordinator

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=KeyedEntity)
F = TypeVar("F", bound=KeyedEntity)
K = TypeVar("K", bound=Hashable)


class EntityService(Generic[E, K]):
    """Keyed access to one entity type through short-lived units of work."""

    def __init__(
        self,
        entity_type: type[E],
        db: DatabaseSessionManager,
        registry: KeyRegistry,
    ):
        if entity_type not in registry:
            raise KeyRegistrationError(
                entity_type.__name__, "entity type was never registered",
            )
        self.entity_type = entity_type
        self._db = db
        self._registry = registry
        self._coordinator = AttachOrInsertCoordinator(registry)

    @property
    def registry(self) -> KeyRegistry:
        return self._registry

    # ─── Reads ──────────────────────────────────────────────────

    async def find(self, key: K) -> E | None:
        """Resolve an entity by key, without relations."""
        async with self._db.unit_of_work() as uow:
            return await uow.get(self.entity_type, key)

    async def fetch(
        self, key: K, relations: Iterable[RelationRef] = (),
    ) -> E | None:
        """Resolve an entity by key with the named relations eagerly loaded."""
        async with self._db.unit_of_work() as uow:
            return await self._fetch_in(uow, self.entity_type, key, relations)

    async def first_where(
        self, *criteria, relations: Iterable[RelationRef] = (),
    ) -> E | None:
        async with self._db.unit_of_work() as uow:
            stmt = (
                select(self.entity_type)
                .where(*criteria)
                .options(*relation_loaders(self.entity_type, relations))
                .limit(1)
            )
            result = await uow.execute(stmt)
            return result.scalars().first()

    async def list_where(
        self,
        *criteria,
        relations: Iterable[RelationRef] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[E]:
        async with self._db.unit_of_work() as uow:
            stmt = (
                select(self.entity_type)
                .where(*criteria)
                .options(*relation_loaders(self.entity_type, relations))
                .order_by(*order_by)
                .offset(offset)
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            result = await uow.execute(stmt)
            return list(result.scalars().all())

    async def _fetch_in(
        self,
        uow: AsyncSession,
        entity_type: type,
        key: Any,
        relations: Iterable[RelationRef],
    ) -> Any:
        stmt = (
            select(entity_type)
            .where(self._registry.key_predicate(entity_type, key))
            .options(*relation_loaders(entity_type, relations))
            .limit(1)
        )
        result = await uow.execute(stmt)
        return result.scalars().first()

    async def _fetch_fresh(
        self, uow: AsyncSession, current: Any, relations: Iterable[RelationRef],
    ) -> Any:
        entity_type = type(current)
        key = self._registry.key_of(current)
        fresh = await self._fetch_in(uow, entity_type, key, relations)
        if fresh is None:
            raise ResourceNotFoundError(entity_type.__name__, str(key))
        return fresh

    # ─── Mutations ──────────────────────────────────────────────

    async def apply_change(
        self,
        current: E,
        mutate: Callable[[E], None],
        precondition: Callable[[E], bool] | None = None,
        relations: Iterable[RelationRef] = (),
    ) -> bool:
        """Mutate a fresh copy of `current` and `current` itself. Returns whether it applied.

        `relations` names what mutate and precondition read on the fresh copy; the
        caller's copy must already hold the same relations.
        """
        async with self._db.unit_of_work() as uow:
            fresh = await self._fetch_fresh(uow, current, relations)
            if precondition is not None and not precondition(fresh):
                self._log_skipped(fresh)
                return False
            mutate(fresh)
            await uow.commit()

        mutate(current)
        self._log_applied(current)
        return True

    async def apply_change_many(
        self,
        current: E,
        other: F,
        mutate: Callable[[E, F], None],
        precondition: Callable[[E, F], bool] | None = None,
        relations: Iterable[RelationRef] = (),
        other_relations: Iterable[RelationRef] = (),
    ) -> bool:
        """Pairwise apply_change: both fresh copies come from the same unit of work."""
        async with self._db.unit_of_work() as uow:
            fresh = await self._fetch_fresh(uow, current, relations)
            fresh_other = await self._fetch_fresh(uow, other, other_relations)
            if precondition is not None and not precondition(fresh, fresh_other):
                self._log_skipped(fresh)
                return False
            mutate(fresh, fresh_other)
            await uow.commit()

        mutate(current, other)
        self._log_applied(current)
        return True

    async def insert(self, entity: E) -> E:
        """Unconditional create in a fresh unit of work."""
        return await self.attach_then_insert(entity)

    async def attach_then_insert(self, entity: E, *references: Any) -> E:
        """Insert `entity`; persisted references are attached, new ones inserted."""
        async with self._db.unit_of_work() as uow:
            await self._coordinator.persist(uow, entity, references)
            await uow.commit()
        return entity

    async def delete(self, key: K) -> bool:
        """Unconditional keyed delete. Returns whether a row was removed."""
        async with self._db.unit_of_work() as uow:
            result = await uow.execute(
                delete(self.entity_type).where(
                    self._registry.key_predicate(self.entity_type, key),
                ),
            )
            removed = result.rowcount > 0
            await uow.commit()
        logger.info(
            f"Deleted {self.entity_type.__name__}" if removed
            else f"Delete matched no {self.entity_type.__name__}",
            extra={"entity_type": self.entity_type.__name__, "entity_key": key},
        )
        return removed

    # ─── Helpers ────────────────────────────────────────────────

    def _log_skipped(self, fresh: Any) -> None:
        logger.debug(
            "Precondition failed; change skipped",
            extra={
                "entity_type": type(fresh).__name__,
                "entity_key": self._registry.key_of(fresh),
                "applied": False,
            },
        )

    def _log_applied(self, current: Any) -> None:
        logger.debug(
            "Change applied",
            extra={
                "entity_type": type(current).__name__,
                "entity_key": self._registry.key_of(current),
                "applied": True,
            },
        )
