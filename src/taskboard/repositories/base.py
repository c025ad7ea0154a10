"""Repository façade shared by every entity kind.

A repository is the only write path: ``create`` and ``update`` run the
validation engine, then the kind's lifecycle hook, and only then touch the
store.  A write that fails validation never reaches storage.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from taskboard.core.types import Entity, EntityKind, utcnow
from taskboard.core.validation import validate_entity
from taskboard.query.builder import Query, build_filter

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from taskboard.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=Entity)


class Repository(Generic[EntityT]):
    """CRUD and filtered listing for one entity kind.

    Parameters
    ----------
    store:
        Storage handle; injected so tests can pass an
        :class:`~taskboard.storage.memory.InMemoryDocumentStore`.
    revalidate_due_date:
        Check ``Task.due_date`` against "now" on every write, not only
        writes that set it.
    """

    kind: ClassVar[EntityKind]
    model: ClassVar[type[Entity]]

    def __init__(self, store: DocumentStore, *, revalidate_due_date: bool = False) -> None:
        self.store = store
        self.revalidate_due_date = revalidate_due_date

    def _load(self, document: Mapping[str, Any], **extra: Any) -> EntityT:
        return self.model.model_validate({**document, **extra})  # type: ignore[return-value]

    async def _find(self, query: Query) -> list[EntityT]:
        documents = await self.store.find_many(self.kind, query.predicate, query.sort)
        return [self._load(document) for document in documents]

    async def _get(self, entity_id: str) -> EntityT:
        return self._load(await self.store.find_by_id(self.kind, entity_id))

    def _validate(
        self,
        fields: Mapping[str, Any],
        existing: EntityT | None,
        now: datetime,
    ) -> EntityT:
        return validate_entity(  # type: ignore[return-value]
            self.kind,
            fields,
            existing,
            now=now,
            revalidate_due_date=self.revalidate_due_date,
        )

    def _before_write(self, existing: EntityT | None, entity: EntityT, now: datetime) -> EntityT:
        """Hook for lifecycle rules; runs after validation, before storage."""
        return entity

    async def _persist(self, entity_id: str, entity: EntityT) -> EntityT:
        document = await self.store.update_by_id(self.kind, entity_id, entity.to_document())
        return self._load(document)

    async def list(self, params: Mapping[str, Any] | None = None) -> list[EntityT]:
        """Filtered, sorted listing from request parameters."""
        return await self._find(build_filter(self.kind, params))

    async def get_by_id(self, entity_id: str) -> EntityT:
        """Return one entity.

        Raises:
            EntityNotFoundError: If the id does not exist
        """
        return await self._get(entity_id)

    async def create(self, fields: Mapping[str, Any]) -> EntityT:
        """Validate and store a new entity.

        Raises:
            EntityValidationError: If any constraint is violated
            DuplicateKeyError: If a unique key is already taken
        """
        now = utcnow()
        entity = self._before_write(None, self._validate(fields, None, now), now)
        document = await self.store.insert(self.kind, entity.to_document())
        logger.info("Created %s %s", self.kind.value, entity.id)
        return self._load(document)

    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT:
        """Apply a partial update and return the post-write entity.

        Raises:
            EntityNotFoundError: If the id does not exist
            EntityValidationError: If the merged entity violates a constraint
            DuplicateKeyError: If the update takes a unique key already in use
        """
        existing = await self._get(entity_id)
        now = utcnow()
        entity = self._before_write(existing, self._validate(fields, existing, now), now)
        updated = await self._persist(entity_id, entity)
        logger.info("Updated %s %s", self.kind.value, entity_id)
        return updated

    async def delete(self, entity_id: str) -> None:
        """Remove an entity.

        Raises:
            EntityNotFoundError: If the id does not exist
        """
        await self.store.delete_by_id(self.kind, entity_id)
        logger.info("Deleted %s %s", self.kind.value, entity_id)


__all__ = ["Repository"]
