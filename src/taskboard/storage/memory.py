"""In-memory document storage implementation for testing and development.

WARNING: This implementation stores data in memory only. All data is lost
when the process restarts. Use ONLY for testing and development.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from taskboard.core.exceptions import DuplicateKeyError, EntityNotFoundError
from taskboard.core.types import EntityKind
from taskboard.query.builder import sort_documents
from taskboard.query.predicates import matches
from taskboard.storage.document_store import DocumentStore, unique_values

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from taskboard.query.builder import SortKey
    from taskboard.query.predicates import Predicate

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """In-memory document storage for testing and development.

    Documents live in one dict per entity kind, keyed by id, in insertion
    order.  Every read returns deep copies, so callers can never mutate
    stored state.  No operation awaits mid-mutation, which makes each
    single-document write atomic within the event loop.

    DO NOT USE IN PRODUCTION - all data is lost on restart!

    Example:
        ```python
        store = InMemoryDocumentStore()
        await store.insert("tasks", {"id": "t1", "title": "Write docs"})
        docs = await store.find_many("tasks")

        # Cleanup (for testing)
        store.clear()
        ```
    """

    def __init__(self) -> None:
        self._collections: dict[EntityKind, dict[str, dict[str, Any]]] = {
            kind: {} for kind in EntityKind
        }
        logger.info("Initialized in-memory document store")

    def _collection(self, kind: EntityKind | str) -> dict[str, dict[str, Any]]:
        return self._collections[EntityKind(kind)]

    def _get(self, kind: EntityKind | str, entity_id: str) -> dict[str, Any]:
        try:
            return self._collection(kind)[entity_id]
        except KeyError:
            logger.warning("%s not found: %s", EntityKind(kind).value, entity_id)
            raise EntityNotFoundError(EntityKind(kind).value, entity_id) from None

    def _check_unique(
        self,
        kind: EntityKind,
        document: Mapping[str, Any],
        exclude_id: str | None = None,
    ) -> None:
        for field, value in unique_values(kind, document).items():
            for other_id, other in self._collections[kind].items():
                if other_id != exclude_id and other.get(field) == value:
                    logger.warning("Duplicate %s.%s: %s", kind.value, field, value)
                    raise DuplicateKeyError(kind.value, field, value)

    async def find_many(
        self,
        kind: EntityKind | str,
        predicate: Predicate | None = None,
        sort: Iterable[SortKey] = (),
    ) -> list[dict[str, Any]]:
        found = [
            copy.deepcopy(document)
            for document in self._collection(kind).values()
            if matches(predicate, document)
        ]
        logger.debug("Found %d %s", len(found), EntityKind(kind).value)
        return sort_documents(found, sort)

    async def find_by_id(self, kind: EntityKind | str, entity_id: str) -> dict[str, Any]:
        return copy.deepcopy(self._get(kind, entity_id))

    async def insert(self, kind: EntityKind | str, document: Mapping[str, Any]) -> dict[str, Any]:
        kind = EntityKind(kind)
        entity_id = document["id"]
        if entity_id in self._collections[kind]:
            raise DuplicateKeyError(kind.value, "id", entity_id)
        self._check_unique(kind, document)

        self._collections[kind][entity_id] = copy.deepcopy(dict(document))
        logger.info("Inserted %s %s", kind.value, entity_id)
        return copy.deepcopy(self._collections[kind][entity_id])

    async def update_by_id(
        self,
        kind: EntityKind | str,
        entity_id: str,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        kind = EntityKind(kind)
        merged = {**self._get(kind, entity_id), **copy.deepcopy(dict(changes)), "id": entity_id}
        self._check_unique(kind, merged, exclude_id=entity_id)

        self._collections[kind][entity_id] = merged
        logger.info("Updated %s %s", kind.value, entity_id)
        return copy.deepcopy(merged)

    async def delete_by_id(self, kind: EntityKind | str, entity_id: str) -> None:
        kind = EntityKind(kind)
        self._get(kind, entity_id)
        del self._collections[kind][entity_id]
        logger.info("Deleted %s %s", kind.value, entity_id)

    async def distinct(self, kind: EntityKind | str, field: str) -> list[Any]:
        values: list[Any] = []
        for document in self._collection(kind).values():
            value = document.get(field)
            if value is not None and value not in values:
                values.append(value)
        return values

    async def count(self, kind: EntityKind | str, predicate: Predicate | None = None) -> int:
        return sum(1 for document in self._collection(kind).values() if matches(predicate, document))

    def clear(self) -> None:
        """Drop every document (useful between tests)."""
        for collection in self._collections.values():
            collection.clear()
        logger.info("Cleared in-memory document store")


__all__ = ["InMemoryDocumentStore"]
