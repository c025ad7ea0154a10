"""Abstract document storage interface.

Repositories talk to storage only through :class:`DocumentStore`, so backends
can be swapped without touching validation or query code.  Documents are the
JSON-mode dicts produced by :meth:`taskboard.core.types.Entity.to_document`
and always carry an ``id`` key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from taskboard.core.exceptions import EntityNotFoundError
from taskboard.core.types import EntityKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from taskboard.query.builder import SortKey
    from taskboard.query.predicates import Predicate

#: Unique indexes every backend enforces.
UNIQUE_KEYS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.USERS: ("email",),
}


class DocumentStore(ABC):
    """Abstract base class for document storage implementations.

    Implementations:
    - SQLAlchemyDocumentStore: persistent storage on any async SQLAlchemy dialect
    - InMemoryDocumentStore: testing and development

    Example:
        ```python
        store = SQLAlchemyDocumentStore("sqlite+aiosqlite:///./taskboard.db")
        await store.initialize()

        await store.insert("tasks", task.to_document())
        todo = await store.find_many("tasks", Eq("status", "todo"))
        await store.update_by_id("tasks", task.id, {"status": "review"})
        await store.delete_by_id("tasks", task.id)

        await store.close()
        ```

    Raises (every backend):
        EntityNotFoundError: an operation targets a missing id
        DuplicateKeyError: a write would violate a unique index
        StorageUnavailableError: the backend cannot be reached
    """

    async def initialize(self) -> None:  # noqa: B027
        """Prepare the backend (create tables, open pools)."""

    async def close(self) -> None:  # noqa: B027
        """Release backend resources."""

    async def ping(self) -> bool:
        """Return True when the backend answers."""
        return True

    @abstractmethod
    async def find_many(
        self,
        kind: EntityKind | str,
        predicate: Predicate | None = None,
        sort: Iterable[SortKey] = (),
    ) -> list[dict[str, Any]]:
        """Return every document of *kind* matching *predicate*, in *sort* order.

        Args:
            kind: Collection to read
            predicate: Filter; ``None`` matches everything
            sort: Sort keys, primary first; unsorted results keep insertion order
        """
        pass

    @abstractmethod
    async def find_by_id(self, kind: EntityKind | str, entity_id: str) -> dict[str, Any]:
        """Return the document with *entity_id*.

        Raises:
            EntityNotFoundError: If no such document exists
        """
        pass

    @abstractmethod
    async def insert(self, kind: EntityKind | str, document: Mapping[str, Any]) -> dict[str, Any]:
        """Store a new document and return it.

        Raises:
            DuplicateKeyError: If the id or a unique key is already taken
        """
        pass

    @abstractmethod
    async def update_by_id(
        self,
        kind: EntityKind | str,
        entity_id: str,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Merge *changes* into the stored document and return the result.

        Raises:
            EntityNotFoundError: If no such document exists
            DuplicateKeyError: If the merge would violate a unique key
        """
        pass

    @abstractmethod
    async def delete_by_id(self, kind: EntityKind | str, entity_id: str) -> None:
        """Remove a document.

        Raises:
            EntityNotFoundError: If no such document exists
        """
        pass

    @abstractmethod
    async def distinct(self, kind: EntityKind | str, field: str) -> list[Any]:
        """Return the distinct non-null values of *field* across *kind*."""
        pass

    @abstractmethod
    async def count(self, kind: EntityKind | str, predicate: Predicate | None = None) -> int:
        """Count documents of *kind* matching *predicate*."""
        pass

    async def exists(self, kind: EntityKind | str, entity_id: str) -> bool:
        """Check whether a document exists.

        Default implementation calls :meth:`find_by_id`; backends may
        override it with something cheaper.
        """
        try:
            await self.find_by_id(kind, entity_id)
        except EntityNotFoundError:
            return False
        return True


def unique_values(kind: EntityKind, document: Mapping[str, Any]) -> dict[str, Any]:
    """Return the unique-key values *document* carries, skipping unset ones."""
    return {
        field: document[field]
        for field in UNIQUE_KEYS.get(kind, ())
        if document.get(field) is not None
    }


__all__ = ["UNIQUE_KEYS", "DocumentStore", "unique_values"]
