"""Storage implementations for taskboard documents.

This module provides two backends behind the :class:`DocumentStore`
interface:
- SQLAlchemy: persistent storage on any async dialect (PostgreSQL, SQLite, MySQL)
- In-Memory: testing and development

Example:
    ```python
    from taskboard.storage import SQLAlchemyDocumentStore

    store = SQLAlchemyDocumentStore(database_url="sqlite+aiosqlite:///./taskboard.db")
    await store.initialize()

    # Development: In-Memory
    from taskboard.storage import InMemoryDocumentStore

    store = InMemoryDocumentStore()
    ```
"""

from taskboard.storage.document_store import UNIQUE_KEYS, DocumentStore
from taskboard.storage.memory import InMemoryDocumentStore
from taskboard.storage.sql import (
    DocumentKeyModel,
    DocumentModel,
    SQLAlchemyDocumentStore,
)

__all__ = [
    "UNIQUE_KEYS",
    "DocumentKeyModel",
    "DocumentModel",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SQLAlchemyDocumentStore",
]
