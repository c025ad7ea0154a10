"""Shared pytest fixtures for the taskboard test suite.

Design philosophy
-----------------
- All fixtures that touch I/O use SQLite in-memory or the in-memory store,
  so the suite runs without any external services.
- Fixtures are async where the SUT is async.
- Scope is kept at "function" to guarantee full isolation.
"""
from __future__ import annotations

from datetime import UTC, datetime

import pytest

from taskboard.repositories import ProjectRepository, TaskRepository, UserRepository
from taskboard.storage.memory import InMemoryDocumentStore

# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
async def sqlite_store():
    """SQLite-backed document store for integration tests."""
    from taskboard.storage.sql import SQLAlchemyDocumentStore

    store = SQLAlchemyDocumentStore(
        database_url="sqlite+aiosqlite:///:memory:",
        pool_size=1,
    )
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sqlite"])
async def any_store(request, memory_store):
    """Run a test against both storage backends."""
    if request.param == "memory":
        yield memory_store
        return

    from taskboard.storage.sql import SQLAlchemyDocumentStore

    store = SQLAlchemyDocumentStore(database_url="sqlite+aiosqlite:///:memory:")
    await store.initialize()
    yield store
    await store.close()


# ---------------------------------------------------------------------------
# Repository fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tasks(memory_store: InMemoryDocumentStore) -> TaskRepository:
    return TaskRepository(memory_store)


@pytest.fixture
def projects(memory_store: InMemoryDocumentStore) -> ProjectRepository:
    return ProjectRepository(memory_store)


@pytest.fixture
def users(memory_store: InMemoryDocumentStore) -> UserRepository:
    return UserRepository(memory_store)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_config():
    """TaskboardConfig for the in-memory backend."""
    from taskboard.core.config import TaskboardConfig
    return TaskboardConfig(storage_backend="memory")


@pytest.fixture
def sqlite_config():
    """TaskboardConfig for SQLite in-memory."""
    from taskboard.core.config import TaskboardConfig
    return TaskboardConfig(database_url="sqlite+aiosqlite:///:memory:")
