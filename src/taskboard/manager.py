"""Central taskboard manager — storage lifecycle and repository wiring.

Design decisions
----------------
* ``TaskboardManager.__init__`` performs **no** I/O.  The storage backend is
  built and initialised in :meth:`initialize`, so the manager can be
  constructed (and configured with a custom store) in tests without a
  database.
* Repositories receive the store handle explicitly; nothing in taskboard
  holds a global connection.
* **create_lifespan** is the recommended, one-call integration::

      app = FastAPI(lifespan=TaskboardManager.create_lifespan(config))
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from taskboard.core.config import StorageBackend
from taskboard.core.types import EntityKind
from taskboard.repositories import ProjectRepository, TaskRepository, UserRepository

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI
    from starlette.types import Lifespan

    from taskboard.core.config import TaskboardConfig
    from taskboard.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


class TaskboardManager:
    """Owns the document store and the repositories built on it.

    Lifecycle
    ---------
    1. **Construct**: stores configuration and overrides — no I/O.
    2. **initialize()**: builds the store, creates tables, wires repositories.
    3. **shutdown()**: disposes engines.

    Parameters
    ----------
    config:
        Validated :class:`~taskboard.core.config.TaskboardConfig`.
    store:
        Override the store selected by ``config.storage_backend``.
        Useful for testing with :class:`~taskboard.storage.memory.InMemoryDocumentStore`.
    """

    def __init__(
        self,
        config: TaskboardConfig,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self.config = config
        self._initialized = False
        self._custom_store = store

        # These are set during initialize()
        self.store: DocumentStore
        self.tasks: TaskRepository
        self.projects: ProjectRepository
        self.users: UserRepository

        logger.info("TaskboardManager created backend=%s", config.storage_backend.value)

    async def initialize(self) -> None:
        """Initialise storage and repositories.

        Safe to call multiple times — subsequent calls are no-ops.
        """
        if self._initialized:
            return

        logger.info("TaskboardManager initialising …")
        self._initialize_storage()
        await self.store.initialize()
        self._initialize_repositories()
        self._initialized = True
        logger.info("TaskboardManager initialised")

    async def shutdown(self) -> None:
        """Release storage resources."""
        if not self._initialized:
            return
        logger.info("TaskboardManager shutting down …")
        await self.store.close()
        self._initialized = False
        logger.info("TaskboardManager shutdown complete")

    async def __aenter__(self) -> TaskboardManager:
        """Support ``async with TaskboardManager(config) as m:`` in tests."""
        await self.initialize()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.shutdown()

    @staticmethod
    def create_lifespan(
        config: TaskboardConfig,
        *,
        store: DocumentStore | None = None,
    ) -> Lifespan[FastAPI]:
        """Build a FastAPI ``lifespan`` context manager that manages a
        :class:`TaskboardManager`.

        The lifespan callable:

        1. Creates the :class:`TaskboardManager`.
        2. Registers it on ``app.state`` so dependencies can reach it.
        3. Calls ``manager.initialize()``.
        4. Yields (application serves requests).
        5. Calls ``manager.shutdown()`` on teardown.
        """

        @asynccontextmanager
        async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
            manager = TaskboardManager(config, store=store)
            app.state.taskboard_manager = manager
            app.state.taskboard_config = config

            await manager.initialize()
            try:
                yield
            finally:
                await manager.shutdown()

        return _lifespan

    def _initialize_storage(self) -> None:
        if self._custom_store is not None:
            self.store = self._custom_store
        elif self.config.storage_backend == StorageBackend.MEMORY:
            from taskboard.storage.memory import InMemoryDocumentStore

            self.store = InMemoryDocumentStore()
        else:
            from taskboard.storage.sql import SQLAlchemyDocumentStore

            self.store = SQLAlchemyDocumentStore(
                database_url=self.config.database_url,
                pool_size=self.config.database_pool_size,
                max_overflow=self.config.database_max_overflow,
                echo=self.config.database_echo,
            )

    def _initialize_repositories(self) -> None:
        revalidate = self.config.revalidate_due_date_on_save
        self.tasks = TaskRepository(self.store, revalidate_due_date=revalidate)
        self.projects = ProjectRepository(self.store, revalidate_due_date=revalidate)
        self.users = UserRepository(self.store, revalidate_due_date=revalidate)

    async def health_check(self) -> dict[str, Any]:
        """Return health information for the document store."""
        health: dict[str, Any] = {"status": "healthy", "components": {}}
        try:
            reachable = await self.store.ping()
        except Exception as exc:
            reachable = False
            logger.warning("Health check failed: %s", exc)
        health["components"]["document_store"] = {
            "status": "healthy" if reachable else "unhealthy",
        }
        if not reachable:
            health["status"] = "unhealthy"
        return health

    async def get_metrics(self) -> dict[str, Any]:
        """Return document counts per entity kind."""
        metrics: dict[str, Any] = {
            kind.value: await self.store.count(kind) for kind in EntityKind
        }
        return {
            **metrics,
            "storage_backend": self.config.storage_backend.value,
            "initialized": self._initialized,
        }


__all__ = ["TaskboardManager"]
