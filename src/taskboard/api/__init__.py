"""FastAPI application wiring.

Example:
    ```python
    from taskboard.api import create_app
    from taskboard.core.config import TaskboardConfig

    app = create_app(TaskboardConfig())
    # uvicorn module:app
    ```
"""
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, FastAPI

from taskboard.api import projects, tasks, users
from taskboard.api.errors import register_exception_handlers
from taskboard.core.config import TaskboardConfig
from taskboard.dependencies import ManagerDep
from taskboard.manager import TaskboardManager

if TYPE_CHECKING:
    from taskboard.storage.document_store import DocumentStore

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health(manager: ManagerDep) -> dict[str, Any]:
    report = await manager.health_check()
    connected = report["components"]["document_store"]["status"] == "healthy"
    return {
        "status": "Server is running",
        "timestamp": datetime.now(UTC).isoformat(),
        "database": "connected" if connected else "disconnected",
    }


def create_app(
    config: TaskboardConfig | None = None,
    *,
    store: DocumentStore | None = None,
) -> FastAPI:
    """Build the taskboard application with routers under ``config.api_prefix``."""
    config = config or TaskboardConfig()
    logging.getLogger("taskboard").setLevel(config.log_level)

    app = FastAPI(
        title="taskboard",
        lifespan=TaskboardManager.create_lifespan(config, store=store),
    )
    register_exception_handlers(app)
    for router in (tasks.router, projects.router, users.router, health_router):
        app.include_router(router, prefix=config.api_prefix)
    return app


__all__ = ["create_app", "health_router"]
