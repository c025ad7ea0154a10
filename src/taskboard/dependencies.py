"""FastAPI dependency-injection helpers for taskboard routes."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from taskboard.manager import TaskboardManager
from taskboard.repositories import ProjectRepository, TaskRepository, UserRepository


def get_manager(request: Request) -> TaskboardManager:
    """Return the :class:`TaskboardManager` registered by the lifespan."""
    manager = getattr(request.app.state, "taskboard_manager", None)
    if manager is None:
        raise RuntimeError(
            "taskboard_manager not found on app.state. "
            "Did you forget to use TaskboardManager.create_lifespan()?"
        )
    return manager


ManagerDep = Annotated[TaskboardManager, Depends(get_manager)]


def get_task_repository(manager: ManagerDep) -> TaskRepository:
    return manager.tasks


def get_project_repository(manager: ManagerDep) -> ProjectRepository:
    return manager.projects


def get_user_repository(manager: ManagerDep) -> UserRepository:
    return manager.users


TaskRepositoryDep = Annotated[TaskRepository, Depends(get_task_repository)]
ProjectRepositoryDep = Annotated[ProjectRepository, Depends(get_project_repository)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]


__all__ = [
    "ManagerDep",
    "ProjectRepositoryDep",
    "TaskRepositoryDep",
    "UserRepositoryDep",
    "get_manager",
    "get_project_repository",
    "get_task_repository",
    "get_user_repository",
]
