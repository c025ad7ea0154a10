"""``/tasks`` routes."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request, status

from taskboard.core.types import Task
from taskboard.dependencies import TaskRepositoryDep

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("")
async def list_tasks(request: Request, tasks: TaskRepositoryDep) -> list[Task]:
    """Filter with ``status``, ``priority``, ``assignedTo``, ``project`` and ``search``."""
    return await tasks.list(dict(request.query_params))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(tasks: TaskRepositoryDep, payload: Any = Body(None)) -> Task:
    return await tasks.create(payload)


@router.get("/team-members")
async def team_members(tasks: TaskRepositoryDep) -> list[str]:
    return await tasks.get_team_member_roster()


@router.get("/overdue/list")
async def overdue_tasks(tasks: TaskRepositoryDep) -> list[Task]:
    return await tasks.list_overdue()


@router.get("/{task_id}")
async def get_task(task_id: str, tasks: TaskRepositoryDep) -> Task:
    return await tasks.get_by_id(task_id)


@router.put("/{task_id}")
async def update_task(task_id: str, tasks: TaskRepositoryDep, payload: Any = Body(None)) -> Task:
    return await tasks.update(task_id, payload)


@router.post("/{task_id}/complete")
async def complete_task(task_id: str, tasks: TaskRepositoryDep) -> Task:
    return await tasks.mark_completed(task_id)


@router.delete("/{task_id}")
async def delete_task(task_id: str, tasks: TaskRepositoryDep) -> dict[str, str]:
    await tasks.delete(task_id)
    return {"message": "Task deleted successfully"}
