"""``/projects`` routes."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Body, Request, status

from taskboard.core.types import Project
from taskboard.dependencies import ProjectRepositoryDep

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
async def list_projects(request: Request, projects: ProjectRepositoryDep) -> list[Project]:
    """Filter with ``status``, ``priority``, ``member`` and ``search``."""
    return await projects.list(dict(request.query_params))


@router.get("/active/list")
async def active_projects(projects: ProjectRepositoryDep) -> list[Project]:
    return await projects.list_active()


@router.get("/{project_id}")
async def get_project(project_id: str, projects: ProjectRepositoryDep) -> Project:
    return await projects.get_by_id(project_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(projects: ProjectRepositoryDep, payload: Any = Body(None)) -> Project:
    return await projects.create(payload)


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    projects: ProjectRepositoryDep,
    payload: Any = Body(None),
) -> Project:
    return await projects.update(project_id, payload)


@router.delete("/{project_id}")
async def delete_project(project_id: str, projects: ProjectRepositoryDep) -> dict[str, str]:
    await projects.delete(project_id)
    return {"message": "Project deleted successfully"}


@router.post("/{project_id}/members")
async def add_member(
    project_id: str,
    projects: ProjectRepositoryDep,
    payload: Any = Body(None),
) -> Project:
    """Body: ``{"user": "<name>", "role": "<team role>"}``; ``role`` is optional."""
    body = payload if isinstance(payload, Mapping) else {}
    role = body.get("role")
    if isinstance(role, str) and not role.strip():
        # blank role falls back to the default
        role = None
    return await projects.add_team_member(project_id, body.get("user"), role)


@router.delete("/{project_id}/members/{user}")
async def remove_member(project_id: str, user: str, projects: ProjectRepositoryDep) -> Project:
    return await projects.remove_team_member(project_id, user)
