"""Project repository — CRUD, team membership and task counts."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from taskboard.core import lifecycle
from taskboard.core.types import EntityKind, Project, utcnow
from taskboard.query.builder import active_projects, build_filter, projects_by_member
from taskboard.query.predicates import Eq
from taskboard.repositories.base import Repository

if TYPE_CHECKING:
    from collections.abc import Mapping

    from taskboard.core.types import TeamRole

logger = logging.getLogger(__name__)


class ProjectRepository(Repository[Project]):
    """Projects link to tasks through ``Task.project_id``; ``task_count`` is
    computed on read and never stored."""

    kind = EntityKind.PROJECTS
    model = Project

    async def count_tasks(self, project_id: str) -> int:
        return await self.store.count(EntityKind.TASKS, Eq("project_id", project_id))

    async def _with_task_count(self, project: Project) -> Project:
        count = await self.count_tasks(project.id)
        return project.model_copy(update={"task_count": count})

    async def list(self, params: Mapping[str, Any] | None = None) -> list[Project]:
        projects = await self._find(build_filter(self.kind, params))
        return [await self._with_task_count(project) for project in projects]

    async def get_by_id(self, entity_id: str) -> Project:
        return await self._with_task_count(await self._get(entity_id))

    async def list_active(self) -> list[Project]:
        return await self._find(active_projects())

    async def list_by_member(self, user: str) -> list[Project]:
        return await self._find(projects_by_member(user))

    async def add_team_member(
        self,
        project_id: str,
        user: str,
        role: TeamRole | str | None = None,
    ) -> Project:
        """Add *user* to the team; adding an existing member changes nothing."""
        project = await self._get(project_id)
        change = lifecycle.add_team_member(project, user, role, now=utcnow())
        if not change.changed:
            logger.debug("%s already on project %s", user, project_id)
            return project
        return await self.update(project_id, {"team_members": change.members})

    async def remove_team_member(self, project_id: str, user: str) -> Project:
        """Remove every membership entry for *user*; a non-member is a no-op."""
        project = await self._get(project_id)
        change = lifecycle.remove_team_member(project, user)
        if not change.changed:
            logger.debug("%s not on project %s", user, project_id)
            return project
        return await self.update(project_id, {"team_members": change.members})


__all__ = ["ProjectRepository"]
