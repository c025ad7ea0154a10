"""Task repository — CRUD plus completion and roster helpers."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from taskboard.core.lifecycle import apply_status_transition, mark_completed
from taskboard.core.types import EntityKind, Task, TaskStatus, utcnow
from taskboard.query.builder import overdue_tasks, tasks_by_assignee, tasks_by_status
from taskboard.repositories.base import Repository

if TYPE_CHECKING:
    from datetime import datetime

logger = logging.getLogger(__name__)


class TaskRepository(Repository[Task]):
    kind = EntityKind.TASKS
    model = Task

    def _before_write(self, existing: Task | None, entity: Task, now: datetime) -> Task:
        transition = apply_status_transition(existing, entity, now=now)
        if transition.stamped:
            logger.info("Task %s completed at %s", entity.id, transition.task.completed_at)
        elif transition.cleared:
            logger.info("Task %s reopened as %s", entity.id, entity.status.value)
        return transition.task

    async def mark_completed(self, task_id: str) -> Task:
        """Complete a task; completing it again keeps the first completion time."""
        existing = await self._get(task_id)
        now = utcnow()
        validated = self._validate({"status": TaskStatus.COMPLETED}, existing, now)
        transition = mark_completed(validated, now=now)
        if transition.noop:
            return existing
        completed = await self._persist(task_id, transition.task)
        logger.info("Task %s marked completed", task_id)
        return completed

    async def update_status(self, task_id: str, status: TaskStatus | str) -> Task:
        """Status-only write; the completion rule applies as for any update."""
        return await self.update(task_id, {"status": status})

    async def list_by_status(self, status: TaskStatus | str) -> list[Task]:
        return await self._find(tasks_by_status(status))

    async def list_by_assignee(self, name: str) -> list[Task]:
        return await self._find(tasks_by_assignee(name))

    async def list_overdue(self, now: datetime | None = None) -> list[Task]:
        """Tasks past their due date and not completed, soonest due first."""
        return await self._find(overdue_tasks(now or utcnow()))

    async def get_team_member_roster(self) -> list[str]:
        """Sorted distinct non-blank assignee names across all tasks."""
        names = await self.store.distinct(self.kind, "assigned_to")
        return sorted({name.strip() for name in names if isinstance(name, str) and name.strip()})


__all__ = ["TaskRepository"]
