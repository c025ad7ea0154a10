"""Lifecycle rules — automatic field changes triggered by state changes.

These are pure functions over validated entities: they never touch storage,
so the repository decides whether and how to persist the result.

Task completion invariant: ``completed_at`` is set exactly when
``status == completed``.  It is established by every write that changes the
status and left alone by writes that do not.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from taskboard.core.types import Task, TaskStatus, TeamRole, utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from taskboard.core.types import Project

logger = logging.getLogger(__name__)


class StatusTransition(BaseModel):
    """Outcome of applying the completion rule to a task write."""

    model_config = ConfigDict(frozen=True)

    task: Task
    stamped: bool = False
    cleared: bool = False
    noop: bool = False


class MembershipChange(BaseModel):
    """New ``team_members`` value for a project, as plain dicts ready to validate."""

    model_config = ConfigDict(frozen=True)

    members: list[dict[str, Any]]
    changed: bool


def apply_status_transition(
    previous: Task | None,
    task: Task,
    *,
    now: datetime | None = None,
) -> StatusTransition:
    """Apply the completion rule to a validated task write.

    Args:
        previous: Stored task before the write, ``None`` for a create.
        task: Validated task as it would be written.
        now: Completion time to stamp.

    * status changes to ``completed`` with no ``completed_at`` → stamp *now*
    * status changes away from ``completed`` → clear ``completed_at``
    * status unchanged → ``completed_at`` untouched
    """
    status_changed = previous is None or previous.status != task.status
    if not status_changed:
        return StatusTransition(task=task)

    if task.status == TaskStatus.COMPLETED:
        if task.completed_at is None:
            stamped = task.model_copy(update={"completed_at": now or utcnow()})
            return StatusTransition(task=stamped, stamped=True)
        return StatusTransition(task=task)

    if task.completed_at is not None:
        return StatusTransition(task=task.model_copy(update={"completed_at": None}), cleared=True)
    return StatusTransition(task=task)


def mark_completed(task: Task, *, now: datetime | None = None) -> StatusTransition:
    """Complete *task*, keeping the first completion time.

    Completing an already-completed task is a no-op (``noop=True``) and the
    original ``completed_at`` is preserved.
    """
    if task.status == TaskStatus.COMPLETED and task.completed_at is not None:
        logger.debug("Task %s already completed at %s", task.id, task.completed_at)
        return StatusTransition(task=task, noop=True)

    now = now or utcnow()
    completed = task.model_copy(
        update={
            "status": TaskStatus.COMPLETED,
            "completed_at": task.completed_at or now,
            "updated_at": now,
        }
    )
    return StatusTransition(task=completed, stamped=task.completed_at is None)


def add_team_member(
    project: Project,
    user: str,
    role: TeamRole | str | None = None,
    *,
    now: datetime | None = None,
) -> MembershipChange:
    """Append *user* to the team unless a member with that name exists.

    Membership is keyed by the trimmed user name; a duplicate add is a no-op,
    not an error.  The new entry is not validated here.
    """
    key = user.strip() if isinstance(user, str) else user
    members = [member.model_dump() for member in project.team_members]
    if any(member["user"] == key for member in members):
        return MembershipChange(members=members, changed=False)

    members.append(
        {
            "user": key,
            "role": role if role is not None else TeamRole.DEVELOPER,
            "joined_at": now or utcnow(),
        }
    )
    return MembershipChange(members=members, changed=True)


def remove_team_member(project: Project, user: str) -> MembershipChange:
    """Drop every entry for *user*; removing a non-member changes nothing."""
    key = user.strip() if isinstance(user, str) else user
    members = [member.model_dump() for member in project.team_members if member.user != key]
    return MembershipChange(members=members, changed=len(members) != len(project.team_members))


__all__ = [
    "MembershipChange",
    "StatusTransition",
    "add_team_member",
    "apply_status_transition",
    "mark_completed",
    "remove_team_member",
]
