"""Per-entity repositories: the only write path into storage."""

from taskboard.repositories.base import Repository
from taskboard.repositories.projects import ProjectRepository
from taskboard.repositories.tasks import TaskRepository
from taskboard.repositories.users import UserRepository

__all__ = ["ProjectRepository", "Repository", "TaskRepository", "UserRepository"]
