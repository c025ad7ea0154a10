"""taskboard — collaborative task and project tracking on FastAPI.

Quick start
-----------
.. code-block:: python

    from taskboard import TaskboardConfig, create_app

    config = TaskboardConfig(database_url="sqlite+aiosqlite:///./taskboard.db")
    app = create_app(config)

Public API
----------
Core types
    Task, Project, User, TeamMember, Budget, EntityKind and the status enums

Configuration
    TaskboardConfig, StorageBackend

Validation & lifecycle
    validate_entity, apply_status_transition, mark_completed

Repositories
    TaskRepository, ProjectRepository, UserRepository

Manager & application
    TaskboardManager, create_app

Storage backends
    DocumentStore (ABC), InMemoryDocumentStore, SQLAlchemyDocumentStore

Exceptions
    TaskboardError and all its subclasses
"""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

try:
    __version__: str = _pkg_version("taskboard")
except PackageNotFoundError:  # running from source without install
    __version__ = "0.0.0+dev"

# Application
from taskboard.api import create_app

# Configuration
from taskboard.core.config import StorageBackend, TaskboardConfig

# Exceptions
from taskboard.core.exceptions import (
    ConfigurationError,
    DuplicateKeyError,
    EntityNotFoundError,
    EntityValidationError,
    StorageError,
    StorageUnavailableError,
    TaskboardError,
)

# Lifecycle
from taskboard.core.lifecycle import apply_status_transition, mark_completed
from taskboard.core.types import (
    Budget,
    EntityKind,
    FieldError,
    Project,
    ProjectPriority,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
    TeamRole,
    User,
    UserRole,
)

# Validation
from taskboard.core.validation import validate_entity

# Manager
from taskboard.manager import TaskboardManager

# Repositories
from taskboard.repositories import ProjectRepository, TaskRepository, UserRepository

# Storage
from taskboard.storage import DocumentStore, InMemoryDocumentStore, SQLAlchemyDocumentStore

__all__ = [  # noqa: RUF022
    "__version__",
    # Types
    "Task",
    "Project",
    "User",
    "TeamMember",
    "Budget",
    "EntityKind",
    "FieldError",
    "TaskStatus",
    "TaskPriority",
    "ProjectStatus",
    "ProjectPriority",
    "TeamRole",
    "UserRole",
    # Config
    "TaskboardConfig",
    "StorageBackend",
    # Validation & lifecycle
    "validate_entity",
    "apply_status_transition",
    "mark_completed",
    # Exceptions
    "TaskboardError",
    "EntityValidationError",
    "DuplicateKeyError",
    "EntityNotFoundError",
    "StorageError",
    "StorageUnavailableError",
    "ConfigurationError",
    # Repositories
    "TaskRepository",
    "ProjectRepository",
    "UserRepository",
    # Manager
    "TaskboardManager",
    "create_app",
    # Storage
    "DocumentStore",
    "InMemoryDocumentStore",
    "SQLAlchemyDocumentStore",
]
