"""Entity schemas for taskboard.

Every field constraint is declared exactly once, on the model field, and is
enforced identically for creates and partial updates (the validation engine
always validates the merged document).  Derived attributes are
``computed_field`` properties: they appear in JSON output and are never
written to storage.

Models are frozen.  Never ``model_copy(update=...)`` client input into an
entity — that skips validation.  Route writes through
:func:`taskboard.core.validation.validate_entity` instead.
"""
from __future__ import annotations

import math
import re
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationInfo,
    computed_field,
    field_validator,
)
from pydantic_core import PydanticCustomError

from taskboard.utils.security import generate_entity_id

_SECONDS_PER_DAY = 60 * 60 * 24

# local-part and domain of word characters with optional single "." / "-"
# separators, then a 2-3 letter TLD
_EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _format_timestamp(value: datetime) -> str:
    # fixed width so stored timestamps sort lexicographically
    return value.isoformat(timespec="microseconds")


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise PydanticCustomError("number_type", "Input should be a number")
    return value


Timestamp = Annotated[
    datetime,
    AfterValidator(_as_utc),
    PlainSerializer(_format_timestamp, return_type=str, when_used="json"),
]
Tag = Annotated[str, Field(max_length=50, title="Tag")]
# constraints first so they attach to the float schema, not the wrapper
Hours = Annotated[
    float, Field(ge=0, le=1000, allow_inf_nan=False), BeforeValidator(_reject_bool)
]
Amount = Annotated[float, Field(ge=0, allow_inf_nan=False), BeforeValidator(_reject_bool)]
Percent = Annotated[
    float, Field(ge=0, le=100, allow_inf_nan=False), BeforeValidator(_reject_bool)
]

_VIRTUAL_FIELDS = frozenset({"task_count"})


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class EntityKind(StrEnum):
    """Top-level collections held by the document store."""
    TASKS = "tasks"
    PROJECTS = "projects"
    USERS = "users"


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ProjectStatus(StrEnum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectPriority(StrEnum):
    """Project priority, declared lowest to highest."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TeamRole(StrEnum):
    LEAD = "lead"
    DEVELOPER = "developer"
    DESIGNER = "designer"
    TESTER = "tester"
    ANALYST = "analyst"


class UserRole(StrEnum):
    ADMIN = "admin"
    MANAGER = "manager"
    DEVELOPER = "developer"
    DESIGNER = "designer"
    TESTER = "tester"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class FieldError(BaseModel):
    """One violated constraint on one field."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class Entity(BaseModel):
    """Fields shared by every top-level aggregate."""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    id: str = Field(default_factory=generate_entity_id, description="Opaque identifier")
    created_at: Timestamp = Field(default_factory=utcnow, description="Creation timestamp (UTC)")
    updated_at: Timestamp = Field(default_factory=utcnow, description="Last update timestamp (UTC)")

    @classmethod
    def stored_field_names(cls) -> set[str]:
        return set(cls.model_fields) - _VIRTUAL_FIELDS

    def to_document(self) -> dict[str, Any]:
        """Dump the persisted fields in JSON form, as the document store expects."""
        return self.model_dump(mode="json", include=self.stored_field_names())

    def stored_values(self) -> dict[str, Any]:
        """Dump the persisted fields as Python objects (for merging with updates)."""
        return self.model_dump(include=self.stored_field_names())


def _normalise_tags(tags: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for tag in tags:
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class Task(Entity):
    """A unit of work assigned to one person by name.

    Example
    -------
    .. code-block:: python

        task = Task(title="Set up database", assigned_to="Alice")
        task.is_completed   # False
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "title": "Design user authentication flow",
                    "assigned_to": "Alice Johnson",
                    "status": "in_progress",
                    "priority": "high",
                    "tags": ["auth", "design"],
                }
            ]
        },
    )

    title: str = Field(..., min_length=1, max_length=200, title="Title")
    description: str = Field(default="", max_length=1000, title="Description")
    assigned_to: str = Field(..., min_length=1, max_length=100, title="Assignee name")
    status: TaskStatus = Field(default=TaskStatus.TODO, title="Status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, title="Priority")
    due_date: Timestamp | None = Field(default=None, title="Due date")
    tags: list[Tag] = Field(default_factory=list, title="Tags")
    estimated_hours: Hours | None = Field(default=None, title="Estimated hours")
    actual_hours: Hours | None = Field(default=None, title="Actual hours")
    completed_at: Timestamp | None = Field(default=None, title="Completed at")
    created_by: str | None = Field(default=None, max_length=100, title="Creator name")
    project_id: str | None = Field(default=None, max_length=255, title="Project")

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        # Only enforced when the caller asks for it; stored tasks whose due
        # date has lapsed must still load.
        context = info.context or {}
        if value is None or not context.get("check_due_date", False):
            return value
        now = context.get("now") or utcnow()
        if value <= now:
            raise PydanticCustomError("due_date_not_future", "Due date must be in the future")
        return value

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, value: list[str]) -> list[str]:
        return _normalise_tags(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def age_in_days(self) -> int:
        return math.floor((utcnow() - self.created_at).total_seconds() / _SECONDS_PER_DAY)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_overdue(self) -> bool:
        return (
            self.due_date is not None
            and self.due_date < utcnow()
            and self.status != TaskStatus.COMPLETED
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


class TeamMember(BaseModel):
    """Membership entry keyed by user name."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    user: str = Field(..., min_length=1, title="Team member")
    role: TeamRole = Field(default=TeamRole.DEVELOPER, title="Role")
    joined_at: Timestamp = Field(default_factory=utcnow, title="Joined at")


class Budget(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    allocated: Amount | None = Field(default=None, title="Budget")
    spent: Amount = Field(default=0, title="Spent amount")


class Project(Entity):
    """A body of work with a team and an optional budget."""

    name: str = Field(..., min_length=2, max_length=200, title="Project name")
    description: str = Field(default="", max_length=1000, title="Description")
    status: ProjectStatus = Field(default=ProjectStatus.PLANNING, title="Status")
    priority: ProjectPriority = Field(default=ProjectPriority.MEDIUM, title="Priority")
    start_date: Timestamp = Field(default_factory=utcnow, title="Start date")
    end_date: Timestamp | None = Field(default=None, title="End date")
    team_members: list[TeamMember] = Field(default_factory=list, title="Team members")
    budget: Budget = Field(default_factory=Budget, title="Budget")
    progress: Percent = Field(default=0, title="Progress")
    tags: list[Tag] = Field(default_factory=list, title="Tags")
    created_by: str = Field(..., min_length=1, title="Creator")
    task_count: int | None = Field(default=None, description="Tasks linked to this project")

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        start = info.data.get("start_date")
        if value is not None and start is not None and value <= start:
            raise PydanticCustomError("date_order", "End date must be after start date")
        return value

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, value: list[str]) -> list[str]:
        return _normalise_tags(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_in_days(self) -> int | None:
        if self.end_date is None:
            return None
        return math.ceil((self.end_date - self.start_date).total_seconds() / _SECONDS_PER_DAY)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_budget(self) -> float | None:
        if self.budget.allocated is None:
            return None
        return self.budget.allocated - self.budget.spent

    def member_names(self) -> list[str]:
        return [member.user for member in self.team_members]


class NotificationSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    email: bool = True
    push: bool = True
    task_assigned: bool = True
    task_completed: bool = True
    due_date_reminder: bool = True


class UserPreferences(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    theme: Theme = Field(default=Theme.LIGHT, title="Theme")
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


class User(Entity):
    """A person who can be assigned tasks (by name) and join project teams."""

    name: str = Field(..., min_length=2, max_length=100, title="Name")
    email: str = Field(..., min_length=1, title="Email")
    role: UserRole = Field(default=UserRole.DEVELOPER, title="Role")
    department: str | None = Field(default=None, max_length=100, title="Department")
    avatar: str | None = Field(default=None, title="Avatar")
    is_active: bool = Field(default=True, title="Active")
    last_login: Timestamp | None = Field(default=None, title="Last login")
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    task_count: int | None = Field(default=None, description="Tasks assigned to this user by name")

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise PydanticCustomError("email_format", "Please enter a valid email address")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return self.name


ENTITY_MODELS: dict[EntityKind, type[Entity]] = {
    EntityKind.TASKS: Task,
    EntityKind.PROJECTS: Project,
    EntityKind.USERS: User,
}


__all__ = [
    "ENTITY_MODELS",
    "Budget",
    "Entity",
    "EntityKind",
    "FieldError",
    "NotificationSettings",
    "Project",
    "ProjectPriority",
    "ProjectStatus",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TeamMember",
    "TeamRole",
    "Theme",
    "Timestamp",
    "User",
    "UserPreferences",
    "UserRole",
    "utcnow",
]
