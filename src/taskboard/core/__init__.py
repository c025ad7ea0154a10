"""Core taskboard components: schemas, validation and lifecycle rules."""

from taskboard.core.config import StorageBackend, TaskboardConfig
from taskboard.core.exceptions import *  # noqa: F403
from taskboard.core.exceptions import __all__ as exceptions__all__
from taskboard.core.lifecycle import (
    MembershipChange,
    StatusTransition,
    add_team_member,
    apply_status_transition,
    mark_completed,
    remove_team_member,
)
from taskboard.core.types import *  # noqa: F403
from taskboard.core.types import __all__ as types__all__
from taskboard.core.validation import validate_entity

__all__ = [
    "MembershipChange",
    "StatusTransition",
    "StorageBackend",
    "TaskboardConfig",
    "add_team_member",
    "apply_status_transition",
    "mark_completed",
    "remove_team_member",
    "validate_entity",
]

__all__ += exceptions__all__
__all__ += types__all__
