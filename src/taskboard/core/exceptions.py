"""Custom exceptions for taskboard.

All exceptions derive from :class:`TaskboardError` so callers can catch the
entire family with a single ``except TaskboardError`` clause.

Hierarchy::

    TaskboardError
    ├── EntityValidationError
    ├── DuplicateKeyError
    ├── EntityNotFoundError
    ├── StorageError
    │   └── StorageUnavailableError
    └── ConfigurationError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taskboard.core.types import FieldError


class TaskboardError(Exception):
    """Base exception for all taskboard errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class EntityValidationError(TaskboardError):
    """Raised when a candidate write violates one or more field constraints.

    Every violated constraint is reported; ``errors`` is never empty.
    """

    def __init__(
        self,
        kind: str,
        errors: Iterable[FieldError],
        details: dict[str, Any] | None = None,
    ) -> None:
        self.kind = kind
        self.errors: list[FieldError] = list(errors)
        joined = "; ".join(e.message for e in self.errors)
        super().__init__(f"{kind} validation failed: {joined}", details)

    def messages(self) -> dict[str, list[str]]:
        """Group error messages by field name."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


class DuplicateKeyError(TaskboardError):
    """Raised when a write would violate a unique index (``users.email``)."""

    def __init__(
        self,
        kind: str,
        field: str,
        value: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Duplicate {field} for {kind}: {value!r}", details)
        self.kind = kind
        self.field = field
        self.value = value


class EntityNotFoundError(TaskboardError):
    """Raised when an operation targets an id that does not exist."""

    def __init__(
        self,
        kind: str,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        label = _singular(kind)
        message = f"{label} not found: {entity_id!r}" if entity_id else f"{label} not found"
        super().__init__(message, details)
        self.kind = kind
        self.entity_id = entity_id
        self.label = label


class StorageError(TaskboardError):
    """Raised when the storage backend fails an operation."""

    def __init__(
        self,
        operation: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Storage operation {operation!r} failed: {reason}", details)
        self.operation = operation
        self.reason = reason


class StorageUnavailableError(StorageError):
    """Raised when the storage backend cannot be reached.

    The core never retries; the caller decides what to do.
    """


class ConfigurationError(TaskboardError):
    """Raised when :class:`~taskboard.core.config.TaskboardConfig` contains an invalid value."""

    def __init__(
        self,
        parameter: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Invalid configuration for {parameter!r}: {reason}", details)
        self.parameter = parameter
        self.reason = reason


def _singular(kind: str) -> str:
    return kind[:-1].capitalize() if kind.endswith("s") else kind.capitalize()


__all__ = [
    "ConfigurationError",
    "DuplicateKeyError",
    "EntityNotFoundError",
    "EntityValidationError",
    "StorageError",
    "StorageUnavailableError",
    "TaskboardError",
]
