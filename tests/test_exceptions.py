"""Exception hierarchy and messages."""
from __future__ import annotations

import pytest

from taskboard.core.exceptions import (
    ConfigurationError,
    DuplicateKeyError,
    EntityNotFoundError,
    EntityValidationError,
    StorageError,
    StorageUnavailableError,
    TaskboardError,
)
from taskboard.core.types import FieldError


@pytest.mark.parametrize(
    "exc",
    [
        EntityValidationError("tasks", [FieldError(field="title", message="Title is required")]),
        DuplicateKeyError("users", "email", "a@example.com"),
        EntityNotFoundError("tasks", "t1"),
        StorageError("insert", "disk full"),
        StorageUnavailableError("insert", "connection refused"),
        ConfigurationError("database_url", "no driver"),
    ],
)
def test_all_derive_from_base(exc: TaskboardError) -> None:
    assert isinstance(exc, TaskboardError)


def test_unavailable_is_storage_error() -> None:
    assert issubclass(StorageUnavailableError, StorageError)


def test_not_found_label() -> None:
    exc = EntityNotFoundError("projects", "p1")
    assert exc.label == "Project"
    assert str(exc) == "Project not found: 'p1'"
    assert EntityNotFoundError("users").message == "User not found"


def test_validation_messages_grouped() -> None:
    exc = EntityValidationError(
        "projects",
        [
            FieldError(field="name", message="Project name is required"),
            FieldError(field="budget.spent", message="Spent amount cannot be less than 0"),
            FieldError(field="name", message="second"),
        ],
    )
    assert exc.messages() == {
        "name": ["Project name is required", "second"],
        "budget.spent": ["Spent amount cannot be less than 0"],
    }
    assert exc.message.startswith("projects validation failed")


def test_details_in_str() -> None:
    exc = StorageError("count", "timeout", details={"attempt": 1})
    assert "details={'attempt': 1}" in str(exc)
    assert repr(exc).startswith("StorageError(")


def test_duplicate_key_attributes() -> None:
    exc = DuplicateKeyError("users", "email", "a@example.com")
    assert (exc.kind, exc.field, exc.value) == ("users", "email", "a@example.com")
