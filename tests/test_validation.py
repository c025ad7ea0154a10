"""Validation engine tests: merged create/update validation and messages."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskboard.core.exceptions import EntityValidationError
from taskboard.core.types import EntityKind, Project, Task, TaskStatus, User
from taskboard.core.validation import SYSTEM_FIELDS, clean_candidate, validate_entity


def messages(exc_info: pytest.ExceptionInfo[EntityValidationError]) -> dict[str, list[str]]:
    return exc_info.value.messages()


class TestCreate:

    def test_valid_task(self, now: datetime) -> None:
        task = validate_entity("tasks", {"title": "Write docs", "assigned_to": "Alice"}, now=now)
        assert isinstance(task, Task)
        assert task.created_at == now
        assert task.updated_at == now

    def test_missing_required_fields_reported_together(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(EntityKind.TASKS, {}, now=now)
        assert messages(exc_info) == {
            "title": ["Title is required"],
            "assigned_to": ["Assignee name is required"],
        }

    def test_blank_required_string(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("tasks", {"title": "   ", "assigned_to": "Alice"}, now=now)
        assert messages(exc_info)["title"] == ["Title is required and cannot be empty"]

    def test_null_required_string(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("tasks", {"title": None, "assigned_to": "Alice"}, now=now)
        assert messages(exc_info)["title"] == ["Title is required"]

    def test_too_long(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("tasks", {"title": "x" * 201, "assigned_to": "Alice"}, now=now)
        assert messages(exc_info)["title"] == ["Title cannot exceed 200 characters"]

    def test_too_short(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("projects", {"name": "A", "created_by": "Alice"}, now=now)
        assert messages(exc_info)["name"] == ["Project name must be at least 2 characters long"]

    def test_enum_lists_allowed_values(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "tasks", {"title": "t", "assigned_to": "a", "status": "done"}, now=now
            )
        assert messages(exc_info)["status"] == [
            "Status must be one of: todo, in_progress, review, completed"
        ]

    def test_numeric_range(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "tasks",
                {"title": "t", "assigned_to": "a", "estimated_hours": 2000, "actual_hours": -1},
                now=now,
            )
        assert messages(exc_info) == {
            "estimated_hours": ["Estimated hours cannot exceed 1000"],
            "actual_hours": ["Actual hours cannot be less than 0"],
        }

    def test_non_numeric(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "tasks", {"title": "t", "assigned_to": "a", "estimated_hours": "lots"}, now=now
            )
        assert messages(exc_info)["estimated_hours"] == ["Estimated hours must be a number"]

    def test_system_fields_ignored(self, now: datetime) -> None:
        task = validate_entity(
            "tasks",
            {
                "id": "client-chosen",
                "title": "t",
                "assigned_to": "a",
                "created_at": "2000-01-01T00:00:00Z",
                "completed_at": "2000-01-01T00:00:00Z",
            },
            now=now,
        )
        assert task.id != "client-chosen"
        assert task.created_at == now
        assert task.completed_at is None

    def test_task_count_not_writable(self, now: datetime) -> None:
        project = validate_entity(
            "projects", {"name": "Apollo", "created_by": "Alice", "task_count": 99}, now=now
        )
        assert project.task_count is None

    def test_body_must_be_object(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("tasks", ["not", "a", "dict"], now=now)  # type: ignore[arg-type]
        assert list(messages(exc_info)) == ["body"]

    def test_nested_member_error(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "projects",
                {"name": "Apollo", "created_by": "Alice", "team_members": [{"user": " "}]},
                now=now,
            )
        assert messages(exc_info) == {
            "team_members.0.user": ["Team member is required and cannot be empty"]
        }

    def test_member_role_enum(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "projects",
                {
                    "name": "Apollo",
                    "created_by": "Alice",
                    "team_members": [{"user": "Bob", "role": "boss"}],
                },
                now=now,
            )
        assert messages(exc_info)["team_members.0.role"] == [
            "Role must be one of: lead, developer, designer, tester, analyst"
        ]

    def test_invalid_email(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("users", {"name": "Alice", "email": "nope"}, now=now)
        assert messages(exc_info)["email"] == ["Please enter a valid email address"]

    def test_email_lowercased(self, now: datetime) -> None:
        user = validate_entity("users", {"name": "Alice", "email": " ALICE@Example.com "}, now=now)
        assert isinstance(user, User)
        assert user.email == "alice@example.com"

    def test_error_carries_kind(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("users", {}, now=now)
        assert exc_info.value.kind == "users"
        assert exc_info.value.errors


class TestDueDate:

    def test_past_due_date_rejected(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "tasks",
                {"title": "t", "assigned_to": "a", "due_date": now - timedelta(days=1)},
                now=now,
            )
        assert messages(exc_info)["due_date"] == ["Due date must be in the future"]

    def test_due_date_equal_to_now_rejected(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError):
            validate_entity("tasks", {"title": "t", "assigned_to": "a", "due_date": now}, now=now)

    def test_future_due_date_accepted(self, now: datetime) -> None:
        due = now + timedelta(days=7)
        task = validate_entity("tasks", {"title": "t", "assigned_to": "a", "due_date": due}, now=now)
        assert task.due_date == due

    def test_omitted_due_date_accepted(self, now: datetime) -> None:
        task = validate_entity("tasks", {"title": "t", "assigned_to": "a"}, now=now)
        assert task.due_date is None

    def test_lapsed_due_date_survives_unrelated_update(self, now: datetime) -> None:
        existing = Task(title="t", assigned_to="a", due_date=now - timedelta(days=2))
        updated = validate_entity("tasks", {"description": "more"}, existing, now=now)
        assert updated.description == "more"
        assert updated.due_date == existing.due_date

    def test_revalidate_on_every_save(self, now: datetime) -> None:
        existing = Task(title="t", assigned_to="a", due_date=now - timedelta(days=2))
        with pytest.raises(EntityValidationError):
            validate_entity(
                "tasks", {"description": "more"}, existing, now=now, revalidate_due_date=True
            )

    def test_clearing_due_date_allowed(self, now: datetime) -> None:
        existing = Task(title="t", assigned_to="a", due_date=now - timedelta(days=2))
        updated = validate_entity("tasks", {"due_date": None}, existing, now=now)
        assert updated.due_date is None


class TestUpdate:

    def test_merges_over_existing(self, now: datetime) -> None:
        existing = Task(title="t", assigned_to="a", status="review", created_at=now - timedelta(days=1))
        updated = validate_entity("tasks", {"description": "d"}, existing, now=now)
        assert updated.id == existing.id
        assert updated.status == TaskStatus.REVIEW
        assert updated.created_at == existing.created_at
        assert updated.updated_at == now

    def test_partial_update_keeps_completed_at(self, now: datetime) -> None:
        done = now - timedelta(hours=3)
        existing = Task(title="t", assigned_to="a", status="completed", completed_at=done)
        updated = validate_entity(
            "tasks", {"description": "d", "completed_at": None}, existing, now=now
        )
        assert updated.status == TaskStatus.COMPLETED
        assert updated.completed_at == done

    def test_update_checks_constraints(self, now: datetime) -> None:
        existing = Task(title="t", assigned_to="a")
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity("tasks", {"title": ""}, existing, now=now)
        assert messages(exc_info)["title"] == ["Title is required and cannot be empty"]

    def test_end_date_checked_against_stored_start(self, now: datetime) -> None:
        existing = Project(
            name="Apollo", created_by="Alice", start_date=datetime(2024, 3, 1, tzinfo=UTC)
        )
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "projects", {"end_date": datetime(2024, 2, 1, tzinfo=UTC)}, existing, now=now
            )
        assert messages(exc_info)["end_date"] == ["End date must be after start date"]

    def test_end_date_after_stored_start(self, now: datetime) -> None:
        existing = Project(
            name="Apollo", created_by="Alice", start_date=datetime(2024, 3, 1, tzinfo=UTC)
        )
        updated = validate_entity(
            "projects", {"end_date": datetime(2024, 4, 1, tzinfo=UTC)}, existing, now=now
        )
        assert updated.duration_in_days == 31

    def test_unknown_keys_ignored(self, now: datetime) -> None:
        existing = Task(title="t", assigned_to="a")
        updated = validate_entity("tasks", {"colour": "blue"}, existing, now=now)
        assert updated.title == "t"


def test_clean_candidate_drops_system_fields() -> None:
    candidate = {field: "x" for field in SYSTEM_FIELDS} | {"title": "t", "task_count": 3}
    assert clean_candidate(candidate) == {"title": "t"}


class TestNumericBounds:

    @pytest.mark.parametrize("value", ["inf", float("inf"), float("-inf"), float("nan")])
    def test_non_finite_hours_rejected(self, now: datetime, value) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "tasks", {"title": "t", "assigned_to": "a", "estimated_hours": value}, now=now
            )
        assert messages(exc_info)["estimated_hours"] == ["Estimated hours must be a finite number"]

    @pytest.mark.parametrize("value", ["inf", float("inf"), float("nan")])
    def test_non_finite_budget_rejected(self, now: datetime, value) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "projects",
                {"name": "Apollo", "created_by": "A", "budget": {"allocated": value}},
                now=now,
            )
        assert messages(exc_info)["budget.allocated"] == ["Budget must be a finite number"]

    @pytest.mark.parametrize("value", ["inf", float("inf"), float("nan")])
    def test_non_finite_progress_rejected(self, now: datetime, value) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "projects", {"name": "Apollo", "created_by": "A", "progress": value}, now=now
            )
        assert messages(exc_info)["progress"] == ["Progress must be a finite number"]

    def test_integral_bounds_printed_without_decimals(self, now: datetime) -> None:
        with pytest.raises(EntityValidationError) as exc_info:
            validate_entity(
                "projects", {"name": "Apollo", "created_by": "A", "progress": 101}, now=now
            )
        assert messages(exc_info)["progress"] == ["Progress cannot exceed 100"]
