"""Query builder — turns list parameters into a predicate plus a sort order.

Example:
    ```python
    query = build_filter("tasks", {"status": "todo", "search": "auth"})
    # AllOf(Eq("status", "todo"), AnyOf(Contains("title", "auth"),
    #                                   Contains("description", "auth")))
    # sorted by created_at, newest first
    ```

Unset or blank parameters are ignored, and so are keys the entity kind
does not know.  Building a query never fails.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from taskboard.core.types import EntityKind, ProjectPriority, ProjectStatus, TaskStatus
from taskboard.query.predicates import (
    AllOf,
    AnyOf,
    Contains,
    ElementEq,
    Eq,
    Lt,
    Ne,
    Predicate,
    get_path,
)

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True)
class SortKey:
    """One sort criterion.

    With *ranking*, values order by their position in it instead of
    naturally; values outside the ranking sort below every ranked value.
    Unset values sort first ascending and last descending.
    """

    field: str
    descending: bool = False
    ranking: tuple[str, ...] | None = None

    def sort_value(self, document: Mapping[str, Any]) -> tuple[Any, ...]:
        value = get_path(document, self.field)
        if self.ranking is not None:
            return (1, self.ranking.index(value) if value in self.ranking else -1)
        if value is None:
            return (0, 0)
        return (1, value)


@dataclass(frozen=True)
class Query:
    predicate: Predicate | None = None
    sort: tuple[SortKey, ...] = ()


def sort_documents(
    documents: Iterable[Mapping[str, Any]],
    sort: Iterable[SortKey],
) -> list[Any]:
    """Stable multi-key sort; the first key is the primary one."""
    ordered = list(documents)
    for key in reversed(tuple(sort)):
        ordered.sort(key=key.sort_value, reverse=key.descending)
    return ordered


@dataclass(frozen=True)
class _Filters:
    equality: Mapping[str, str]
    search_fields: tuple[str, ...]
    default_sort: tuple[SortKey, ...]


_CREATED_DESC = (SortKey("created_at", descending=True),)
_START_DESC = (SortKey("start_date", descending=True),)
_NAME_ASC = (SortKey("name"),)

_FILTERS: dict[EntityKind, _Filters] = {
    EntityKind.TASKS: _Filters(
        equality={
            "status": "status",
            "priority": "priority",
            "assigned_to": "assigned_to",
            "assignedTo": "assigned_to",
            "project": "project_id",
            "project_id": "project_id",
        },
        search_fields=("title", "description"),
        default_sort=_CREATED_DESC,
    ),
    EntityKind.PROJECTS: _Filters(
        equality={
            "status": "status",
            "priority": "priority",
            "created_by": "created_by",
            "createdBy": "created_by",
        },
        search_fields=("name", "description"),
        default_sort=_START_DESC,
    ),
    EntityKind.USERS: _Filters(
        equality={"role": "role", "department": "department"},
        search_fields=("name", "email"),
        default_sort=_NAME_ASC,
    ),
}


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def search_predicate(fields: Iterable[str], term: str) -> AnyOf:
    """Case-insensitive literal substring match on any of *fields*."""
    return AnyOf(tuple(Contains(name, term) for name in fields))


def build_filter(kind: EntityKind | str, params: Mapping[str, Any] | None = None) -> Query:
    """Build the list query for *kind* from request parameters."""
    kind = EntityKind(kind)
    filters = _FILTERS[kind]
    clauses: list[Predicate] = []

    for key, raw in (params or {}).items():
        value = _clean(raw)
        if value is None:
            continue
        if key in filters.equality:
            clauses.append(Eq(filters.equality[key], value))
        elif key == "search":
            clauses.append(search_predicate(filters.search_fields, str(value)))
        elif key == "member" and kind == EntityKind.PROJECTS:
            clauses.append(ElementEq("team_members", "user", value))
        elif key == "active" and kind == EntityKind.USERS:
            # literal comparison: anything but "true" means inactive
            active = value if isinstance(value, bool) else value == "true"
            clauses.append(Eq("is_active", active))

    return Query(AllOf(tuple(clauses)) if clauses else None, filters.default_sort)


# ---------------------------------------------------------------------------
# Canned queries
# ---------------------------------------------------------------------------

def active_projects() -> Query:
    """Active projects, highest priority first, then newest start date."""
    ranking = tuple(priority.value for priority in ProjectPriority)
    return Query(
        Eq("status", ProjectStatus.ACTIVE.value),
        (SortKey("priority", descending=True, ranking=ranking), *_START_DESC),
    )


def projects_by_member(user: str) -> Query:
    return Query(ElementEq("team_members", "user", user.strip()), _START_DESC)


def active_users() -> Query:
    return Query(Eq("is_active", True), _NAME_ASC)


def users_by_role(role: str) -> Query:
    return Query(AllOf((Eq("role", role), Eq("is_active", True))), _NAME_ASC)


def tasks_by_status(status: str) -> Query:
    return Query(Eq("status", status), _CREATED_DESC)


def tasks_by_assignee(name: str) -> Query:
    return Query(Eq("assigned_to", name.strip()), _CREATED_DESC)


def overdue_tasks(now: datetime) -> Query:
    """Tasks due before *now* that are not completed, soonest due first."""
    return Query(
        AllOf((Lt("due_date", now), Ne("status", TaskStatus.COMPLETED.value))),
        (SortKey("due_date"),),
    )


__all__ = [
    "Query",
    "SortKey",
    "active_projects",
    "active_users",
    "build_filter",
    "overdue_tasks",
    "projects_by_member",
    "search_predicate",
    "sort_documents",
    "tasks_by_assignee",
    "tasks_by_status",
    "users_by_role",
]
