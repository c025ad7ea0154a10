"""Filter predicates and the list-query builder."""

from taskboard.query.builder import (
    Query,
    SortKey,
    active_projects,
    active_users,
    build_filter,
    overdue_tasks,
    projects_by_member,
    sort_documents,
    tasks_by_assignee,
    tasks_by_status,
    users_by_role,
)
from taskboard.query.predicates import (
    AllOf,
    AnyOf,
    Contains,
    ElementEq,
    Eq,
    Lt,
    Ne,
    Predicate,
    matches,
)

__all__ = [
    "AllOf",
    "AnyOf",
    "Contains",
    "ElementEq",
    "Eq",
    "Lt",
    "Ne",
    "Predicate",
    "Query",
    "SortKey",
    "active_projects",
    "active_users",
    "build_filter",
    "matches",
    "overdue_tasks",
    "projects_by_member",
    "sort_documents",
    "tasks_by_assignee",
    "tasks_by_status",
    "users_by_role",
]
