"""Structured filter predicates over stored documents.

A predicate is a plain value: the in-memory store evaluates it with
:meth:`Predicate.matches`, the SQLAlchemy store compiles what it can to SQL
and evaluates the rest in Python.  Documents are the JSON-mode dicts produced
by :meth:`taskboard.core.types.Entity.to_document`; field names may be dotted
(``"preferences.theme"``).

Text matching is literal and case-insensitive; search input is never
interpreted as a pattern.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

_MISSING = object()


def get_path(document: Mapping[str, Any], path: str) -> Any:
    """Return the value at dotted *path*, or ``None`` when any segment is absent."""
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return None
    return current


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


class Predicate(ABC):
    """Boolean test over a single document."""

    @abstractmethod
    def matches(self, document: Mapping[str, Any]) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Eq(Predicate):
    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        return get_path(document, self.field) == self.value


@dataclass(frozen=True)
class Ne(Predicate):
    """Field differs from *value*; a missing field counts as different."""

    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        return get_path(document, self.field) != self.value


@dataclass(frozen=True)
class Lt(Predicate):
    """Timestamp field strictly before *value*; unset fields never match."""

    field: str
    value: datetime

    def matches(self, document: Mapping[str, Any]) -> bool:
        stored = _as_datetime(get_path(document, self.field))
        bound = _as_datetime(self.value)
        return stored is not None and bound is not None and stored < bound


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive literal substring match on a string field."""

    field: str
    term: str

    def matches(self, document: Mapping[str, Any]) -> bool:
        value = get_path(document, self.field)
        return isinstance(value, str) and self.term.lower() in value.lower()


@dataclass(frozen=True)
class ElementEq(Predicate):
    """Some element of the list at *field* has ``element[key] == value``."""

    field: str
    key: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        elements = get_path(document, self.field)
        if not isinstance(elements, Sequence) or isinstance(elements, str):
            return False
        return any(
            isinstance(element, Mapping) and element.get(self.key) == self.value
            for element in elements
        )


@dataclass(frozen=True)
class AllOf(Predicate):
    """Conjunction; an empty ``AllOf`` matches everything."""

    clauses: tuple[Predicate, ...] = ()

    def matches(self, document: Mapping[str, Any]) -> bool:
        return all(clause.matches(document) for clause in self.clauses)


@dataclass(frozen=True)
class AnyOf(Predicate):
    """Disjunction; an empty ``AnyOf`` matches nothing."""

    clauses: tuple[Predicate, ...] = ()

    def matches(self, document: Mapping[str, Any]) -> bool:
        return any(clause.matches(document) for clause in self.clauses)


def matches(predicate: Predicate | None, document: Mapping[str, Any]) -> bool:
    """Evaluate *predicate*, treating ``None`` as "match everything"."""
    return predicate is None or predicate.matches(document)


__all__ = [
    "AllOf",
    "AnyOf",
    "Contains",
    "ElementEq",
    "Eq",
    "Lt",
    "Ne",
    "Predicate",
    "get_path",
    "matches",
]
