"""Validation engine — the single gate in front of every entity write.

Creates and partial updates go through the same path: the candidate fields
are merged over the existing entity's stored values (nothing, for a create)
and the merged document is validated against the entity schema.  This is
what lets a cross-field rule such as "end date after start date" see the
stored ``start_date`` when only ``end_date`` is written.

Pydantic reports every violated constraint at once; :func:`validate_entity`
translates those into :class:`~taskboard.core.types.FieldError` messages
and raises a single :class:`~taskboard.core.exceptions.EntityValidationError`.
Nothing here touches storage.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, get_args

from pydantic import BaseModel, ValidationError

from taskboard.core.exceptions import EntityValidationError
from taskboard.core.types import ENTITY_MODELS, EntityKind, FieldError, utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from pydantic.fields import FieldInfo
    from pydantic_core import ErrorDetails

    from taskboard.core.types import Entity

logger = logging.getLogger(__name__)

#: Owned by the store and the lifecycle rules; client values are dropped.
SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at", "completed_at"})

#: Attached on read, never written.
_READ_ONLY_FIELDS = frozenset({"task_count"})

_MESSAGES: dict[str, str] = {
    "missing": "{label} is required",
    "string_too_short": "{label} must be at least {min_length} characters long",
    "string_too_long": "{label} cannot exceed {max_length} characters",
    "greater_than_equal": "{label} cannot be less than {ge}",
    "less_than_equal": "{label} cannot exceed {le}",
    "enum": "{label} must be one of: {allowed}",
    "float_parsing": "{label} must be a number",
    "float_type": "{label} must be a number",
    "number_type": "{label} must be a number",
    "finite_number": "{label} must be a finite number",
    "string_type": "{label} must be a string",
    "bool_parsing": "{label} must be true or false",
    "bool_type": "{label} must be true or false",
    "datetime_parsing": "{label} must be a valid date",
    "datetime_from_date_parsing": "{label} must be a valid date",
    "datetime_type": "{label} must be a valid date",
    "list_type": "{label} must be a list",
    "model_type": "{label} must be an object",
    "model_attributes_type": "{label} must be an object",
}


def clean_candidate(candidate: Mapping[str, Any]) -> dict[str, Any]:
    """Drop system-managed and read-only keys from client input."""
    return {
        key: value
        for key, value in candidate.items()
        if key not in SYSTEM_FIELDS and key not in _READ_ONLY_FIELDS
    }


def validate_entity(
    kind: EntityKind | str,
    candidate: Mapping[str, Any],
    existing: Entity | None = None,
    *,
    now: datetime | None = None,
    revalidate_due_date: bool = False,
) -> Entity:
    """Validate a create (``existing is None``) or a partial update.

    Args:
        kind: Which entity schema to validate against.
        candidate: Client-supplied fields. System-managed keys (``id``,
            timestamps, ``completed_at``) and unknown keys are ignored.
        existing: The stored entity for an update.
        now: Reference time for timestamps and the due-date rule.
        revalidate_due_date: Check a task's due date even when the write
            does not set it.

    Returns:
        The validated entity with defaults filled and ``updated_at`` set.

    Raises:
        EntityValidationError: Listing every violated constraint.
    """
    kind = EntityKind(kind)
    model = ENTITY_MODELS[kind]

    if not isinstance(candidate, Mapping):
        raise EntityValidationError(
            kind.value,
            [FieldError(field="body", message="Request body must be an object")],
        )

    now = now or utcnow()
    changes = clean_candidate(candidate)
    if existing is None:
        merged: dict[str, Any] = {**changes, "created_at": now, "updated_at": now}
    else:
        merged = {**existing.stored_values(), **changes, "updated_at": now}

    context = {
        "now": now,
        "check_due_date": revalidate_due_date or changes.get("due_date") is not None,
    }
    try:
        return model.model_validate(merged, context=context)
    except ValidationError as exc:
        errors = to_field_errors(model, exc)
        logger.info(
            "Rejected %s write (%s): %d violation(s)",
            kind.value,
            "update" if existing is not None else "create",
            len(errors),
        )
        raise EntityValidationError(kind.value, errors) from exc


def to_field_errors(model: type[BaseModel], exc: ValidationError) -> list[FieldError]:
    """Translate a pydantic ``ValidationError`` into per-field messages."""
    return [_field_error(model, err) for err in exc.errors()]


def _field_error(model: type[BaseModel], err: ErrorDetails) -> FieldError:
    loc = tuple(err["loc"])
    info = _resolve_field(model, loc)
    label = info.title if info is not None and info.title else _humanise(loc)
    return FieldError(field=".".join(str(p) for p in loc) or "body", message=_message(err, label, info))


def _message(err: ErrorDetails, label: str, info: FieldInfo | None) -> str:
    kind = err["type"]
    value = err.get("input")

    if kind == "string_too_short" and isinstance(value, str) and not value.strip():
        return f"{label} is required and cannot be empty"
    if value is None and kind.endswith("_type"):
        return f"{label} is required"

    template = _MESSAGES.get(kind)
    if template is None:
        return err["msg"]

    ctx = {key: _format_bound(value) for key, value in (err.get("ctx") or {}).items()}
    if kind == "enum":
        enum_cls = _find_enum(info.annotation) if info is not None else None
        ctx["allowed"] = (
            ", ".join(member.value for member in enum_cls) if enum_cls else ctx.get("expected", "")
        )
    try:
        return template.format(label=label, **ctx)
    except KeyError:
        return err["msg"]


def _format_bound(value: Any) -> Any:
    # 1000.0 -> "1000"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _resolve_field(model: type[BaseModel], loc: tuple[Any, ...]) -> FieldInfo | None:
    current: type[BaseModel] | None = model
    info: FieldInfo | None = None
    for part in loc:
        if isinstance(part, int):
            continue
        if current is None:
            return info
        info = current.model_fields.get(part)
        if info is None:
            return None
        current = _find_model(info.annotation)
    return info


def _find_model(annotation: Any) -> type[BaseModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in get_args(annotation):
        found = _find_model(arg)
        if found is not None:
            return found
    return None


def _find_enum(annotation: Any) -> type[Enum] | None:
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return annotation
    for arg in get_args(annotation):
        found = _find_enum(arg)
        if found is not None:
            return found
    return None


def _humanise(loc: tuple[Any, ...]) -> str:
    names = [str(p) for p in loc if not isinstance(p, int)]
    if not names:
        return "Value"
    return names[-1].replace("_", " ").capitalize()


__all__ = ["SYSTEM_FIELDS", "clean_candidate", "to_field_errors", "validate_entity"]
