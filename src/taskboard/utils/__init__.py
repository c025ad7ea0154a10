"""Utility functions and helpers."""

from taskboard.utils.db_compat import DbDialect, detect_dialect, requires_static_pool
from taskboard.utils.security import generate_entity_id, mask_database_url

__all__ = [
    "DbDialect",
    "detect_dialect",
    "generate_entity_id",
    "mask_database_url",
    "requires_static_pool",
]
