"""Identifier generation and log-safety helpers."""

import re
import secrets

_URL_CREDENTIALS_RE = re.compile(r"://([^:/@]+):([^@]+)@")


def generate_entity_id() -> str:
    """Generate an opaque entity id.

    Uses cryptographically secure random generation. The result is a
    24-character lowercase hex string, the same width as a document-store
    object id, so ids from imported data and generated ids look alike.

    Example:
        ```python
        entity_id = generate_entity_id()
        # Returns: "65a1f0c2e4b0a1b2c3d4e5f6"
        ```
    """
    return secrets.token_hex(12)


def mask_database_url(url: str) -> str:
    """Replace the password in a database URL with ``***``.

    Example:
        ```python
        mask_database_url("postgresql+asyncpg://app:s3cret@db/taskboard")
        # Returns: "postgresql+asyncpg://app:***@db/taskboard"
        ```
    """
    return _URL_CREDENTIALS_RE.sub(r"://\1:***@", url)
