"""Configuration management for taskboard.

Settings load from environment variables (``TASKBOARD_`` prefix) and an
optional ``.env`` file, validated by Pydantic Settings.
"""

from __future__ import annotations

import logging
import re
import warnings
from enum import StrEnum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskboard.utils.db_compat import DbDialect, detect_dialect


class StorageBackend(StrEnum):
    """Which :class:`~taskboard.storage.document_store.DocumentStore` to build."""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"


class TaskboardConfig(BaseSettings):
    """Main configuration for taskboard.

    Example:
        ```python
        # Using environment variables
        # TASKBOARD_DATABASE_URL=postgresql+asyncpg://...
        # TASKBOARD_REVALIDATE_DUE_DATE_ON_SAVE=true

        config = TaskboardConfig()

        # Or programmatically
        config = TaskboardConfig(
            database_url="sqlite+aiosqlite:///./taskboard.db",
            storage_backend="sqlalchemy",
        )
        ```

    Attributes:
        database_url: Document store connection URL
        storage_backend: ``sqlalchemy`` (default) or ``memory``
        revalidate_due_date_on_save: Re-check "due date in the future" on
            every task write, not only writes that set the due date
        log_level: Level applied to the ``taskboard`` logger hierarchy
        api_prefix: URL prefix for the bundled FastAPI routers
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __str__(self) -> str:
        """String representation with masked secrets."""
        result = super().__repr__()
        return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", result)

    ##########################
    # Storage Configuration  #
    ##########################

    storage_backend: StorageBackend = Field(
        default=StorageBackend.SQLALCHEMY,
        description="Document store implementation",
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./taskboard.db",
        description="Document store connection URL",
    )

    database_pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Database connection pool size",
    )

    database_max_overflow: int = Field(
        default=20,
        ge=0,
        le=200,
        description="Max overflow connections beyond pool size",
    )

    database_echo: bool = Field(
        default=False,
        description="Enable SQL query logging (use only in development)",
    )

    #####################
    # Validation Rules  #
    #####################

    revalidate_due_date_on_save: bool = Field(
        default=False,
        description=(
            "Reject any task write whose stored due date is no longer in the "
            "future, even when the write does not touch due_date"
        ),
    )

    ###########
    # Runtime #
    ###########

    log_level: str = Field(
        default="INFO",
        description="Log level for the taskboard logger",
    )

    api_prefix: str = Field(
        default="/api",
        description="URL prefix for the bundled routers",
    )

    ##############
    # Validators #
    ##############

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Normalise the URL and warn about synchronous driver schemes."""
        url_str = str(v).strip().rstrip("/")
        if detect_dialect(url_str) == DbDialect.UNKNOWN:
            warnings.warn(
                f"Unrecognised database URL scheme in {url_str.split('://')[0]!r}; "
                "JSON predicates will be evaluated in Python.",
                stacklevel=4,
            )
        _SYNC_ONLY_SCHEMES = ("postgresql://", "sqlite://", "mysql://")
        if any(url_str.startswith(s) for s in _SYNC_ONLY_SCHEMES):
            warnings.warn(
                "Database URL uses a synchronous driver scheme. "
                "Use an async driver instead (e.g. postgresql+asyncpg, "
                "sqlite+aiosqlite, mysql+aiomysql).",
                stacklevel=4,
            )
        return url_str

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        prefix = v.strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            raise ValueError("api_prefix must start with '/'")
        return prefix


__all__ = ["StorageBackend", "TaskboardConfig"]
