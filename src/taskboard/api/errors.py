"""Translate taskboard exceptions into JSON error responses.

| Exception                 | Status |
|---------------------------|--------|
| EntityValidationError     | 400    |
| RequestValidationError    | 400    |
| EntityNotFoundError       | 404    |
| DuplicateKeyError         | 409    |
| StorageUnavailableError   | 503    |
| StorageError              | 500    |
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskboard.core.exceptions import (
    DuplicateKeyError,
    EntityNotFoundError,
    EntityValidationError,
    StorageError,
    StorageUnavailableError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


async def _validation_error(request: Request, exc: EntityValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": exc.message,
            "errors": [error.model_dump() for error in exc.errors],
        },
    )


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body") or "body",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "errors": errors},
    )


async def _not_found(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": f"{exc.label} not found"},
    )


async def _duplicate_key(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": f"{exc.field.capitalize()} already exists", "field": exc.field},
    )


async def _storage_unavailable(request: Request, exc: StorageUnavailableError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Storage unavailable"},
    )


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Unhandled storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong!"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the taskboard exception handlers on *app*."""
    app.add_exception_handler(EntityValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(EntityNotFoundError, _not_found)  # type: ignore[arg-type]
    app.add_exception_handler(DuplicateKeyError, _duplicate_key)  # type: ignore[arg-type]
    app.add_exception_handler(StorageUnavailableError, _storage_unavailable)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, _storage_error)  # type: ignore[arg-type]


__all__ = ["register_exception_handlers"]
