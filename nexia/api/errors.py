"""Translate core, storage and session errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nexia.core.errors import CircularLink, NotebookError, NoteNotFound
from nexia.session import InvalidNoteId, NoFilePath, SessionError
from nexia.storage import (
    StorageError,
    StorageFormatError,
    StorageIOError,
    StorageNotFound,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases.
_STATUS_MAP: list[tuple[type[Exception], int]] = [
    (InvalidNoteId, 422),
    (NoFilePath, 400),
    (NoteNotFound, 404),
    (CircularLink, 409),
    (StorageNotFound, 404),
    (StorageFormatError, 422),
    (StorageIOError, 500),
    (ValueError, 422),
]


def status_for(exc: Exception) -> int:
    for exc_type, status in _STATUS_MAP:
        if isinstance(exc, exc_type):
            return status
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Install one JSON handler per error family."""

    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected (%d): %s", request.method, request.url.path, status, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    for family in (NotebookError, StorageError, SessionError, ValueError):
        app.add_exception_handler(family, _handle)
