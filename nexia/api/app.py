"""FastAPI application factory.

Lifespan
--------
On startup the app attaches a single :class:`~nexia.session.NotebookSession`
(shared across all requests via ``request.app.state.session``).  Unless a
session is passed to :func:`create_app`, the notebook at
``settings.default_notebook_path`` is opened if it exists.  The session's
lock serialises access from concurrent requests.

Routers
-------
    /notes     — note CRUD, backlinks, attributes
    /links     — link / unlink
    /search    — substring search
    /notebook  — metadata, new, save, load, export
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nexia.api.errors import register_exception_handlers
from nexia.api.routers import links as links_router
from nexia.api.routers import notebook as notebook_router
from nexia.api.routers import notes as notes_router
from nexia.api.routers import search as search_router
from nexia.config import settings
from nexia.logging_setup import setup_logging
from nexia.session import NotebookSession
from nexia.storage import StorageError

logger = logging.getLogger(__name__)


def _default_session() -> NotebookSession:
    session = NotebookSession()
    path = settings.default_notebook_path
    if path.exists():
        try:
            session.load_notebook(path)
        except StorageError as exc:
            logger.error("Could not open %s, starting with an empty notebook: %s", path, exc)
        else:
            logger.info("Opened %s", path)
    return session


def create_app(session: Optional[NotebookSession] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(to_file=False)
        app.state.session = session if session is not None else _default_session()
        yield

    app = FastAPI(
        title="Nexia API",
        description=(
            "Local HTTP interface to a Nexia notebook: note CRUD, links and "
            "backlinks, substring search, and notebook file save/load."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(notes_router.router, prefix="/notes", tags=["notes"])
    app.include_router(links_router.router, prefix="/links", tags=["links"])
    app.include_router(search_router.router, prefix="/search", tags=["search"])
    app.include_router(notebook_router.router, prefix="/notebook", tags=["notebook"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn nexia.api.app:app --reload
app = create_app()
