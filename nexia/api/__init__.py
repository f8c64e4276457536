"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from nexia.api import app

    uvicorn nexia.api:app --reload
"""

from nexia.api.app import app, create_app

__all__ = ["app", "create_app"]
