"""JSON file storage — one human-readable document per notebook."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from nexia.config import settings
from nexia.core.notebook import Notebook
from nexia.storage.base import (
    Storage,
    StorageFormatError,
    StorageIOError,
    StorageNotFound,
    StoragePath,
)
from nexia.storage.codec import notebook_from_dict, notebook_to_dict

logger = logging.getLogger(__name__)


class JsonStorage(Storage):
    """Persist notebooks as pretty-printed JSON files.

    Args:
        indent: JSON indentation.  Defaults to ``settings.json_indent``.
    """

    def __init__(self, indent: Optional[int] = None) -> None:
        self.indent = settings.json_indent if indent is None else indent

    def save(self, notebook: Notebook, path: StoragePath) -> None:
        """Write *notebook* to *path* atomically.

        The document goes to a temporary file in the same directory which is
        then renamed over *path*, so readers see either the old or the new
        file, never a partial one.
        """
        path = Path(path)
        data = notebook_to_dict(notebook)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                suffix=".tmp", prefix=f".{path.name}.", dir=path.parent
            )
        except OSError as exc:
            logger.error("Cannot write notebook to %s: %s", path, exc)
            raise StorageIOError(path, exc) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, allow_nan=False, indent=self.indent)
                f.write("\n")
            os.replace(tmp_path, path)
        except Exception as exc:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            if isinstance(exc, OSError):
                logger.error("Cannot write notebook to %s: %s", path, exc)
                raise StorageIOError(path, exc) from exc
            if isinstance(exc, (TypeError, ValueError)):
                raise StorageFormatError(path, str(exc)) from exc
            raise

        logger.info("Saved notebook %r (%d notes) to %s", notebook.name, len(notebook), path)

    def load(self, path: StoragePath) -> Notebook:
        path = Path(path)
        if not path.exists():
            raise StorageNotFound(path)

        try:
            raw = path.read_bytes()
        except OSError as exc:
            logger.error("Cannot read notebook %s: %s", path, exc)
            raise StorageIOError(path, exc) from exc

        try:
            notebook = notebook_from_dict(json.loads(raw.decode("utf-8")))
        except (ValueError, RecursionError) as exc:
            # UnicodeDecodeError, json.JSONDecodeError, DocumentError and
            # attribute validation errors are all ValueError subclasses;
            # RecursionError comes from pathologically nested documents.
            logger.warning("Rejected notebook file %s: %s", path, exc)
            raise StorageFormatError(path, str(exc)) from exc

        logger.info("Loaded notebook %r (%d notes) from %s", notebook.name, len(notebook), path)
        return notebook
