"""Host-side session: the current notebook, its file path, and a lock.

This is the boundary a host application talks to.  Identifiers arrive as
strings and are parsed here; the core only ever sees ``UUID`` values.  Every
operation holds ``self._lock`` for its whole duration, so one session can be
shared between threads (e.g. API worker threads).

Methods return copies of notes rather than the live objects so callers cannot
mutate the graph behind the lock.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from pathlib import Path
from typing import Optional, Union

from nexia.core.note import Note, NoteId
from nexia.core.notebook import Notebook
from nexia.core.errors import NoteNotFound
from nexia.storage import JsonStorage, Storage

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Base class for boundary-level failures."""


class InvalidNoteId(SessionError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Invalid note ID: {raw!r}")


class NoFilePath(SessionError):
    def __init__(self) -> None:
        super().__init__("No file path specified")


def parse_note_id(raw: Union[str, NoteId]) -> NoteId:
    """Turn a textual identifier into a ``NoteId`` or raise ``InvalidNoteId``."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(raw)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidNoteId(str(raw)) from exc


class NotebookSession:
    """The notebook a host is currently working on.

    Args:
        notebook: Initial notebook.  A fresh untitled one when omitted.
        storage: Persistence backend.  Defaults to :class:`JsonStorage`.
        file_path: Where the notebook was loaded from / last saved to.
    """

    def __init__(
        self,
        notebook: Optional[Notebook] = None,
        storage: Optional[Storage] = None,
        file_path: Optional[Path] = None,
    ) -> None:
        self._notebook = notebook if notebook is not None else Notebook()
        self._storage = storage if storage is not None else JsonStorage()
        self._file_path = file_path
        self._lock = threading.Lock()

    @property
    def file_path(self) -> Optional[Path]:
        with self._lock:
            return self._file_path

    def info(self) -> dict:
        """Notebook metadata for display."""
        with self._lock:
            nb = self._notebook
            return {
                "name": nb.name,
                "created_at": nb.created_at,
                "modified_at": nb.modified_at,
                "note_count": len(nb),
                "allow_cycles": nb.allow_cycles,
                "file_path": str(self._file_path) if self._file_path else None,
            }

    def snapshot(self) -> Notebook:
        """Deep copy of the current notebook."""
        with self._lock:
            return copy.deepcopy(self._notebook)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------
    def create_note(self, title: str, content: str = "") -> Note:
        with self._lock:
            note = Note.create(title)
            if content:
                note.set_content(content)
            self._notebook.add_note(note)
            logger.debug("Created note %s", note.id)
            return copy.deepcopy(note)

    def get_note(self, note_id: Union[str, NoteId]) -> Note:
        nid = parse_note_id(note_id)
        with self._lock:
            note = self._notebook.get_note(nid)
            if note is None:
                raise NoteNotFound(nid)
            return copy.deepcopy(note)

    def get_all_notes(self) -> list[Note]:
        with self._lock:
            return [copy.deepcopy(n) for n in self._notebook.all_notes()]

    def update_note_title(self, note_id: Union[str, NoteId], title: str) -> Note:
        return self._update(note_id, title=title)

    def update_note_content(self, note_id: Union[str, NoteId], content: str) -> Note:
        return self._update(note_id, content=content)

    def update_note(
        self,
        note_id: Union[str, NoteId],
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        return self._update(note_id, title=title, content=content)

    def set_note_attribute(self, note_id: Union[str, NoteId], key: str, value: object) -> Note:
        nid = parse_note_id(note_id)
        with self._lock:
            note = self._require(nid)
            note.set_attribute(key, value)
            return copy.deepcopy(note)

    def delete_note(self, note_id: Union[str, NoteId]) -> Note:
        nid = parse_note_id(note_id)
        with self._lock:
            note = self._notebook.remove_note(nid)
            if note is None:
                raise NoteNotFound(nid)
            logger.debug("Deleted note %s", nid)
            return note

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------
    def link_notes(self, from_id: Union[str, NoteId], to_id: Union[str, NoteId]) -> None:
        source, target = parse_note_id(from_id), parse_note_id(to_id)
        with self._lock:
            self._notebook.link_notes(source, target)

    def unlink_notes(self, from_id: Union[str, NoteId], to_id: Union[str, NoteId]) -> None:
        source, target = parse_note_id(from_id), parse_note_id(to_id)
        with self._lock:
            self._notebook.unlink_notes(source, target)

    def get_backlinks(self, note_id: Union[str, NoteId]) -> list[NoteId]:
        nid = parse_note_id(note_id)
        with self._lock:
            if nid not in self._notebook:
                raise NoteNotFound(nid)
            return self._notebook.get_backlinks(nid)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def search_notes(self, query: str, field: str = "all") -> list[Note]:
        """Case-insensitive substring search over ``title``, ``content`` or both."""
        with self._lock:
            if field == "title":
                results = self._notebook.search_by_title(query)
            elif field == "content":
                results = self._notebook.search_by_content(query)
            elif field == "all":
                results = self._notebook.search(query)
            else:
                raise ValueError(f"Unknown search field {field!r}")
            return [copy.deepcopy(n) for n in results]

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def save_notebook(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Save to *path* (remembered for later) or to the remembered path.

        Raises:
            NoFilePath: Neither *path* nor a remembered path is available.
            StorageError: The save itself failed.
        """
        with self._lock:
            if path is not None:
                save_path = Path(path)
            elif self._file_path is not None:
                save_path = self._file_path
            else:
                raise NoFilePath()

            self._storage.save(self._notebook, save_path)
            self._file_path = save_path
            return save_path

    def load_notebook(self, path: Union[str, Path]) -> Notebook:
        """Replace the current notebook with the one stored at *path*.

        On failure the current notebook and path are left untouched.
        """
        load_path = Path(path)
        loaded = self._storage.load(load_path)
        with self._lock:
            self._notebook = loaded
            self._file_path = load_path
            return copy.deepcopy(loaded)

    def new_notebook(self, name: Optional[str] = None) -> Notebook:
        """Start an empty notebook and forget the remembered path."""
        with self._lock:
            self._notebook = Notebook(name)
            self._file_path = None
            logger.info("Started new notebook %r", self._notebook.name)
            return copy.deepcopy(self._notebook)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require(self, nid: NoteId) -> Note:
        note = self._notebook.get_note_mut(nid)
        if note is None:
            raise NoteNotFound(nid)
        return note

    def _update(
        self,
        note_id: Union[str, NoteId],
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        nid = parse_note_id(note_id)
        with self._lock:
            note = self._require(nid)
            if title is not None:
                note.set_title(title)
            if content is not None:
                note.set_content(content)
            return copy.deepcopy(note)
