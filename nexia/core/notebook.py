"""Notebook — the owning collection of notes plus the backlink index.

Every link is stored twice: forward on the source note (``Note.links``) and
backward in ``Notebook._backlinks``.  All graph mutations go through this
class so the two directions stay in step.  Editing ``Note.links`` directly on
a handle from :meth:`Notebook.get_note_mut` bypasses the index; use
:meth:`Notebook.link_notes` / :meth:`Notebook.unlink_notes` instead, or call
:meth:`Notebook.rebuild_backlinks` afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, KeysView, ValuesView
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from nexia.config import settings
from nexia.core.errors import CircularLink, NoteNotFound
from nexia.core.note import Note, NoteId, utcnow


class Notebook:
    """A collection of interconnected notes.

    Args:
        name: Display name.  Defaults to ``settings.default_notebook_name``.
        allow_cycles: When ``False``, :meth:`link_notes` refuses links that
            would close a directed cycle and raises :class:`CircularLink`.
        created_at: Creation time (set to now when omitted).
        modified_at: Last modification time (``created_at`` when omitted).
    """

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        allow_cycles: bool = True,
        created_at: Optional[datetime] = None,
        modified_at: Optional[datetime] = None,
    ) -> None:
        self.name = settings.default_notebook_name if name is None else name
        self.allow_cycles = allow_cycles
        self.created_at = created_at or utcnow()
        self.modified_at = modified_at or self.created_at
        self._notes: dict[NoteId, Note] = {}
        self._backlinks: dict[NoteId, set[NoteId]] = {}

    def __repr__(self) -> str:
        return f"Notebook(name={self.name!r}, notes={len(self._notes)})"

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def is_empty(self) -> bool:
        return not self._notes

    @property
    def notes(self) -> Mapping[NoteId, Note]:
        """Read-only view of the note mapping."""
        return MappingProxyType(self._notes)

    @property
    def backlinks(self) -> dict[NoteId, frozenset[NoteId]]:
        """Snapshot of the reverse-link index."""
        return {target: frozenset(sources) for target, sources in self._backlinks.items()}

    # ------------------------------------------------------------------
    # Insertion / lookup / removal
    # ------------------------------------------------------------------
    def add_note(self, note: Note) -> NoteId:
        """Insert a caller-built note as-is and index its outgoing links.

        A note whose id is already present replaces the old one; the old
        note's outgoing edges are withdrawn from the index first.
        """
        previous = self._notes.get(note.id)
        if previous is not None:
            for target in previous.links:
                self._discard_backlink(target, previous.id)

        for target in note.links:
            self._backlinks.setdefault(target, set()).add(note.id)

        self._notes[note.id] = note
        self.touch()
        return note.id

    def create_note(self, title: str) -> NoteId:
        """Create a new note with *title*, insert it, and return its id."""
        return self.add_note(Note.create(title))

    def get_note(self, note_id: NoteId) -> Optional[Note]:
        return self._notes.get(note_id)

    def get_note_mut(self, note_id: NoteId) -> Optional[Note]:
        """Fetch a note the caller intends to modify.

        The notebook's ``modified_at`` is advanced on the assumption that the
        caller will change the note.
        """
        self.touch()
        return self._notes.get(note_id)

    def remove_note(self, note_id: NoteId) -> Optional[Note]:
        """Remove a note and every link to or from it.

        Returns the removed note, or ``None`` if *note_id* was absent.
        """
        note = self._notes.pop(note_id, None)
        if note is None:
            return None

        for target in note.links:
            self._discard_backlink(target, note_id)

        for source_id in self._backlinks.pop(note_id, set()):
            source = self._notes.get(source_id)
            if source is not None:
                source.remove_link(note_id)

        self.touch()
        return note

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------
    def link_notes(self, from_id: NoteId, to_id: NoteId) -> None:
        """Create a directed link *from_id* → *to_id*.

        Idempotent; a self link is silently ignored.

        Raises:
            NoteNotFound: If either endpoint is absent (source checked first).
            CircularLink: If cycles are disallowed and *to_id* already reaches
                *from_id*.
        """
        source = self._notes.get(from_id)
        if source is None:
            raise NoteNotFound(from_id)
        if to_id not in self._notes:
            raise NoteNotFound(to_id)
        if from_id == to_id:
            return

        if not self.allow_cycles and not source.links_to(to_id):
            if self._reaches(to_id, from_id):
                raise CircularLink(from_id, to_id)

        source.add_link(to_id)
        self._backlinks.setdefault(to_id, set()).add(from_id)
        self.touch()

    def unlink_notes(self, from_id: NoteId, to_id: NoteId) -> None:
        """Remove the link *from_id* → *to_id* if present.

        *to_id* does not have to exist, so dangling links can be cleared.

        Raises:
            NoteNotFound: If *from_id* is absent.
        """
        source = self._notes.get(from_id)
        if source is None:
            raise NoteNotFound(from_id)

        source.remove_link(to_id)
        self._discard_backlink(to_id, from_id)
        self.touch()

    def get_backlinks(self, note_id: NoteId) -> list[NoteId]:
        """Return the ids of all notes linking to *note_id* (unordered)."""
        return list(self._backlinks.get(note_id, ()))

    def rebuild_backlinks(self) -> None:
        """Recompute the reverse index from the notes' ``links``."""
        self._backlinks = {}
        for note in self._notes.values():
            for target in note.links:
                self._backlinks.setdefault(target, set()).add(note.id)

    # ------------------------------------------------------------------
    # Traversal / search
    # ------------------------------------------------------------------
    def all_notes(self) -> ValuesView[Note]:
        return self._notes.values()

    def all_note_ids(self) -> KeysView[NoteId]:
        return self._notes.keys()

    def search_by_title(self, query: str) -> list[Note]:
        """Notes whose title contains *query*, ignoring case."""
        needle = query.lower()
        return [n for n in self._notes.values() if needle in n.title.lower()]

    def search_by_content(self, query: str) -> list[Note]:
        """Notes whose content contains *query*, ignoring case."""
        needle = query.lower()
        return [n for n in self._notes.values() if needle in n.content.lower()]

    def search(self, query: str) -> list[Note]:
        """Notes whose title or content contains *query*, ignoring case."""
        needle = query.lower()
        return [
            n
            for n in self._notes.values()
            if needle in n.title.lower() or needle in n.content.lower()
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def touch(self) -> None:
        now = utcnow()
        if now > self.modified_at:
            self.modified_at = now

    def _discard_backlink(self, target: NoteId, source: NoteId) -> None:
        sources = self._backlinks.get(target)
        if sources is None:
            return
        sources.discard(source)
        if not sources:
            del self._backlinks[target]

    def _reaches(self, start: NoteId, goal: NoteId) -> bool:
        """Whether *goal* is reachable from *start* along forward links."""
        seen: set[NoteId] = set()
        stack: list[NoteId] = [start]
        while stack:
            current = stack.pop()
            if current == goal:
                return True
            if current in seen:
                continue
            seen.add(current)
            note = self._notes.get(current)
            if note is not None:
                stack.extend(note.links)
        return False

    @classmethod
    def from_notes(
        cls,
        notes: Iterable[Note],
        name: Optional[str] = None,
        **kwargs,
    ) -> Notebook:
        """Build a notebook from existing notes, indexing their links.

        Unlike repeated :meth:`add_note` calls this leaves ``modified_at``
        exactly as given, which is what a loader needs.
        """
        notebook = cls(name, **kwargs)
        for note in notes:
            notebook._notes[note.id] = note
        notebook.rebuild_backlinks()
        return notebook
