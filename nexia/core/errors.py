"""Errors raised by notebook graph operations."""

from __future__ import annotations

from uuid import UUID


class NotebookError(Exception):
    """Base class for failures of a notebook operation."""


class NoteNotFound(NotebookError):
    """A referenced note id does not exist in the notebook."""

    def __init__(self, note_id: UUID) -> None:
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")


class CircularLink(NotebookError):
    """Linking *source_id* to *target_id* would close a cycle.

    Only raised by notebooks created with ``allow_cycles=False``.
    """

    def __init__(self, source_id: UUID, target_id: UUID) -> None:
        self.source_id = source_id
        self.target_id = target_id
        super().__init__(f"Cannot create circular link: {source_id} -> {target_id}")
