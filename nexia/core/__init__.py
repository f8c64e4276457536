"""Note graph core.

Public re-exports so callers can write::

    from nexia.core import Notebook, Note, NoteNotFound
"""

from nexia.core.errors import CircularLink, NotebookError, NoteNotFound
from nexia.core.note import AttributeValue, Note, NoteId, Point2D
from nexia.core.notebook import Notebook

__all__ = [
    "AttributeValue",
    "CircularLink",
    "Note",
    "NoteId",
    "NoteNotFound",
    "Notebook",
    "NotebookError",
    "Point2D",
]
