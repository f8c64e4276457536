"""Utilities for rendering notes and link graphs in the CLI."""

from __future__ import annotations

from nexia.core.note import Note, NoteId
from nexia.core.notebook import Notebook


def note_line(note: Note) -> str:
    """One-line summary used by list and search output."""
    links = f"  →{len(note.links)}" if note.links else ""
    return f"  {note.id}  {note.title!r}{links}"


def render_note(note: Note, notebook: Notebook) -> str:
    """Multi-line description of a note, its links and backlinks."""
    lines = [
        f"📝 {note.title}",
        f"   ID       : {note.id}",
        f"   Created  : {note.created_at.isoformat(timespec='seconds')}",
        f"   Modified : {note.modified_at.isoformat(timespec='seconds')}",
    ]
    if note.position is not None:
        lines.append(f"   Position : ({note.position.x:g}, {note.position.y:g})")
    if note.size is not None:
        lines.append(f"   Size     : {note.size[0]:g} x {note.size[1]:g}")
    if note.prototype is not None:
        lines.append(f"   Prototype: {_title_of(notebook, note.prototype)}")
    if note.attributes:
        lines.append("   Attributes:")
        for key, value in sorted(note.attributes.items()):
            lines.append(f"    - {key}: {value!r}")
    if note.content:
        lines.append("")
        lines.append(note.content)

    lines.append("")
    lines.append(f"   Links ({len(note.links)}):")
    for target in note.links:
        lines.append(f"    → {_title_of(notebook, target)}")
    backlinks = notebook.get_backlinks(note.id)
    lines.append(f"   Backlinks ({len(backlinks)}):")
    for source in sorted(backlinks, key=lambda s: _title_of(notebook, s)):
        lines.append(f"    ← {_title_of(notebook, source)}")
    return "\n".join(lines)


def render_link_tree(notebook: Notebook, root_id: NoteId, depth: int = 3) -> str:
    """Render outgoing links from *root_id* as an ASCII tree.

    Links back to a note already on the current path are shown once with a
    ``↺`` marker and not expanded again.
    """
    lines: list[str] = []

    def _render(note_id: NoteId, prefix: str, is_last: bool, level: int, path: frozenset) -> None:
        title = _title_of(notebook, note_id)
        if level == 0:
            lines.append(title)
            child_prefix = ""
        else:
            connector = "└── " if is_last else "├── "
            marker = " ↺" if note_id in path else ""
            lines.append(f"{prefix}{connector}{title}{marker}")
            if marker:
                return
            child_prefix = prefix + ("    " if is_last else "│   ")

        note = notebook.get_note(note_id)
        if note is None or level >= depth:
            return
        children = note.links
        count = len(children)
        for i, child_id in enumerate(children):
            _render(child_id, child_prefix, i == count - 1, level + 1, path | {note_id})

    _render(root_id, "", True, 0, frozenset())
    return "\n".join(lines)


def _title_of(notebook: Notebook, note_id: NoteId) -> str:
    note = notebook.get_note(note_id)
    return note.title if note else f"Unknown({str(note_id)[:8]})"
