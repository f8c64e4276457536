"""Conversion between notebooks and plain JSON-compatible dicts.

Optional note fields are omitted when empty or absent, and a missing field
loads the same as an empty one.  The backlink index is written for
readability but always recomputed on load.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime, timezone
from typing import Any

from nexia.core.note import Note, Point2D
from nexia.core.notebook import Notebook


class DocumentError(ValueError):
    """A document does not describe a valid notebook or note."""


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def _dump_time(value: datetime) -> str:
    return value.isoformat()


def _load_time(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise DocumentError(f"expected an ISO-8601 timestamp, got {raw!r}")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        value = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise DocumentError(f"bad timestamp {raw!r}") from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _load_id(raw: Any) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError as exc:
        raise DocumentError(f"bad note id {raw!r}") from exc


def _load_float(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise DocumentError(f"expected a number, got {raw!r}")
    if not math.isfinite(raw):
        raise DocumentError(f"expected a finite number, got {raw!r}")
    return float(raw)


def _load_text(data: dict, key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise DocumentError(f"{key} must be a string, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

def note_to_dict(note: Note) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": str(note.id),
        "title": note.title,
        "content": note.content,
    }
    if note.position is not None:
        data["position"] = {"x": note.position.x, "y": note.position.y}
    if note.size is not None:
        data["size"] = [note.size[0], note.size[1]]
    data["created_at"] = _dump_time(note.created_at)
    data["modified_at"] = _dump_time(note.modified_at)
    if note.links:
        data["links"] = [str(target) for target in note.links]
    if note.prototype is not None:
        data["prototype"] = str(note.prototype)
    if note.attributes:
        data["attributes"] = dict(note.attributes)
    return data


def note_from_dict(data: Any) -> Note:
    if not isinstance(data, dict):
        raise DocumentError(f"expected a note object, got {type(data).__name__}")
    try:
        position = data.get("position")
        size = data.get("size")
        if size is not None and (not isinstance(size, list) or len(size) != 2):
            raise DocumentError(f"size must be a [width, height] pair, got {size!r}")
        prototype = data.get("prototype")
        attributes = data.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise DocumentError("attributes must be an object")

        return Note(
            id=_load_id(data["id"]),
            title=_load_text(data, "title"),
            content=_load_text(data, "content"),
            position=(
                Point2D(_load_float(position["x"]), _load_float(position["y"]))
                if position is not None
                else None
            ),
            size=(_load_float(size[0]), _load_float(size[1])) if size is not None else None,
            created_at=_load_time(data["created_at"]),
            modified_at=_load_time(data["modified_at"]),
            links=[_load_id(target) for target in data.get("links") or []],
            prototype=_load_id(prototype) if prototype is not None else None,
            attributes=attributes,
        )
    except KeyError as exc:
        raise DocumentError(f"note is missing field {exc.args[0]!r}") from exc
    except TypeError as exc:
        raise DocumentError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Notebooks
# ---------------------------------------------------------------------------

def notebook_to_dict(notebook: Notebook) -> dict[str, Any]:
    data: dict[str, Any] = {
        "notes": {str(note.id): note_to_dict(note) for note in notebook.all_notes()},
    }
    backlinks = {
        str(target): sorted(str(source) for source in sources)
        for target, sources in notebook.backlinks.items()
        if sources
    }
    if backlinks:
        data["backlinks"] = backlinks
    data["name"] = notebook.name
    data["created_at"] = _dump_time(notebook.created_at)
    data["modified_at"] = _dump_time(notebook.modified_at)
    if not notebook.allow_cycles:
        data["allow_cycles"] = False
    return data


def notebook_from_dict(data: Any) -> Notebook:
    """Rebuild a notebook from :func:`notebook_to_dict` output.

    Raises:
        DocumentError: If *data* is not a valid notebook document.
    """
    if not isinstance(data, dict):
        raise DocumentError(f"expected a notebook object, got {type(data).__name__}")

    raw_notes = data.get("notes")
    if raw_notes is None:
        raw_notes = {}
    if not isinstance(raw_notes, dict):
        raise DocumentError("notes must be an object keyed by note id")

    notes: list[Note] = []
    for key, raw in raw_notes.items():
        note = note_from_dict(raw)
        if _load_id(key) != note.id:
            raise DocumentError(f"note key {key!r} does not match its id {note.id}")
        notes.append(note)

    try:
        name = data["name"]
        created_at = _load_time(data["created_at"])
        modified_at = _load_time(data["modified_at"])
    except KeyError as exc:
        raise DocumentError(f"notebook is missing field {exc.args[0]!r}") from exc
    if not isinstance(name, str):
        raise DocumentError("name must be a string")
    allow_cycles = data.get("allow_cycles", True)
    if not isinstance(allow_cycles, bool):
        raise DocumentError(f"allow_cycles must be true or false, got {allow_cycles!r}")

    return Notebook.from_notes(
        notes,
        name,
        allow_cycles=allow_cycles,
        created_at=created_at,
        modified_at=modified_at,
    )
