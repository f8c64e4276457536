"""Pydantic request/response schemas shared by the routers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, JsonValue

from nexia.core.note import Note


class NoteCreate(BaseModel):
    title: str
    content: str = ""


class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class AttributeSet(BaseModel):
    value: JsonValue


class PositionModel(BaseModel):
    x: float
    y: float


class NoteResponse(BaseModel):
    id: str
    title: str
    content: str
    position: Optional[PositionModel] = None
    size: Optional[tuple[float, float]] = None
    created_at: datetime
    modified_at: datetime
    links: list[str]
    prototype: Optional[str] = None
    attributes: dict[str, Any]


class LinkRequest(BaseModel):
    from_id: str
    to_id: str


class NotebookNew(BaseModel):
    name: Optional[str] = None


class NotebookSave(BaseModel):
    path: Optional[str] = None


class NotebookLoad(BaseModel):
    path: str


class NotebookInfo(BaseModel):
    name: str
    created_at: datetime
    modified_at: datetime
    note_count: int
    allow_cycles: bool
    file_path: Optional[str] = None


def note_response(note: Note) -> dict[str, Any]:
    return {
        "id": str(note.id),
        "title": note.title,
        "content": note.content,
        "position": (
            {"x": note.position.x, "y": note.position.y} if note.position else None
        ),
        "size": note.size,
        "created_at": note.created_at,
        "modified_at": note.modified_at,
        "links": [str(target) for target in note.links],
        "prototype": str(note.prototype) if note.prototype else None,
        "attributes": note.attributes,
    }
