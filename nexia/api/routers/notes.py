"""CRUD endpoints for notes.

Routes
------
POST   /notes                          Create a new note
GET    /notes                          List all notes
GET    /notes/{note_id}                Fetch a single note by UUID
PATCH  /notes/{note_id}                Update title and/or content
DELETE /notes/{note_id}                Delete a note (links cascade)
GET    /notes/{note_id}/backlinks      IDs of notes linking to this one
PUT    /notes/{note_id}/attributes/{key}  Set one attribute value
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from nexia.api.schemas import AttributeSet, NoteCreate, NoteResponse, NoteUpdate, note_response

router = APIRouter()


@router.post("", response_model=NoteResponse, status_code=201)
def create(body: NoteCreate, request: Request) -> dict[str, Any]:
    """Create a new note."""
    session = request.app.state.session
    note = session.create_note(body.title, content=body.content)
    return note_response(note)


@router.get("", response_model=list[NoteResponse])
def list_all(request: Request) -> list[dict[str, Any]]:
    """Return every note in the current notebook."""
    session = request.app.state.session
    return [note_response(n) for n in session.get_all_notes()]


@router.get("/{note_id}", response_model=NoteResponse)
def get_one(note_id: str, request: Request) -> dict[str, Any]:
    session = request.app.state.session
    return note_response(session.get_note(note_id))


@router.patch("/{note_id}", response_model=NoteResponse)
def update(note_id: str, body: NoteUpdate, request: Request) -> dict[str, Any]:
    """Update a note's title and/or content."""
    if body.title is None and body.content is None:
        raise HTTPException(status_code=422, detail="No fields provided to update.")
    session = request.app.state.session
    note = session.update_note(note_id, title=body.title, content=body.content)
    return note_response(note)


@router.delete("/{note_id}")
def remove(note_id: str, request: Request) -> Response:
    """Delete a note and every link to or from it."""
    session = request.app.state.session
    session.delete_note(note_id)
    return Response(status_code=204)


@router.get("/{note_id}/backlinks", response_model=list[str])
def backlinks(note_id: str, request: Request) -> list[str]:
    session = request.app.state.session
    return sorted(str(source) for source in session.get_backlinks(note_id))


@router.put("/{note_id}/attributes/{key}", response_model=NoteResponse)
def set_attribute(note_id: str, key: str, body: AttributeSet, request: Request) -> dict[str, Any]:
    session = request.app.state.session
    note = session.set_note_attribute(note_id, key, body.value)
    return note_response(note)
