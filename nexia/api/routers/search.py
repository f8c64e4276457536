"""Search endpoint — case-insensitive substring match.

Routes
------
GET /search?q=<query>&field=all|title|content
"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Request

from nexia.api.schemas import NoteResponse, note_response

router = APIRouter()


@router.get("", response_model=list[NoteResponse])
def search(
    request: Request,
    q: str = "",
    field: Literal["all", "title", "content"] = "all",
) -> list[dict[str, Any]]:
    """Search the current notebook.

    Args:
        q: Substring to look for.  An empty query matches every note.
        field: ``title``, ``content``, or ``all`` (either of the two).
    """
    session = request.app.state.session
    return [note_response(n) for n in session.search_notes(q, field=field)]
