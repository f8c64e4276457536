"""Link endpoints.

Routes
------
POST   /links                      Link two notes {from_id, to_id}
DELETE /links/{from_id}/{to_id}    Remove a link (target may be missing)
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from nexia.api.schemas import LinkRequest

router = APIRouter()


@router.post("", status_code=201)
def link(body: LinkRequest, request: Request) -> dict[str, str]:
    """Create a directed link.  Repeating the call is a no-op."""
    session = request.app.state.session
    session.link_notes(body.from_id, body.to_id)
    return {"from_id": body.from_id, "to_id": body.to_id}


@router.delete("/{from_id}/{to_id}")
def unlink(from_id: str, to_id: str, request: Request) -> Response:
    session = request.app.state.session
    session.unlink_notes(from_id, to_id)
    return Response(status_code=204)
