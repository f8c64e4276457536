"""Notebook-level endpoints: metadata, new, save, load, export.

Routes
------
GET  /notebook           Name, timestamps, note count, current file path
POST /notebook/new       Start an empty notebook {name?}
POST /notebook/save      Save to {path?} (defaults to the remembered path)
POST /notebook/load      Replace the notebook with the file at {path}
GET  /notebook/export    The full document as it would be written to disk
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from nexia.api.schemas import NotebookInfo, NotebookLoad, NotebookNew, NotebookSave
from nexia.storage import notebook_to_dict

router = APIRouter()


@router.get("", response_model=NotebookInfo)
def info(request: Request) -> dict[str, Any]:
    return request.app.state.session.info()


@router.post("/new", response_model=NotebookInfo)
def new(body: NotebookNew, request: Request) -> dict[str, Any]:
    session = request.app.state.session
    session.new_notebook(body.name)
    return session.info()


@router.post("/save")
def save(body: NotebookSave, request: Request) -> dict[str, str]:
    session = request.app.state.session
    path = session.save_notebook(body.path)
    return {"path": str(path)}


@router.post("/load", response_model=NotebookInfo)
def load(body: NotebookLoad, request: Request) -> dict[str, Any]:
    session = request.app.state.session
    session.load_notebook(body.path)
    return session.info()


@router.get("/export")
def export(request: Request) -> dict[str, Any]:
    return notebook_to_dict(request.app.state.session.snapshot())
