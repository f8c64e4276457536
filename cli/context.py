"""Persistent state management for the Nexia CLI.

Tracks the "active notebook" file and user preferences.
Stored in `<workspace>/cli/context.json`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from functools import wraps
from pathlib import Path
from typing import Any, Callable

import typer

from nexia.config import settings
from nexia.core.errors import NotebookError
from nexia.core.note import NoteId
from nexia.session import NotebookSession, SessionError, parse_note_id
from nexia.storage import StorageError

logger = logging.getLogger(__name__)


@dataclass
class CliContext:
    active_notebook: str | None = None
    user_preferences: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: str) -> CliContext:
        try:
            raw = json.loads(data)
            return cls(**raw)
        except (json.JSONDecodeError, TypeError):
            return cls()


def _get_context_path() -> Path:
    """`<workspace>/cli/context.json`."""
    return settings.cli_config_dir / "context.json"


def load_context() -> CliContext:
    """Read `context.json`; a missing or unreadable file yields the defaults."""
    path = _get_context_path()
    if not path.exists():
        return CliContext()

    try:
        return CliContext.from_json(path.read_text(encoding="utf-8"))
    except OSError:
        logger.warning("Could not read %s; using defaults", path)
        return CliContext()


def save_context(ctx: CliContext) -> None:
    """Persist the active notebook and preferences."""
    settings.cli_config_dir.mkdir(parents=True, exist_ok=True)
    _get_context_path().write_text(ctx.to_json(), encoding="utf-8")


def active_notebook_path() -> Path:
    """The active notebook file, falling back to the workspace default."""
    ctx = load_context()
    if ctx.active_notebook:
        return Path(ctx.active_notebook)
    return settings.default_notebook_path


def open_session() -> NotebookSession:
    """Open the active notebook, or an empty one bound to its path."""
    path = active_notebook_path()
    if path.exists():
        session = NotebookSession()
        session.load_notebook(path)
        return session
    return NotebookSession(file_path=path)


def resolve_note_id(session: NotebookSession, raw: str) -> NoteId:
    """Accept a full UUID or a unique prefix of one (as printed by ``note list``)."""
    try:
        return parse_note_id(raw)
    except SessionError:
        pass

    prefix = raw.lower()
    matches = [n.id for n in session.get_all_notes() if str(n.id).startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise SessionError(f"No note matches {raw!r}")
    raise SessionError(f"Ambiguous note id {raw!r} ({len(matches)} matches)")


def report_errors(func: Callable) -> Callable:
    """Decorator for CLI commands: print notebook/storage errors and exit 1."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (NotebookError, StorageError, SessionError, ValueError) as e:
            logger.info("Command %s failed: %s", func.__name__, e)
            typer.echo(f"❌ {e}")
            raise typer.Exit(code=1)

    return wrapper
