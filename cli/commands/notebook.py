"""Notebook file commands: create, open, inspect."""

from pathlib import Path
from typing import Optional

import typer

from nexia.config import NOTEBOOK_SUFFIX, settings
from nexia.session import NotebookSession
from cli.context import (
    active_notebook_path,
    load_context,
    open_session,
    report_errors,
    save_context,
)

notebook_app = typer.Typer(help="Create, open and inspect notebook files.")


def _set_active(path: Path) -> None:
    ctx = load_context()
    ctx.active_notebook = str(path.resolve())
    save_context(ctx)


@notebook_app.command("new")
@report_errors
def notebook_new(
    name: str = typer.Argument(..., help="Name of the new notebook."),
    path: Optional[Path] = typer.Option(
        None, "--path", help=f"Notebook file. Defaults to <workspace>/<name>{NOTEBOOK_SUFFIX}."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Create an empty notebook file and make it active."""
    if path is None:
        safe_name = "".join(c for c in name if c.isalnum() or c in (" ", "-", "_")).strip()
        safe_name = safe_name.replace(" ", "_") or "notebook"
        path = settings.workspace_dir / f"{safe_name}{NOTEBOOK_SUFFIX}"

    if path.exists() and not force:
        typer.echo(f"❌ {path} already exists. Use --force to overwrite.")
        raise typer.Exit(code=1)

    session = NotebookSession()
    session.new_notebook(name)
    saved = session.save_notebook(path)
    _set_active(saved)
    typer.echo(f"✅ Notebook created: {name} ({saved})")


@notebook_app.command("open")
@report_errors
def notebook_open(
    path: Path = typer.Argument(..., help="Existing notebook file."),
) -> None:
    """Switch the active notebook to an existing file."""
    session = NotebookSession()
    notebook = session.load_notebook(path)
    _set_active(path)
    typer.echo(f"📂 Switched to notebook: {notebook.name} ({len(notebook)} notes)")


@notebook_app.command("info")
@report_errors
def notebook_info() -> None:
    """Show a summary of the active notebook."""
    path = active_notebook_path()
    session = open_session()
    info = session.info()

    typer.echo(f"\n📓 Notebook: {info['name']}")
    typer.echo(f"   File    : {path}{'' if path.exists() else ' (not saved yet)'}")
    typer.echo("-" * 40)
    typer.echo(f"   Notes   : {info['note_count']}")
    typer.echo(f"   Created : {info['created_at'].isoformat(timespec='seconds')}")
    typer.echo(f"   Modified: {info['modified_at'].isoformat(timespec='seconds')}")
    if not info["allow_cycles"]:
        typer.echo("   Cycles  : disallowed")
    typer.echo("")
