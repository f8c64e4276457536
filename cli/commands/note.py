"""Note commands for the active notebook."""

import json
from typing import Optional

import typer

from cli.context import open_session, report_errors, resolve_note_id
from cli.rendering import note_line, render_note

note_app = typer.Typer(help="Create, inspect and edit notes.")


@note_app.command("add")
@report_errors
def note_add(
    title: str = typer.Argument(..., help="Note title."),
    content: str = typer.Option("", "--content", "-c", help="Note body."),
) -> None:
    """Create a note in the active notebook."""
    session = open_session()
    note = session.create_note(title, content=content)
    session.save_notebook()
    typer.echo(f"✅ Note created: {note.id}  title={note.title!r}")


@note_app.command("list")
@report_errors
def note_list() -> None:
    """List every note in the active notebook."""
    session = open_session()
    notes = sorted(session.get_all_notes(), key=lambda n: n.created_at)
    if not notes:
        typer.echo("No notes found.")
        return
    for n in notes:
        typer.echo(note_line(n))


@note_app.command("show")
@report_errors
def note_show(
    note_id: str = typer.Argument(..., help="Note UUID or unique prefix."),
) -> None:
    """Show a note with its links and backlinks."""
    session = open_session()
    note = session.get_note(resolve_note_id(session, note_id))
    typer.echo(render_note(note, session.snapshot()))


@note_app.command("edit")
@report_errors
def note_edit(
    note_id: str = typer.Argument(..., help="Note UUID or unique prefix."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title."),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New body."),
) -> None:
    """Change a note's title and/or content."""
    if title is None and content is None:
        typer.echo("❌ Nothing to change. Pass --title and/or --content.")
        raise typer.Exit(code=1)

    session = open_session()
    note = session.update_note(resolve_note_id(session, note_id), title=title, content=content)
    session.save_notebook()
    typer.echo(f"✅ Updated: {note.title!r}")


@note_app.command("rm")
@report_errors
def note_rm(
    note_id: str = typer.Argument(..., help="Note UUID or unique prefix."),
) -> None:
    """Delete a note and every link to or from it."""
    session = open_session()
    note = session.delete_note(resolve_note_id(session, note_id))
    session.save_notebook()
    typer.echo(f"🗑️  Deleted: {note.title!r}")


@note_app.command("set-attr")
@report_errors
def note_set_attr(
    note_id: str = typer.Argument(..., help="Note UUID or unique prefix."),
    key: str = typer.Argument(..., help="Attribute name."),
    value: str = typer.Argument(..., help="Attribute value as JSON (plain text is stored as a string)."),
) -> None:
    """Set an attribute on a note."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    session = open_session()
    note = session.set_note_attribute(resolve_note_id(session, note_id), key, parsed)
    session.save_notebook()
    typer.echo(f"✅ {note.title!r}: {key} = {parsed!r}")
