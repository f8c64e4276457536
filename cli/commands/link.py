"""Commands for connecting notes and viewing the link graph."""

import typer

from cli.context import open_session, report_errors, resolve_note_id
from cli.rendering import render_link_tree

link_app = typer.Typer(help="Link notes and explore connections.")


@link_app.command("add")
@report_errors
def link_add(
    source_id: str = typer.Argument(..., help="Source note ID."),
    target_id: str = typer.Argument(..., help="Target note ID."),
) -> None:
    """Create a link from SOURCE to TARGET."""
    session = open_session()
    src = resolve_note_id(session, source_id)
    tgt = resolve_note_id(session, target_id)
    session.link_notes(src, tgt)
    session.save_notebook()
    typer.echo(f"✅ Linked: {session.get_note(src).title} --> {session.get_note(tgt).title}")


@link_app.command("rm")
@report_errors
def link_rm(
    source_id: str = typer.Argument(..., help="Source note ID."),
    target_id: str = typer.Argument(..., help="Target note ID (may no longer exist)."),
) -> None:
    """Remove the link from SOURCE to TARGET."""
    session = open_session()
    src = resolve_note_id(session, source_id)
    tgt = resolve_note_id(session, target_id)
    session.unlink_notes(src, tgt)
    session.save_notebook()
    typer.echo(f"✅ Unlinked: {session.get_note(src).title} -/-> {tgt}")


@link_app.command("tree")
@report_errors
def link_tree(
    note_id: str = typer.Argument(..., help="Root note ID."),
    depth: int = typer.Option(3, "--depth", "-d", min=1, help="How many hops to follow."),
) -> None:
    """Show outgoing links from a note as an ASCII tree."""
    session = open_session()
    root = resolve_note_id(session, note_id)
    session.get_note(root)
    typer.echo(render_link_tree(session.snapshot(), root, depth=depth))
