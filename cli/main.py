"""Nexia CLI — entry-point for working with notebook files.

Usage:
    nexia --help
    python cli/main.py --help

Command groups:
    notebook  → create / open / inspect notebook files
    note      → add, list, show, edit, delete notes and set attributes
    link      → connect notes and print link trees
    search    → substring search over titles and content
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from nexia.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from nexia.logging_setup import setup_logging
from cli.commands.link import link_app
from cli.commands.note import note_app
from cli.commands.notebook import notebook_app
from cli.context import open_session, report_errors
from cli.rendering import note_line

app = typer.Typer(
    name="nexia",
    help="Nexia personal knowledge-base CLI.",
    no_args_is_help=True,
)

app.add_typer(notebook_app, name="notebook")
app.add_typer(note_app, name="note")
app.add_typer(link_app, name="link")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Also log to stderr."),
) -> None:
    setup_logging(to_file=True, console=verbose)


@app.command("search")
@report_errors
def search(
    query: str = typer.Argument(..., help="Text to look for (case-insensitive)."),
    field: str = typer.Option("all", "--field", "-f", help="Where to look: all | title | content."),
) -> None:
    """Search notes in the active notebook."""
    session = open_session()
    results = session.search_notes(query, field=field)
    if not results:
        typer.echo(f"No results for {query!r}.")
        return
    typer.echo(f"🔍 {len(results)} result(s) for {query!r}:")
    for n in sorted(results, key=lambda n: n.title.lower()):
        typer.echo(note_line(n))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
