"""
Note Commands.

List, create, edit, archive, share and export notes.
"""

from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from inkline.backend.core.config import get_app_config
from inkline.backend.core.utils import display_title, strip_markup
from inkline.backend.services.export import ARCHIVED_ARCHIVE_NAME, DEFAULT_ARCHIVE_NAME
from inkline.client.editor import NoteEditor, SaveStatus
from inkline.client.preferences import ListView
from inkline.client.projection import SortKey, group_by_day, preview, project
from inkline.client.sharing import share_url
from inkline.cli.workspace import console, err_console, open_workspace, run

app = typer.Typer(help="Manage notes")


def _notes_table(title: str, notes) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Preview")
    table.add_column("Updated")
    for note in notes:
        table.add_row(
            note.id,
            display_title(note.title),
            preview(note.body, length=40),
            note.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


@app.command("list")
def list_notes(
    archived: bool = typer.Option(False, "--archived", "-a", help="List archived notes"),
    query: str = typer.Option("", "--query", "-q", help="Filter by title"),
    sort: SortKey | None = typer.Option(
        None,
        "--sort",
        "-s",
        help="Sort column; repeating the saved column flips the direction",
    ),
    group: bool = typer.Option(False, "--group", "-g", help="Group by Today, Yesterday and Older"),
) -> None:
    """List notes."""
    view = ListView.ARCHIVED if archived else ListView.NOTES

    async def _list() -> None:
        async with open_workspace() as ws:
            if not await ws.notes.load():
                err_console.print("[red]Could not load notes[/red]")
                raise typer.Exit(1)
            config = ws.prefs.get_sort_config(view)
            if sort is not None:
                config = config.toggled(sort)
                ws.prefs.set_sort_config(view, config)
            source = ws.notes.archived_notes if archived else ws.notes.notes
            rows = project(source, query=query, config=config)

        heading = f"{'Archived notes' if archived else 'Notes'} ({config.key.value} {config.direction.value})"
        sections = group_by_day(rows) if group else {heading: rows}
        for title, notes in sections.items():
            if notes:
                console.print(_notes_table(title, notes))
        if not rows:
            console.print(_notes_table(heading, []))

    run(_list)


@app.command()
def new() -> None:
    """Create an empty note."""

    async def _new() -> None:
        async with open_workspace() as ws:
            if not await ws.notes.load():
                raise typer.Exit(1)
            note = await ws.notes.create()
        if note is None:
            raise typer.Exit(1)
        console.print(f"Created note [cyan]{note.id}[/cyan]")

    run(_new)


@app.command()
def show(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Show a note."""

    async def _show() -> None:
        async with open_workspace() as ws:
            await ws.notes.load()
            note = ws.notes.find(note_id)
        if note is None:
            err_console.print("[red]Note not found[/red]")
            raise typer.Exit(1)
        url = share_url(get_app_config().application.public_origin, note)
        subtitle = f"updated {note.updated_at:%Y-%m-%d %H:%M}"
        if url:
            subtitle += f" | {url}"
        console.print(Panel(strip_markup(note.body) or "", title=display_title(note.title), subtitle=subtitle))

    run(_show)


@app.command()
def edit(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    body: str | None = typer.Option(None, "--body", "-b", help="New body"),
) -> None:
    """Change a note's title or body."""
    if title is None and body is None:
        err_console.print("Nothing to change: pass --title and/or --body")
        raise typer.Exit(1)

    async def _edit() -> None:
        notes_config = get_app_config().notes
        async with open_workspace() as ws:
            await ws.notes.load()
            note = ws.notes.find(note_id)
            if note is None:
                err_console.print("[red]Note not found[/red]")
                raise typer.Exit(1)
            editor = NoteEditor(
                ws.session,
                ws.remote,
                on_saved=ws.notes.merge,
                debounce_seconds=notes_config.autosave_debounce_seconds,
                saved_display_seconds=notes_config.saved_display_seconds,
                max_body_length=notes_config.max_body_length,
            )
            editor.open(note)
            editor.update(title=title, body=body)
            if body is not None and len(body) > notes_config.max_body_length:
                err_console.print(
                    f"[yellow]Body clipped to {notes_config.max_body_length} characters[/yellow]"
                )
            await editor.flush()
            status = editor.status
            await editor.aclose()
        if status in (SaveStatus.DIRTY, SaveStatus.SAVING):
            err_console.print("[red]Save failed[/red]")
            raise typer.Exit(1)
        console.print("Saved")

    run(_edit)


@app.command()
def archive(note_ids: list[str] = typer.Argument(..., help="Note IDs")) -> None:
    """Archive notes."""

    async def _archive() -> None:
        async with open_workspace() as ws:
            ok = await ws.notes.archive(note_ids)
        if not ok:
            raise typer.Exit(1)
        console.print(f"Archived {len(note_ids)} note(s)")

    run(_archive)


@app.command()
def restore(note_ids: list[str] = typer.Argument(..., help="Note IDs")) -> None:
    """Restore archived notes."""

    async def _restore() -> None:
        async with open_workspace() as ws:
            ok = await ws.notes.restore(note_ids)
        if not ok:
            raise typer.Exit(1)
        console.print(f"Restored {len(note_ids)} note(s)")

    run(_restore)


@app.command()
def delete(
    note_ids: list[str] = typer.Argument(..., help="Note IDs"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Permanently delete notes."""
    if not yes:
        typer.confirm(f"Permanently delete {len(note_ids)} note(s)?", abort=True)

    async def _delete() -> None:
        async with open_workspace() as ws:
            deleted = await ws.notes.delete(note_ids)
        console.print(f"Deleted {len(deleted)} note(s)")

    run(_delete)


@app.command()
def share(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Toggle whether a note is publicly readable."""

    async def _share() -> None:
        async with open_workspace() as ws:
            await ws.notes.load()
            note = await ws.notes.toggle_share(note_id)
        if note is None:
            err_console.print("[red]Could not change sharing[/red]")
            raise typer.Exit(1)
        url = share_url(get_app_config().application.public_origin, note)
        console.print(f"Public: {url}" if url else "Private")

    run(_share)


@app.command()
def export(
    note_ids: list[str] = typer.Argument(..., help="Note IDs"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Archive path"),
    archived: bool = typer.Option(False, "--archived", "-a", help="Name the archive for archived notes"),
) -> None:
    """Download notes as a zip of text files."""
    filename = output.name if output else (ARCHIVED_ARCHIVE_NAME if archived else DEFAULT_ARCHIVE_NAME)
    target = output or Path(filename)

    async def _export() -> None:
        async with open_workspace() as ws:
            data = await ws.notes.export(note_ids, filename)
        if data is None:
            err_console.print("[red]Export failed[/red]")
            raise typer.Exit(1)
        target.write_bytes(data)
        console.print(f"Wrote {target}")

    run(_export)


@app.command()
def stats() -> None:
    """Show usage insights."""

    async def _stats() -> None:
        async with open_workspace() as ws:
            insights = await ws.remote.insights(ws.session.require())

        table = Table(title="Insights", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value")
        table.add_row("Total notes", f"{insights.total_notes} ({insights.active_notes} active, {insights.archived_notes} archived)")
        table.add_row("Remaining", f"{insights.remaining} of {insights.note_limit}")
        table.add_row("Created this month", str(insights.notes_this_month))
        table.add_row("Most active day", insights.most_active_day or "—")
        table.add_row("Avg words (this / last month)", f"{insights.avg_words_this_month} / {insights.avg_words_previous_month}")
        if insights.most_viewed:
            table.add_row("Most viewed", f"{insights.most_viewed.title} ({insights.most_viewed.view_count} views)")
        for item in insights.by_category:
            table.add_row(f"Category: {item.name}", str(item.value))
        console.print(table)
        for note in insights.recent:
            console.print(f"  [dim]{note.id}[/dim] {note.title}")

    run(_stats)
