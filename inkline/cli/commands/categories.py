"""
Category Commands.
"""

import typer
from rich.table import Table

from inkline.cli.workspace import console, err_console, open_workspace, run

app = typer.Typer(help="Organise notes into categories")


@app.command("list")
def list_categories() -> None:
    """List your categories."""

    async def _list() -> None:
        async with open_workspace() as ws:
            categories = await ws.remote.list_categories(ws.session.require())
        table = Table(show_header=True)
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        for category in categories:
            table.add_row(category.id, category.name)
        console.print(table)

    run(_list)


@app.command()
def add(name: str = typer.Argument(..., help="Category name")) -> None:
    """Create a category, or find the existing one with the same name."""

    async def _add() -> None:
        async with open_workspace() as ws:
            category = await ws.remote.upsert_category(ws.session.require(), name)
        console.print(f"[cyan]{category.name}[/cyan] {category.id}")

    run(_add)


@app.command()
def remove(category_id: str = typer.Argument(..., help="Category ID")) -> None:
    """Delete a category. Its notes become unassigned."""

    async def _remove() -> None:
        async with open_workspace() as ws:
            await ws.remote.delete_category(ws.session.require(), category_id)
        console.print("Category deleted")

    run(_remove)


@app.command()
def assign(
    note_id: str = typer.Argument(..., help="Note ID"),
    category_id: str = typer.Argument(None, help="Category ID; omit to clear"),
) -> None:
    """Put a note in a category."""

    async def _assign() -> None:
        async with open_workspace() as ws:
            if not await ws.notes.load():
                raise typer.Exit(1)
            note = await ws.notes.assign_category(note_id, category_id)
        if note is None:
            err_console.print("[red]Could not assign category[/red]")
            raise typer.Exit(1)
        console.print("Category updated")

    run(_assign)
