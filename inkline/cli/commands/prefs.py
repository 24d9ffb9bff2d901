"""
Preference Commands.
"""

import typer
from rich.table import Table

from inkline.client.preferences import MAX_FONT_SIZE, MIN_FONT_SIZE, ListView, PreferenceStore
from inkline.cli.workspace import console

app = typer.Typer(help="Local preferences")


@app.command()
def show() -> None:
    """Show stored preferences."""
    prefs = PreferenceStore()
    table = Table(show_header=True)
    table.add_column("Preference", style="cyan")
    table.add_column("Value")
    for view in ListView:
        config = prefs.get_sort_config(view)
        table.add_row(f"{view.value} sort", f"{config.key.value} {config.direction.value}")
    table.add_row("editor font size", str(prefs.font_size))
    console.print(table)


@app.command()
def font(
    size: int = typer.Argument(..., help=f"Font size ({MIN_FONT_SIZE}-{MAX_FONT_SIZE})"),
) -> None:
    """Set the editor font size. Out-of-range values are clamped."""
    prefs = PreferenceStore()
    prefs.font_size = size
    console.print(f"Editor font size: {prefs.font_size}")
