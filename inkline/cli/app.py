"""
InkLine CLI entry point.

Usage:
    inkline session login TOKEN
    inkline notes list --sort title
    inkline notes new
    inkline notes edit NOTE_ID --title "Groceries" --body "milk, eggs"
    inkline notes share NOTE_ID
    inkline notes export NOTE_ID... --output notes.zip
    inkline categories add Work
    inkline prefs font 18
    inkline profile set --username ada --public
"""

import typer

from inkline.backend.core.logging import setup_logging
from inkline.cli.commands import (
    categories_app,
    notes_app,
    prefs_app,
    profile_app,
    session_app,
)

app = typer.Typer(
    name="inkline",
    help="InkLine notes from the command line.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(notes_app, name="notes")
app.add_typer(categories_app, name="categories")
app.add_typer(session_app, name="session")
app.add_typer(prefs_app, name="prefs")
app.add_typer(profile_app, name="profile")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """InkLine notes from the command line."""
    if debug:
        setup_logging(level="DEBUG", format_type="console", enable_file_logging=False)
    elif verbose:
        setup_logging(level="INFO", format_type="console", enable_file_logging=False)
    else:
        setup_logging(level="WARNING", format_type="console", enable_file_logging=False)


if __name__ == "__main__":
    app()
