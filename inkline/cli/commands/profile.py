"""
Profile Commands.
"""

from typing import Any

import typer
from rich.table import Table

from inkline.cli.workspace import console, err_console, open_workspace, run

app = typer.Typer(help="View and edit profiles")


def _profile_table(profile, own: bool) -> Table:
    name = profile.display_name or profile.username
    table = Table(title="My Profile" if own else f"{name}'s Profile", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Username", f"@{profile.username}")
    table.add_row("Display name", profile.display_name or "-")
    table.add_row("Bio", profile.bio or "No bio yet.")
    table.add_row("Public notes", str(profile.public_notes_count))
    table.add_row("Joined", f"{profile.created_at:%Y-%m-%d}")
    table.add_row("Last updated", f"{profile.updated_at:%Y-%m-%d}")
    if own:
        table.add_row("Visibility", "public" if profile.is_public else "private")
    return table


@app.command()
def show(profile_id: str = typer.Argument("me", help="User ID; defaults to your own")) -> None:
    """Show a profile."""

    async def _show() -> None:
        async with open_workspace() as ws:
            identity = ws.session.require()
            profile = await ws.remote.get_profile(identity, profile_id)
        console.print(_profile_table(profile, own=profile.id == identity.user_id))

    run(_show)


@app.command("set")
def set_profile(
    username: str | None = typer.Option(None, "--username", "-u", help="Unique username"),
    display_name: str | None = typer.Option(None, "--display-name", "-n", help="Display name"),
    bio: str | None = typer.Option(None, "--bio", help="Bio, up to 160 characters"),
    public: bool | None = typer.Option(
        None, "--public/--private", help="Whether other users can see the profile"
    ),
) -> None:
    """Update your profile. Only the options given are changed."""
    fields: dict[str, Any] = {
        key: value
        for key, value in {
            "username": username,
            "display_name": display_name,
            "bio": bio,
            "is_public": public,
        }.items()
        if value is not None
    }
    if not fields:
        err_console.print("Nothing to change: pass at least one option")
        raise typer.Exit(1)

    async def _set() -> None:
        async with open_workspace() as ws:
            profile = await ws.remote.update_profile(ws.session.require(), **fields)
        console.print(_profile_table(profile, own=True))

    run(_set)
