"""
Session Commands.

Store or forget the bearer token issued by the identity provider.
"""

import typer

from inkline.backend.core.exceptions import AuthenticationError
from inkline.client.preferences import PreferenceStore
from inkline.client.session import Identity
from inkline.cli.workspace import console, err_console, restore_session

app = typer.Typer(help="Sign in and out")


@app.command()
def login(token: str = typer.Argument(..., help="Access token")) -> None:
    """Save an access token for later commands."""
    try:
        identity = Identity.from_token(token)
    except AuthenticationError as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    PreferenceStore().access_token = identity.access_token
    console.print(f"Signed in as [cyan]{identity.user_id}[/cyan]")


@app.command()
def logout() -> None:
    """Forget the saved token."""
    PreferenceStore().access_token = None
    console.print("Signed out")


@app.command()
def whoami() -> None:
    """Show the signed-in user."""
    session = restore_session(PreferenceStore())
    if session.current is None:
        console.print("Not signed in")
        raise typer.Exit(1)
    console.print(session.current.user_id)
