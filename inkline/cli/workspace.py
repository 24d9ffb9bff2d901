"""
CLI Workspace.

Wires the client core together for one command invocation: preferences,
session (restored from the saved token), HTTP client and notes collection.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TypeVar

import typer
from rich.console import Console

from inkline.backend.core.config import get_app_config
from inkline.backend.core.exceptions import AuthenticationError
from inkline.client.collection import NotesCollection
from inkline.client.preferences import PreferenceStore
from inkline.client.remote import APIClient, NotesRemote, RemoteError
from inkline.client.session import Identity, SessionStore

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


@dataclass
class Workspace:
    prefs: PreferenceStore
    session: SessionStore
    api: APIClient
    remote: NotesRemote
    notes: NotesCollection


def restore_session(prefs: PreferenceStore) -> SessionStore:
    """Session signed in with the saved token, if it is still readable."""
    token = prefs.access_token
    if token:
        try:
            return SessionStore(Identity.from_token(token))
        except AuthenticationError:
            err_console.print("[yellow]Saved session is invalid; sign in again.[/yellow]")
    return SessionStore()


@asynccontextmanager
async def open_workspace(require_session: bool = True) -> AsyncIterator[Workspace]:
    app_config = get_app_config()
    prefs = PreferenceStore()
    session = restore_session(prefs)
    if require_session and session.current is None:
        err_console.print("[red]Not signed in.[/red] Run: inkline session login TOKEN")
        raise typer.Exit(1)

    api = APIClient(frontend="cli")
    remote = NotesRemote(api, api_prefix=app_config.application.api_prefix)
    notes = NotesCollection(
        session,
        remote,
        note_limit=app_config.notes.note_limit,
        quota_policy=app_config.notes.quota_policy,
        alert=lambda message: err_console.print(f"[red]{message}[/red]"),
    )
    try:
        yield Workspace(prefs=prefs, session=session, api=api, remote=remote, notes=notes)
    finally:
        notes.close()
        await api.close()


def run(factory: Callable[[], Awaitable[T]]) -> T:
    """Run an async command body, turning backend failures into a clean exit."""
    try:
        return asyncio.run(factory())
    except RemoteError as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
