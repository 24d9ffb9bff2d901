"""
Integration Tests for the client core against the real application.

The HTTP client is mounted on the ASGI app, so every call crosses the
full request path: auth, routing, services and the test database.
"""

import asyncio

import pytest
from httpx import ASGITransport

from inkline.backend.core.config_schema import QuotaPolicy
from inkline.client.collection import NotesCollection
from inkline.client.editor import NoteEditor, SaveStatus
from inkline.client.remote import APIClient, NotesRemote
from inkline.client.session import Identity, SessionStore
from inkline.client.sharing import share_url


@pytest.fixture
async def remote(app):
    api = APIClient(
        base_url="http://test",
        timeout=5.0,
        transport=ASGITransport(app=app),
    )
    yield NotesRemote(api)
    await api.close()


@pytest.fixture
def sign_in(make_headers):
    def _sign_in(user_id: str) -> Identity:
        token = make_headers(user_id)["Authorization"].removeprefix("Bearer ")
        return Identity.from_token(token)

    return _sign_in


@pytest.fixture
def session(sign_in):
    return SessionStore(sign_in("writer"))


@pytest.fixture
def collection(session, remote):
    notes = NotesCollection(session, remote, note_limit=100, quota_policy=QuotaPolicy.COMBINED)
    yield notes
    notes.close()


class TestNotesLifecycle:
    async def test_create_edit_archive(self, collection, session, remote):
        assert await collection.load()
        note = await collection.create()
        assert collection.selected_id == note.id

        editor = NoteEditor(session, remote, on_saved=collection.merge, debounce_seconds=0.01)
        editor.open(note)
        editor.update(title="Draft", body="<p>hello</p>")
        await editor.flush()

        assert editor.status == SaveStatus.SAVED
        assert collection.find(note.id).title == "Draft"
        await editor.aclose()

        assert await collection.archive([note.id])
        assert collection.notes == []
        assert [n.title for n in collection.archived_notes] == ["Draft"]

        await collection.load()
        assert [n.title for n in collection.archived_notes] == ["Draft"]

    async def test_debounced_save_reaches_backend(self, collection, session, remote):
        note = await collection.create()
        editor = NoteEditor(session, remote, debounce_seconds=0.01, saved_display_seconds=0.01)
        editor.open(note)
        editor.update(body="typed")

        await asyncio.sleep(0.2)

        stored = await remote.list_notes(session.require())
        assert stored[0].body == "typed"
        await editor.aclose()

    async def test_share_and_read_publicly(self, collection, remote):
        note = await collection.create()

        shared = await collection.toggle_share(note.id)
        url = share_url("https://ink.example", shared)
        public = await remote.public_note(shared.share_id)

        assert url == f"https://ink.example/share/{shared.share_id}"
        assert public.view_count == 1


class TestIsolation:
    async def test_other_user_sees_nothing(self, collection, remote, sign_in):
        await collection.create()

        assert await remote.list_notes(sign_in("someone-else")) == []

    async def test_switching_user_reloads(self, collection, session, sign_in):
        await collection.create()
        session.sign_in(sign_in("second"))

        assert collection.notes == []
        assert await collection.load()
        assert collection.notes == []
