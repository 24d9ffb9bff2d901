"""
Unit Test Fixtures.

Fixtures for unit tests. Backend service tests run against the in-memory
database from the root conftest; client-core tests mock the remote client.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from inkline.backend.schemas.note import NoteResponse
from inkline.client.remote import NotesRemote
from inkline.client.session import Identity, SessionStore

BASE_TIME = datetime(2025, 3, 14, 12, 0, 0)


def make_note(
    id: str = "note-1",
    title: str = "",
    body: str = "",
    minutes_ago: int = 0,
    **fields,
) -> NoteResponse:
    """Build a NoteResponse record for client-core tests."""
    stamp = BASE_TIME - timedelta(minutes=minutes_ago)
    values = {
        "id": id,
        "user_id": "user-1",
        "title": title,
        "body": body,
        "created_at": stamp,
        "updated_at": stamp,
    }
    values.update(fields)
    return NoteResponse(**values)


@pytest.fixture
def identity() -> Identity:
    return Identity(user_id="user-1", access_token="token-1")


@pytest.fixture
def session_store(identity: Identity) -> SessionStore:
    return SessionStore(identity)


@pytest.fixture
def mock_remote() -> MagicMock:
    """NotesRemote with every call mocked."""
    remote = MagicMock(spec=NotesRemote)
    for name in (
        "list_notes",
        "create_note",
        "update_note",
        "archive_notes",
        "restore_notes",
        "delete_notes",
        "set_sharing",
        "export_notes",
        "list_categories",
        "upsert_category",
        "delete_category",
        "insights",
        "public_note",
    ):
        setattr(remote, name, AsyncMock())
    return remote


@pytest.fixture
def note_factory():
    """Factory fixture for NoteResponse records."""
    return make_note
