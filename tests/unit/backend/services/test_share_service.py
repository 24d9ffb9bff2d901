"""
Unit Tests for the public share path.
"""

import pytest

from inkline.backend.core.exceptions import NotFoundError
from inkline.backend.services.note import NoteService
from inkline.backend.services.share import PRIVATE_OR_MISSING, ShareService


@pytest.fixture
def notes(db_session, notes_config):
    return NoteService(db_session, "user-1", notes_config=notes_config)


class TestViewPublicNote:
    @pytest.mark.asyncio
    async def test_each_load_counts_one_view(self, notes, db_session):
        note = await notes.set_sharing((await notes.create_note()).id, True)
        share = ShareService(db_session)

        first = await share.view_public_note(note.share_id)
        assert first.view_count == 1
        assert first.last_viewed_at is not None

        second = await share.view_public_note(note.share_id)
        assert second.view_count == 2

    @pytest.mark.asyncio
    async def test_private_note_is_not_found(self, notes, db_session):
        note = await notes.set_sharing((await notes.create_note()).id, True)
        await notes.set_sharing(note.id, False)

        with pytest.raises(NotFoundError) as exc_info:
            await ShareService(db_session).view_public_note(note.share_id)
        assert exc_info.value.message == PRIVATE_OR_MISSING

    @pytest.mark.asyncio
    async def test_unknown_identifier_is_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await ShareService(db_session).view_public_note("nope")
        assert exc_info.value.message == PRIVATE_OR_MISSING

    @pytest.mark.asyncio
    async def test_private_view_does_not_count(self, notes, db_session):
        note = await notes.set_sharing((await notes.create_note()).id, True)
        await notes.set_sharing(note.id, False)
        with pytest.raises(NotFoundError):
            await ShareService(db_session).view_public_note(note.share_id)
        assert (await notes.get_note(note.id)).view_count == 0
