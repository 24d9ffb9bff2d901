"""
Share Service.

Unauthenticated, read-only access to public notes.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.exceptions import NotFoundError
from inkline.backend.models.note import Note
from inkline.backend.repositories.note import NoteRepository
from inkline.backend.services.base import BaseService

PRIVATE_OR_MISSING = "This note is private or does not exist."


class ShareService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        # Public lookups are not owner-scoped
        self.repo = NoteRepository(session, user_id="")

    async def view_public_note(self, share_id: str) -> Note:
        """
        Resolve a public note and count the view.

        Every successful load counts, including repeat loads by the same reader.

        Raises:
            NotFoundError: If no public note carries this share identifier
        """
        note = await self.repo.get_public_by_share_id(share_id)
        if note is None:
            raise NotFoundError(PRIVATE_OR_MISSING)

        await self._execute_db_operation(
            "increment_views",
            self.repo.increment_views(note.id),
        )
        await self.session.refresh(note)
        self._log_debug("Public note viewed", note_id=note.id, views=note.view_count)
        return note
