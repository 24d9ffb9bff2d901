"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from sqlalchemy import delete, func, select, update

from inkline.backend.core.utils import utc_now
from inkline.backend.models.note import Note
from inkline.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits owner-scoped CRUD from BaseRepository and adds note-specific
    queries. Public share lookups are the only queries not scoped to an
    owner, see ``get_public_by_share_id``.
    """

    model = Note

    async def list_by_archived(self, archived: bool) -> list[Note]:
        """
        Get the owner's active or archived notes, most recently updated first.

        Args:
            archived: True for the archived set, False for the active set

        Returns:
            List of notes
        """
        result = await self.session.execute(
            self._owned()
            .where(Note.archived == archived)
            .order_by(Note.updated_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[Note]:
        """Get every note the owner has, active and archived."""
        result = await self.session.execute(
            self._owned().order_by(Note.updated_at.desc())
        )
        return list(result.scalars().all())

    async def count(self, archived: bool | None = None) -> int:
        """
        Count the owner's notes.

        Args:
            archived: Restrict to archived (True) or active (False); None counts all
        """
        query = (
            select(func.count())
            .select_from(Note)
            .where(Note.user_id == self.user_id)
        )
        if archived is not None:
            query = query.where(Note.archived == archived)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def update_content(
        self,
        id: str,
        title: str | None = None,
        body: str | None = None,
    ) -> Note:
        """
        Apply a title/body change and refresh ``updated_at``.

        Raises:
            NotFoundError: If note not found
        """
        note = await self.get_by_id(id)
        if title is not None:
            note.title = title
        if body is not None:
            note.body = body
        note.updated_at = utc_now()
        await self.session.flush()
        await self.session.refresh(note)
        return note

    async def set_archived(self, ids: list[str], archived: bool) -> list[Note]:
        """
        Move owned notes between the active and archived sets.

        Returns:
            The notes that were moved (IDs not owned are ignored)
        """
        notes = await self.get_many(ids)
        for note in notes:
            note.archived = archived
        await self.session.flush()
        return notes

    async def delete_many(self, ids: list[str]) -> list[str]:
        """
        Permanently delete owned notes.

        Returns:
            IDs that were deleted
        """
        owned = [note.id for note in await self.get_many(ids)]
        if owned:
            await self.session.execute(
                delete(Note)
                .where(Note.user_id == self.user_id)
                .where(Note.id.in_(owned))
            )
            await self.session.flush()
        return owned

    async def clear_category(self, category_id: str) -> int:
        """Detach a category from every owned note that references it."""
        result = await self.session.execute(
            update(Note)
            .where(Note.user_id == self.user_id)
            .where(Note.category_id == category_id)
            .values(category_id=None)
        )
        return result.rowcount or 0

    async def get_public_by_share_id(self, share_id: str) -> Note | None:
        """Find a note by share identifier, only while it is public."""
        result = await self.session.execute(
            select(Note)
            .where(Note.share_id == share_id)
            .where(Note.is_public == True)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def increment_views(self, note_id: str) -> None:
        """Add one view in a single UPDATE so concurrent readers are not lost."""
        await self.session.execute(
            update(Note)
            .where(Note.id == note_id)
            .values(view_count=Note.view_count + 1, last_viewed_at=utc_now())
        )
        await self.session.flush()
