"""
Note Service.

Business logic layer for notes. Orchestrates repositories,
handles validation, and implements business rules: the creation quota,
the body length cap, stable share identifiers and owner scoping.
"""

from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.config import get_app_config
from inkline.backend.core.config_schema import NotesSchema, QuotaPolicy
from inkline.backend.core.exceptions import NotFoundError, QuotaExceededError
from inkline.backend.models.note import Note
from inkline.backend.repositories.category import CategoryRepository
from inkline.backend.repositories.note import NoteRepository
from inkline.backend.schemas.note import NoteUpdate
from inkline.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    All operations act on the notes of a single owner.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_id: str,
        notes_config: NotesSchema | None = None,
    ) -> None:
        super().__init__(session)
        self.user_id = user_id
        self.config = notes_config or get_app_config().notes
        self.repo = NoteRepository(session, user_id)
        self.category_repo = CategoryRepository(session, user_id)

    async def quota_usage(self) -> int:
        """Number of notes that count against the quota under the configured policy."""
        if self.config.quota_policy == QuotaPolicy.ACTIVE:
            return await self.repo.count(archived=False)
        return await self.repo.count()

    async def list_notes(self, archived: bool = False) -> list[Note]:
        """
        List the owner's active or archived notes, most recently updated first.
        """
        return await self.repo.list_by_archived(archived)

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If the note does not exist or is not owned
        """
        return await self.repo.get_by_id(note_id)

    async def create_note(self) -> Note:
        """
        Create an empty note.

        Raises:
            QuotaExceededError: If the owner has reached the note limit
        """
        used = await self.quota_usage()
        if used >= self.config.note_limit:
            self._log_operation(
                "Note quota reached",
                user_id=self.user_id,
                used=used,
                policy=self.config.quota_policy.value,
            )
            raise QuotaExceededError(self.config.note_limit)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(title="", body=""),
        )
        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Apply a partial update.

        Title and body changes refresh ``updated_at``; a category change alone
        does not.

        Raises:
            NotFoundError: If the note or the referenced category is not owned
            ValidationError: If the title or body is over its length cap
        """
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return await self.repo.get_by_id(note_id)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=sorted(update_data),
        )

        title = update_data.get("title")
        body = update_data.get("body")
        if title is not None:
            self._validate_string_length(title, "title", self.config.max_title_length)
        if body is not None:
            self._validate_string_length(body, "body", self.config.max_body_length)

        if "category_id" in update_data:
            category_id = update_data["category_id"]
            if category_id is not None:
                await self.category_repo.get_by_id(category_id)
            note = await self._execute_db_operation(
                "assign_category",
                self.repo.update(note_id, category_id=category_id),
            )

        if title is not None or body is not None:
            note = await self._execute_db_operation(
                "update_note",
                self.repo.update_content(note_id, title=title, body=body),
            )
        elif "category_id" not in update_data:
            note = await self.repo.get_by_id(note_id)

        return note

    async def archive_notes(self, ids: list[str]) -> list[Note]:
        """Move owned notes to the archived set."""
        self._log_operation("Archiving notes", count=len(ids))
        return await self._execute_db_operation(
            "archive_notes",
            self.repo.set_archived(ids, archived=True),
        )

    async def restore_notes(self, ids: list[str]) -> list[Note]:
        """Move owned notes back to the active set."""
        self._log_operation("Restoring notes", count=len(ids))
        return await self._execute_db_operation(
            "restore_notes",
            self.repo.set_archived(ids, archived=False),
        )

    async def delete_notes(self, ids: list[str]) -> list[str]:
        """
        Permanently delete owned notes.

        Returns:
            IDs that were actually deleted
        """
        self._log_operation("Deleting notes", count=len(ids))
        return await self._execute_db_operation(
            "delete_notes",
            self.repo.delete_many(ids),
        )

    async def delete_note(self, note_id: str) -> None:
        """
        Permanently delete a single note.

        Raises:
            NotFoundError: If the note does not exist or is not owned
        """
        deleted = await self.delete_notes([note_id])
        if not deleted:
            raise NotFoundError("Note not found")

    async def set_sharing(self, note_id: str, is_public: bool) -> Note:
        """
        Set public visibility.

        A share identifier is issued the first time a note is made public and
        reused on every later toggle.
        """
        note = await self.repo.get_by_id(note_id)
        if is_public and note.share_id is None:
            note.share_id = uuid4().hex
            self._log_debug("Share identifier issued", note_id=note_id)
        note.is_public = is_public

        self._log_operation("Sharing changed", note_id=note_id, is_public=is_public)
        await self._execute_db_operation("set_sharing", self.session.flush())
        await self.session.refresh(note)
        return note

    async def get_notes_for_export(self, ids: list[str]) -> list[Note]:
        """Owned notes among ids, in the order requested."""
        notes = {note.id: note for note in await self.repo.get_many(ids)}
        return [notes[i] for i in dict.fromkeys(ids) if i in notes]
