"""
Notes Collection.

In-memory list of the signed-in user's notes, kept consistent with the
backend. Structural changes (create, archive, restore, delete, sharing) are
applied locally only after the backend confirms them. Failed calls are
logged and leave local state untouched; nothing is retried automatically.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from inkline.backend.core.config_schema import QuotaPolicy
from inkline.backend.core.exceptions import QuotaExceededError
from inkline.backend.core.logging import get_logger, log_with_source
from inkline.backend.schemas.note import NoteResponse
from inkline.client.remote import QUOTA_EXCEEDED, NotesRemote, RemoteError
from inkline.client.session import Identity, SessionStore

logger = get_logger(__name__)

Alert = Callable[[str], None]


def _log_failure(operation: str, error: RemoteError, **context: Any) -> None:
    log_with_source(
        logger,
        "client",
        "error",
        "Remote call failed",
        operation=operation,
        code=error.code,
        error=error.message,
        **context,
    )


class NotesCollection:
    """
    Active and archived notes for one signed-in user.

    Usage:
        notes = NotesCollection(session, remote, note_limit=100,
                                quota_policy=QuotaPolicy.COMBINED, alert=print)
        await notes.load()
        note = await notes.create()
    """

    def __init__(
        self,
        session: SessionStore,
        remote: NotesRemote,
        note_limit: int,
        quota_policy: QuotaPolicy,
        alert: Alert | None = None,
    ) -> None:
        self.session = session
        self.remote = remote
        self.note_limit = note_limit
        self.quota_policy = quota_policy
        self.alert = alert or (lambda message: None)
        self._active: list[NoteResponse] = []
        self._archived: list[NoteResponse] = []
        self.selected_id: str | None = None
        self._unsubscribe = session.subscribe(self._on_session_change)

    @property
    def notes(self) -> list[NoteResponse]:
        """Active notes, most recently updated first as loaded."""
        return list(self._active)

    @property
    def archived_notes(self) -> list[NoteResponse]:
        return list(self._archived)

    @property
    def selected(self) -> NoteResponse | None:
        return self.find(self.selected_id) if self.selected_id else None

    @property
    def quota_used(self) -> int:
        if self.quota_policy == QuotaPolicy.ACTIVE:
            return len(self._active)
        return len(self._active) + len(self._archived)

    @property
    def quota_reached(self) -> bool:
        return self.quota_used >= self.note_limit

    def find(self, note_id: str) -> NoteResponse | None:
        for note in (*self._active, *self._archived):
            if note.id == note_id:
                return note
        return None

    def select(self, note_id: str | None) -> None:
        self.selected_id = note_id

    def close(self) -> None:
        """Stop following session changes."""
        self._unsubscribe()

    def _on_session_change(self, identity: Identity | None) -> None:
        self._active, self._archived = [], []
        self.selected_id = None

    async def load(self, requested_id: str | None = None) -> bool:
        """
        Fetch the current user's notes.

        Selects ``requested_id`` when it is among the active notes, otherwise
        the most recently updated one. On failure the lists stay empty.

        Returns:
            True if both lists were loaded
        """
        identity = self.session.require()
        try:
            active = await self.remote.list_notes(identity, archived=False)
            archived = await self.remote.list_notes(identity, archived=True)
        except RemoteError as e:
            _log_failure("load", e)
            self._active, self._archived = [], []
            self.selected_id = None
            return False

        self._active, self._archived = active, archived
        ids = {n.id for n in active}
        if requested_id in ids:
            self.selected_id = requested_id
        else:
            self.selected_id = active[0].id if active else None
        return True

    async def create(self) -> NoteResponse | None:
        """
        Create an empty note and select it.

        When the quota is already reached no request is sent; the user is
        alerted and local state is left as it was.
        """
        if self.quota_reached:
            self.alert(QuotaExceededError(self.note_limit).message)
            return None

        identity = self.session.require()
        try:
            note = await self.remote.create_note(identity)
        except RemoteError as e:
            if e.code == QUOTA_EXCEEDED:
                self.alert(e.message)
            _log_failure("create", e)
            return None

        self._active.insert(0, note)
        self.selected_id = note.id
        return note

    def merge(self, record: NoteResponse | dict[str, Any]) -> NoteResponse | None:
        """
        Merge a confirmed partial record into the matching local note.

        Only fields present in the record are replaced.

        Returns:
            The merged note, or None if no local note has that id
        """
        if isinstance(record, BaseModel):
            fields = record.model_dump(exclude_unset=True)
        else:
            fields = dict(record)
        note_id = fields.get("id")
        for bucket in (self._active, self._archived):
            for index, note in enumerate(bucket):
                if note.id == note_id:
                    merged = note.model_copy(update=fields)
                    bucket[index] = merged
                    return merged
        return None

    def _move(self, moved: list[NoteResponse], archived: bool) -> None:
        moved_ids = {n.id for n in moved}
        source, target = (
            (self._active, self._archived) if archived else (self._archived, self._active)
        )
        source[:] = [n for n in source if n.id not in moved_ids]
        target[:] = sorted([*moved, *target], key=lambda n: n.updated_at, reverse=True)
        if self.selected_id in moved_ids:
            self.selected_id = None

    async def archive(self, ids: list[str]) -> bool:
        """Archive notes once the backend confirms; deselects a moved note."""
        if not ids:
            return False
        try:
            moved = await self.remote.archive_notes(self.session.require(), ids)
        except RemoteError as e:
            _log_failure("archive", e, count=len(ids))
            return False
        self._move(moved, archived=True)
        return True

    async def restore(self, ids: list[str]) -> bool:
        """Restore archived notes once the backend confirms."""
        if not ids:
            return False
        try:
            moved = await self.remote.restore_notes(self.session.require(), ids)
        except RemoteError as e:
            _log_failure("restore", e, count=len(ids))
            return False
        self._move(moved, archived=False)
        return True

    async def delete(self, ids: list[str]) -> list[str]:
        """
        Permanently delete notes.

        Local removal mirrors the identifiers the backend reports as deleted.
        """
        if not ids:
            return []
        try:
            deleted = await self.remote.delete_notes(self.session.require(), ids)
        except RemoteError as e:
            _log_failure("delete", e, count=len(ids))
            return []
        gone = set(deleted)
        self._active = [n for n in self._active if n.id not in gone]
        self._archived = [n for n in self._archived if n.id not in gone]
        if self.selected_id in gone:
            self.selected_id = None
        return deleted

    async def toggle_share(self, note_id: str | None = None) -> NoteResponse | None:
        """Flip public visibility of a note (the selected one by default)."""
        note = self.find(note_id or self.selected_id or "")
        if note is None:
            return None
        try:
            record = await self.remote.set_sharing(
                self.session.require(), note.id, not note.is_public
            )
        except RemoteError as e:
            _log_failure("toggle_share", e, note_id=note.id)
            return None
        return self.merge(record)

    async def assign_category(self, note_id: str, category_id: str | None) -> NoteResponse | None:
        try:
            record = await self.remote.update_note(
                self.session.require(), note_id, category_id=category_id
            )
        except RemoteError as e:
            _log_failure("assign_category", e, note_id=note_id)
            return None
        return self.merge(record)

    async def export(self, ids: list[str], filename: str = "notes.zip") -> bytes | None:
        """Zip archive of the given notes, or None on failure."""
        if not ids:
            return None
        try:
            return await self.remote.export_notes(self.session.require(), ids, filename)
        except RemoteError as e:
            _log_failure("export", e, count=len(ids))
            return None
