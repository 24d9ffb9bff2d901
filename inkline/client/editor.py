"""
Editor Synchronisation.

Debounced autosave for note title and body. Each note being edited has its
own state machine:

    CLEAN  -> DIRTY   on an edit that differs from the last saved values
    DIRTY  -> SAVING  when the debounce timer elapses
    SAVING -> SAVED   when the update succeeds
    SAVING -> DIRTY   when the update fails (retried on the next edit)
    SAVED  -> CLEAN   after the display window

Each note owns one timer handle, replaced on every edit, and one lock, so
saves for the same note never overlap while different notes save freely.
A save is addressed by the note id and owner captured when the note was
opened, never by whichever note is open when the request completes.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from inkline.backend.core.logging import get_logger, log_with_source
from inkline.backend.schemas.note import MAX_BODY_LENGTH, NoteResponse
from inkline.client.remote import NotesRemote, RemoteError
from inkline.client.session import Identity, SessionStore

logger = get_logger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0
DEFAULT_SAVED_DISPLAY_SECONDS = 1.5


class SaveStatus(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"
    SAVED = "saved"


@dataclass
class _NoteSync:
    note_id: str
    owner: Identity
    title: str
    body: str
    saved_title: str
    saved_body: str
    updated_at: datetime
    status: SaveStatus = SaveStatus.CLEAN
    timer: asyncio.Task | None = None
    reset: asyncio.Task | None = None
    saving: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def changed(self) -> bool:
        return (self.title, self.body) != (self.saved_title, self.saved_body)

    @property
    def busy(self) -> bool:
        return self.changed or self.saving or self.timer is not None


NoteSaved = Callable[[NoteResponse], None]
StatusChanged = Callable[[str, SaveStatus], None]


class NoteEditor:
    """
    Title/body editor with debounced autosave.

    Usage:
        editor = NoteEditor(session, remote, on_saved=collection.merge)
        editor.open(note)
        editor.update(body="<p>hello</p>")
        ...
        await editor.aclose()
    """

    def __init__(
        self,
        session: SessionStore,
        remote: NotesRemote,
        on_saved: NoteSaved | None = None,
        on_status: StatusChanged | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        saved_display_seconds: float = DEFAULT_SAVED_DISPLAY_SECONDS,
        max_body_length: int = MAX_BODY_LENGTH,
    ) -> None:
        self.session = session
        self.remote = remote
        self.on_saved = on_saved
        self.on_status = on_status
        self.debounce_seconds = debounce_seconds
        self.saved_display_seconds = saved_display_seconds
        self.max_body_length = max_body_length
        self._current: _NoteSync | None = None
        # Notes switched away from with a save still owed
        self._background: dict[str, _NoteSync] = {}
        # Debounce timers and the saves they start
        self._tasks: set[asyncio.Task] = set()
        self._resets: set[asyncio.Task] = set()

    @property
    def note_id(self) -> str | None:
        return self._current.note_id if self._current else None

    @property
    def title(self) -> str:
        return self._current.title if self._current else ""

    @property
    def body(self) -> str:
        return self._current.body if self._current else ""

    @property
    def status(self) -> SaveStatus:
        return self._current.status if self._current else SaveStatus.CLEAN

    def status_of(self, note_id: str) -> SaveStatus:
        """Status of the open note or of one still saving in the background."""
        sync = self._find(note_id)
        return sync.status if sync else SaveStatus.CLEAN

    def _find(self, note_id: str) -> _NoteSync | None:
        if self._current and self._current.note_id == note_id:
            return self._current
        return self._background.get(note_id)

    def _spawn(self, coro, tasks: set[asyncio.Task] | None = None) -> asyncio.Task:
        tasks = self._tasks if tasks is None else tasks
        task = asyncio.get_running_loop().create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        return task

    def _set_status(self, sync: _NoteSync, status: SaveStatus) -> None:
        if sync.status == status:
            return
        sync.status = status
        if self.on_status:
            self.on_status(sync.note_id, status)

    def open(self, note: NoteResponse) -> None:
        """
        Start editing a note.

        The previously open note keeps its pending save if it has unsaved
        changes; otherwise it is dropped.
        """
        if self._current is not None:
            if self._current.note_id == note.id:
                return
            self._retire(self._current)

        sync = self._background.pop(note.id, None)
        if sync is None:
            sync = _NoteSync(
                note_id=note.id,
                owner=self.session.require(),
                title=note.title,
                body=note.body,
                saved_title=note.title,
                saved_body=note.body,
                updated_at=note.updated_at,
            )
        self._current = sync

    def close(self) -> None:
        """Stop editing the open note; a pending save still completes."""
        if self._current is not None:
            self._retire(self._current)
            self._current = None

    def _retire(self, sync: _NoteSync) -> None:
        if not sync.changed and not sync.saving:
            if sync.timer is not None:
                sync.timer.cancel()
                sync.timer = None
            if sync.reset is not None:
                sync.reset.cancel()
                sync.reset = None
            return
        self._background[sync.note_id] = sync

    def update(self, title: str | None = None, body: str | None = None) -> None:
        """
        Apply a keystroke-level edit to the open note.

        Bodies longer than the cap are clipped before they reach local state.
        """
        sync = self._current
        if sync is None:
            return
        if body is not None and len(body) > self.max_body_length:
            body = body[: self.max_body_length]

        new_title = sync.title if title is None else title
        new_body = sync.body if body is None else body
        if (new_title, new_body) == (sync.title, sync.body):
            return

        sync.title, sync.body = new_title, new_body
        if sync.reset is not None:
            sync.reset.cancel()
            sync.reset = None
        self._set_status(sync, SaveStatus.DIRTY)
        self._schedule(sync)

    def _schedule(self, sync: _NoteSync) -> None:
        if sync.timer is not None:
            sync.timer.cancel()
        sync.timer = self._spawn(self._debounce(sync))

    async def _debounce(self, sync: _NoteSync) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Past this point the save is in flight and must not be cancelled
        sync.timer = None
        await self._save(sync)

    async def _save(self, sync: _NoteSync) -> None:
        async with sync.lock:
            if not sync.changed:
                if sync.status == SaveStatus.DIRTY:
                    self._set_status(sync, SaveStatus.CLEAN)
                self._release(sync)
                return

            title, body = sync.title, sync.body
            sync.saving = True
            self._set_status(sync, SaveStatus.SAVING)
            try:
                record = await self.remote.update_note(
                    sync.owner, sync.note_id, title=title, body=body
                )
            except RemoteError as e:
                log_with_source(
                    logger,
                    "client",
                    "warning",
                    "Autosave failed",
                    note_id=sync.note_id,
                    code=e.code,
                    error=e.message,
                )
                self._set_status(sync, SaveStatus.DIRTY)
                return
            finally:
                sync.saving = False

            sync.saved_title, sync.saved_body = title, body
            sync.updated_at = record.updated_at
            if self.on_saved:
                self.on_saved(record)
            log_with_source(logger, "client", "debug", "Autosaved", note_id=sync.note_id)

            if sync.changed:
                # Edited while the request was in flight; the newer timer owns it
                self._set_status(sync, SaveStatus.DIRTY)
                return
            self._set_status(sync, SaveStatus.SAVED)
            sync.reset = self._spawn(self._clear_saved(sync), self._resets)
            self._release(sync)

    async def _clear_saved(self, sync: _NoteSync) -> None:
        await asyncio.sleep(self.saved_display_seconds)
        sync.reset = None
        if sync.status == SaveStatus.SAVED:
            self._set_status(sync, SaveStatus.CLEAN)

    def _release(self, sync: _NoteSync) -> None:
        if self._background.get(sync.note_id) is sync and not sync.busy:
            del self._background[sync.note_id]

    async def flush(self) -> None:
        """Save every note with unsaved changes now, skipping the debounce."""
        syncs = [s for s in (self._current, *self._background.values()) if s is not None]
        for sync in syncs:
            if sync.timer is not None:
                sync.timer.cancel()
                sync.timer = None
        await asyncio.gather(*(self._save(s) for s in syncs))
        in_flight = [t for t in self._tasks if t is not asyncio.current_task()]
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)

    async def aclose(self) -> None:
        """Flush pending saves and stop all timers."""
        await self.flush()
        for task in [*self._tasks, *self._resets]:
            task.cancel()
        self._current = None
        self._background.clear()
