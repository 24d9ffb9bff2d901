"""
List Projection.

Pure functions that derive the browsing view of a notes list: filter, sort,
selection, scroll windows and sidebar grouping. Inputs are never mutated and
every call recomputes from scratch.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from inkline.backend.core.utils import strip_markup, utc_now
from inkline.backend.schemas.note import NoteResponse

PREVIEW_LENGTH = 100

T = TypeVar("T")


class SortKey(str, Enum):
    TITLE = "title"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortConfig(BaseModel):
    """Sort key and direction for one list view."""

    key: SortKey = SortKey.UPDATED_AT
    direction: SortDirection = SortDirection.DESC

    model_config = ConfigDict(frozen=True)

    def toggled(self, key: SortKey) -> "SortConfig":
        """
        Result of selecting a column header.

        Reselecting the current key flips the direction; a new key starts ascending.
        """
        if key == self.key:
            flipped = SortDirection.ASC if self.direction == SortDirection.DESC else SortDirection.DESC
            return SortConfig(key=key, direction=flipped)
        return SortConfig(key=key, direction=SortDirection.ASC)


def filter_notes(notes: Iterable[NoteResponse], query: str) -> list[NoteResponse]:
    """Notes whose title contains query, ignoring case. A blank query keeps everything."""
    needle = query.strip().casefold()
    if not needle:
        return list(notes)
    return [n for n in notes if needle in (n.title or "").casefold()]


def _sort_value(note: NoteResponse, key: SortKey):
    if key == SortKey.TITLE:
        return (note.title or "").casefold()
    return getattr(note, key.value)


def sort_notes(notes: Iterable[NoteResponse], config: SortConfig) -> list[NoteResponse]:
    """Sort by the configured key; equal keys keep their input order in both directions."""
    return sorted(
        notes,
        key=lambda n: _sort_value(n, config.key),
        reverse=config.direction == SortDirection.DESC,
    )


def project(
    notes: Iterable[NoteResponse],
    query: str = "",
    config: SortConfig | None = None,
    archived: bool | None = None,
) -> list[NoteResponse]:
    """
    Full list projection.

    Args:
        notes: Source notes
        query: Title filter
        config: Sort configuration (most recently updated first by default)
        archived: Keep only archived (True) or active (False) notes; None keeps both
    """
    if archived is not None:
        notes = [n for n in notes if n.archived == archived]
    return sort_notes(filter_notes(notes, query), config or SortConfig())


def toggle_selected(selected: Sequence[str], note_id: str) -> list[str]:
    if note_id in selected:
        return [i for i in selected if i != note_id]
    return [*selected, note_id]


def toggle_all(selected: Sequence[str], visible_ids: Sequence[str]) -> list[str]:
    """Select every visible note, or clear the selection when all are already selected."""
    if visible_ids and all(i in selected for i in visible_ids):
        return []
    return list(visible_ids)


def visible_window(items: Sequence[T], start: int, size: int) -> list[T]:
    """The slice of a list rendered for a scroll position, clamped to the list bounds."""
    if size <= 0:
        return []
    start = min(max(start, 0), max(len(items) - size, 0))
    return list(items[start:start + size])


def group_by_day(
    notes: Iterable[NoteResponse],
    now: datetime | None = None,
) -> dict[str, list[NoteResponse]]:
    """
    Sidebar grouping by ``updated_at``.

    Returns:
        {"Today": [...], "Yesterday": [...], "Older": [...]} in input order
    """
    today: date = (now or utc_now()).date()
    yesterday = today - timedelta(days=1)
    groups: dict[str, list[NoteResponse]] = {"Today": [], "Yesterday": [], "Older": []}
    for note in notes:
        day = note.updated_at.date()
        if day == today:
            groups["Today"].append(note)
        elif day == yesterday:
            groups["Yesterday"].append(note)
        else:
            groups["Older"].append(note)
    return groups


def preview(body: str | None, length: int = PREVIEW_LENGTH) -> str:
    """Plain-text body preview for list rows."""
    text = strip_markup(body)
    if not text:
        return "—"
    if len(text) > length:
        return f"{text[:length].rstrip()}…"
    return text
