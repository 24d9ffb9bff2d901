"""
Insights Service.

Dashboard analytics over a user's notes. ``compute_insights`` is a pure
function of the notes, the categories and the current time so it can be
tested without a database.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.config import get_app_config
from inkline.backend.core.config_schema import NotesSchema, QuotaPolicy
from inkline.backend.core.utils import display_title, utc_now, word_count
from inkline.backend.repositories.category import CategoryRepository
from inkline.backend.repositories.note import NoteRepository
from inkline.backend.schemas.stats import (
    CategoryCount,
    InsightsResponse,
    MostViewed,
    RecentNote,
)
from inkline.backend.services.base import BaseService

UNASSIGNED = "Unassigned"
RECENT_COUNT = 5

# Sunday first; ties go to the earliest day in this order
WEEKDAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


class NoteLike(Protocol):
    id: str
    title: str
    body: str
    created_at: datetime
    updated_at: datetime
    archived: bool
    view_count: int
    category_id: str | None


def _previous_month(now: datetime) -> tuple[int, int]:
    if now.month == 1:
        return now.year - 1, 12
    return now.year, now.month - 1


def _in_month(moment: datetime, year: int, month: int) -> bool:
    return moment.year == year and moment.month == month


def _average_words(notes: Sequence[NoteLike]) -> int:
    if not notes:
        return 0
    mean = sum(word_count(n.body) for n in notes) / len(notes)
    # Half rounds up
    return int(mean + 0.5)


def _weekday_name(moment: datetime) -> str:
    # datetime.weekday() is Monday=0
    return WEEKDAYS[(moment.weekday() + 1) % 7]


def compute_insights(
    notes: Iterable[NoteLike],
    category_names: dict[str, str],
    now: datetime,
    note_limit: int,
    quota_policy: QuotaPolicy,
    recent_count: int = RECENT_COUNT,
) -> InsightsResponse:
    """
    Compute dashboard analytics.

    Args:
        notes: Active and archived notes of one owner
        category_names: Category id to display name
        now: Reference time for "this month"
        note_limit: Configured note quota
        quota_policy: Which notes count against the quota
        recent_count: How many recent active notes to list

    Returns:
        InsightsResponse
    """
    notes = list(notes)
    active = sorted(
        (n for n in notes if not n.archived),
        key=lambda n: n.updated_at,
        reverse=True,
    )
    archived_count = len(notes) - len(active)

    counted = len(active) if quota_policy == QuotaPolicy.ACTIVE else len(notes)
    remaining = max(note_limit - counted, 0)

    this_month = [n for n in notes if _in_month(n.created_at, now.year, now.month)]
    prev_year, prev_month = _previous_month(now)
    previous_month = [n for n in notes if _in_month(n.created_at, prev_year, prev_month)]

    most_active_day = None
    if this_month:
        per_day = Counter(_weekday_name(n.created_at) for n in this_month)
        most_active_day = max(WEEKDAYS, key=lambda day: (per_day[day], -WEEKDAYS.index(day)))

    by_category: Counter[str] = Counter()
    for note in notes:
        name = category_names.get(note.category_id) if note.category_id else None
        by_category[name or UNASSIGNED] += 1

    most_viewed = None
    if active:
        top = max(active, key=lambda n: n.view_count or 0)
        most_viewed = MostViewed(
            id=top.id,
            title=display_title(top.title),
            view_count=top.view_count or 0,
        )

    return InsightsResponse(
        total_notes=len(notes),
        active_notes=len(active),
        archived_notes=archived_count,
        note_limit=note_limit,
        remaining=remaining,
        notes_this_month=len(this_month),
        most_active_day=most_active_day,
        avg_words_this_month=_average_words(this_month),
        avg_words_previous_month=_average_words(previous_month),
        by_category=[
            CategoryCount(name=name, value=value)
            for name, value in by_category.items()
        ],
        most_viewed=most_viewed,
        recent=[
            RecentNote(id=n.id, title=display_title(n.title))
            for n in active[:recent_count]
        ],
    )


class StatsService(BaseService):
    """Loads one owner's notes and categories and computes insights."""

    def __init__(
        self,
        session: AsyncSession,
        user_id: str,
        notes_config: NotesSchema | None = None,
    ) -> None:
        super().__init__(session)
        self.config = notes_config or get_app_config().notes
        self.note_repo = NoteRepository(session, user_id)
        self.category_repo = CategoryRepository(session, user_id)

    async def get_insights(self, now: datetime | None = None) -> InsightsResponse:
        notes = await self.note_repo.list_all()
        categories = await self.category_repo.list_by_name()
        return compute_insights(
            notes,
            {c.id: c.name for c in categories},
            now or utc_now(),
            self.config.note_limit,
            self.config.quota_policy,
            self.config.recent_notes_count,
        )
