"""
Insights Schemas.

Dashboard analytics derived from a user's notes.
"""

from pydantic import BaseModel, Field


class CategoryCount(BaseModel):
    name: str
    value: int


class MostViewed(BaseModel):
    id: str
    title: str
    view_count: int


class RecentNote(BaseModel):
    id: str
    title: str


class InsightsResponse(BaseModel):
    """Usage analytics for the dashboard."""

    total_notes: int
    active_notes: int
    archived_notes: int
    note_limit: int
    remaining: int = Field(description="Notes that can still be created under the quota policy")
    notes_this_month: int
    most_active_day: str | None = Field(description="Weekday with most notes created this month")
    avg_words_this_month: int
    avg_words_previous_month: int
    by_category: list[CategoryCount]
    most_viewed: MostViewed | None
    recent: list[RecentNote]
