"""
Note Schemas.

Pydantic schemas for note API request/response validation. ``NoteResponse``
is also the typed record the client core keeps in memory.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

MAX_TITLE_LENGTH = 255
MAX_BODY_LENGTH = 4096


class NoteUpdate(BaseModel):
    """Schema for a partial note update. Only fields that are sent are applied."""

    title: str | None = Field(
        default=None,
        max_length=MAX_TITLE_LENGTH,
        description="Note title",
    )
    body: str | None = Field(
        default=None,
        description="Note body (sanitized markup)",
    )
    category_id: str | None = Field(
        default=None,
        description="Category to assign; null clears the category",
    )


class NoteIds(BaseModel):
    """Identifiers for a bulk operation."""

    ids: list[str] = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Note identifiers",
    )


class ExportRequest(NoteIds):
    """Notes to bundle into a downloadable archive."""

    filename: str = Field(
        default="notes.zip",
        pattern=r"^[\w\- ]+\.zip$",
        description="Archive file name",
    )


class ShareToggle(BaseModel):
    """Desired visibility for a note."""

    is_public: bool = Field(description="Whether the note is publicly readable")


class NoteResponse(BaseModel):
    """Schema for a note in API responses."""

    id: str = Field(description="Note unique identifier")
    user_id: str = Field(description="Owner identifier")
    title: str = Field(description="Note title")
    body: str = Field(description="Note body")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last title/body change")
    is_public: bool = Field(default=False, description="Publicly readable via share link")
    share_id: str | None = Field(default=None, description="Stable share identifier")
    archived: bool = Field(default=False, description="Whether the note is archived")
    view_count: int = Field(default=0, description="Public page loads")
    last_viewed_at: datetime | None = Field(default=None, description="Last public load")
    category_id: str | None = Field(default=None, description="Assigned category")

    model_config = ConfigDict(from_attributes=True)


class PublicNoteResponse(BaseModel):
    """Read-only rendering of a shared note."""

    title: str
    body: str
    updated_at: datetime
    view_count: int

    model_config = ConfigDict(from_attributes=True)


class DeleteResult(BaseModel):
    """Identifiers that were actually deleted."""

    deleted_ids: list[str]
