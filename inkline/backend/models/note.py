"""
Note Model.

Database model for notes. A note belongs to exactly one user and is only
readable by others through its share identifier while it is public.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inkline.backend.core.utils import utc_now
from inkline.backend.models.base import Base, OwnedMixin, UUIDMixin


class Note(UUIDMixin, OwnedMixin, Base):
    """
    Note database model.

    ``updated_at`` has no ``onupdate`` hook: it is refreshed only when the
    title or body changes, so archiving, sharing and view counting never
    reorder the most-recently-updated list.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    share_id: Mapped[str | None] = mapped_column(
        String(64),
        unique=True,
        nullable=True,
    )
    archived: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    view_count: Mapped[int] = mapped_column(
        default=0,
        nullable=False,
    )
    last_viewed_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    category_id: Mapped[str | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, archived={self.archived})>"
