"""
Profile Model.

One row per user, keyed by the user id. Created on first read with the
user id as a placeholder username. Private profiles are visible to their
owner only.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from inkline.backend.models.base import Base, TimestampMixin

MAX_USERNAME_LENGTH = 50
MAX_DISPLAY_NAME_LENGTH = 100
MAX_BIO_LENGTH = 160


class Profile(TimestampMixin, Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(
        String(MAX_USERNAME_LENGTH),
        unique=True,
        nullable=False,
    )
    display_name: Mapped[str | None] = mapped_column(
        String(MAX_DISPLAY_NAME_LENGTH),
        nullable=True,
    )
    bio: Mapped[str | None] = mapped_column(
        String(MAX_BIO_LENGTH),
        nullable=True,
    )
    is_public: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username={self.username!r}, public={self.is_public})>"
