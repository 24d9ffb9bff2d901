"""
Category Model.

Per-user note categories. ``name`` keeps the spelling the user typed;
``name_key`` is its casefolded form and is unique per owner, so "Élan",
"élan" and " ÉLAN " are one category on every database backend.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from inkline.backend.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin

MAX_CATEGORY_NAME_LENGTH = 100


def category_key(name: str) -> str:
    """Normalised form used for matching: trimmed and casefolded."""
    return name.strip().casefold()


class Category(UUIDMixin, OwnedMixin, TimestampMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("user_id", "name_key"),)

    name: Mapped[str] = mapped_column(String(MAX_CATEGORY_NAME_LENGTH), nullable=False)
    # casefold() can lengthen a string ("ß" -> "ss")
    name_key: Mapped[str] = mapped_column(String(MAX_CATEGORY_NAME_LENGTH * 3), nullable=False)

    @validates("name")
    def _sync_key(self, key: str, value: str) -> str:
        self.name_key = category_key(value)
        return value

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r})>"
