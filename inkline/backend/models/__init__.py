# SQLAlchemy models package
from inkline.backend.models.base import Base
from inkline.backend.models.category import Category
from inkline.backend.models.note import Note
from inkline.backend.models.profile import Profile

__all__ = [
    "Base",
    "Category",
    "Note",
    "Profile",
]
