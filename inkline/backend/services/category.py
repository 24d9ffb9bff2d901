"""
Category Service.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.models.category import MAX_CATEGORY_NAME_LENGTH, Category, category_key
from inkline.backend.repositories.category import CategoryRepository
from inkline.backend.repositories.note import NoteRepository
from inkline.backend.services.base import BaseService


class CategoryService(BaseService):
    """Create-or-find, list and delete the owner's categories."""

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        super().__init__(session)
        self.repo = CategoryRepository(session, user_id)
        self.note_repo = NoteRepository(session, user_id)

    async def list_categories(self) -> list[Category]:
        return await self.repo.list_by_name()

    async def upsert_category(self, name: str) -> Category:
        """
        Return the category with this name, creating it if needed.

        Names are trimmed and matched by their casefolded form, so "Work",
        " work " and "WORK" resolve to the same row. A concurrent upsert of
        the same name returns the row that won.

        Raises:
            ValidationError: If the name is blank or too long
        """
        self._validate_required({"name": name}, ["name"])
        name = name.strip()
        self._validate_string_length(name, "name", MAX_CATEGORY_NAME_LENGTH)
        key = category_key(name)

        existing = await self.repo.find_by_key(key)
        if existing is not None:
            return existing

        self._log_operation("Creating category", name_key=key)
        return await self._execute_db_operation(
            "upsert_category",
            self.repo.insert_if_absent(name, key),
        )

    async def delete_category(self, category_id: str) -> None:
        """
        Delete a category and detach it from every note that references it.

        Raises:
            NotFoundError: If the category is not owned
        """
        await self.repo.get_by_id(category_id)
        cleared = await self._execute_db_operation(
            "clear_category",
            self.note_repo.clear_category(category_id),
        )
        await self._execute_db_operation(
            "delete_category",
            self.repo.delete(category_id),
        )
        self._log_operation(
            "Category deleted",
            category_id=category_id,
            notes_cleared=cleared,
        )
