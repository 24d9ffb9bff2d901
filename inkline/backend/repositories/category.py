"""
Category Repository.
"""

from sqlalchemy.dialects import postgresql, sqlite

from inkline.backend.core.exceptions import DatabaseError
from inkline.backend.models.category import Category
from inkline.backend.repositories.base import BaseRepository

# Dialects with INSERT ... ON CONFLICT DO NOTHING
_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CategoryRepository(BaseRepository[Category]):
    model = Category

    async def list_by_name(self) -> list[Category]:
        result = await self.session.execute(self._owned().order_by(Category.name))
        return list(result.scalars())

    async def find_by_key(self, name_key: str) -> Category | None:
        result = await self.session.execute(self._owned().where(Category.name_key == name_key))
        return result.scalar_one_or_none()

    async def insert_if_absent(self, name: str, name_key: str) -> Category:
        """
        Insert the category unless the owner already has one with this key.

        Returns whichever row holds the key afterwards, so two concurrent
        callers both get the same category.
        """
        dialect = self.session.get_bind().dialect.name
        try:
            insert = _INSERTS[dialect]
        except KeyError:
            raise DatabaseError(f"Unsupported database dialect: {dialect}") from None

        await self.session.execute(
            insert(Category)
            .values(user_id=self.user_id, name=name, name_key=name_key)
            .on_conflict_do_nothing(index_elements=["user_id", "name_key"])
        )
        category = await self.find_by_key(name_key)
        if category is None:
            raise DatabaseError("Category insert was not visible")
        return category
