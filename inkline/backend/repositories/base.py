"""
Owner-scoped repository base.

A repository is bound to one user id at construction. Every read goes
through ``_owned()``, so another user's row is indistinguishable from a
missing one.
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.exceptions import NotFoundError
from inkline.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    model: type[ModelType]

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def _owned(self) -> Select:
        return select(self.model).where(self.model.user_id == self.user_id)

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        result = await self.session.execute(self._owned().where(self.model.id == str(id)))
        return result.scalar_one_or_none()

    async def get_by_id(self, id: str) -> ModelType:
        """Raises NotFoundError when the row is missing or belongs to someone else."""
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def get_many(self, ids: Sequence[str]) -> list[ModelType]:
        """The subset of ``ids`` this owner holds; unknown ids are skipped."""
        if not ids:
            return []
        result = await self.session.execute(self._owned().where(self.model.id.in_(list(ids))))
        return list(result.scalars())

    async def create(self, **values: Any) -> ModelType:
        instance = self.model(user_id=self.user_id, **values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str, **values: Any) -> ModelType:
        instance = await self.get_by_id(id)
        for key, value in values.items():
            setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str) -> None:
        await self.session.delete(await self.get_by_id(id))
        await self.session.flush()
