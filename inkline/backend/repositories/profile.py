"""
Profile Repository.

Profiles are readable across owners, so this repository is keyed by
session only; the service decides who may see what.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.models.note import Note
from inkline.backend.models.profile import Profile


class ProfileRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, profile_id: str) -> Profile | None:
        return await self.session.get(Profile, profile_id)

    async def get_by_username(self, username: str) -> Profile | None:
        result = await self.session.execute(select(Profile).where(Profile.username == username))
        return result.scalar_one_or_none()

    async def create(self, profile_id: str, username: str) -> Profile:
        profile = Profile(id=profile_id, username=username)
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def update(self, profile: Profile, **values: Any) -> Profile:
        for key, value in values.items():
            setattr(profile, key, value)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def count_public_notes(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Note)
            .where(Note.user_id == user_id, Note.is_public.is_(True))
        )
        return result.scalar_one()
