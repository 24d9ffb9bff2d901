"""
Profile Service.

Any signed-in user may read a public profile. A private or missing
profile reads as not found for everyone but its owner, whose row is
created on first access.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.exceptions import ConflictError, NotFoundError
from inkline.backend.models.profile import MAX_USERNAME_LENGTH, Profile
from inkline.backend.repositories.profile import ProfileRepository
from inkline.backend.schemas.profile import ProfileUpdate
from inkline.backend.services.base import BaseService

PROFILE_NOT_FOUND = "Profile not found."


class ProfileService(BaseService):
    def __init__(self, session: AsyncSession, user_id: str) -> None:
        super().__init__(session)
        self.user_id = user_id
        self.repo = ProfileRepository(session)

    async def _own(self) -> Profile:
        profile = await self.repo.get(self.user_id)
        if profile is not None:
            return profile
        self._log_operation("Creating profile", user_id=self.user_id)
        return await self._execute_db_operation(
            "create_profile",
            self.repo.create(self.user_id, self.user_id[:MAX_USERNAME_LENGTH]),
        )

    async def get_profile(self, profile_id: str) -> Profile:
        """
        Raises:
            NotFoundError: If the profile is missing, or private and not the caller's
        """
        if profile_id == self.user_id:
            return await self._own()
        profile = await self.repo.get(profile_id)
        if profile is None or not profile.is_public:
            raise NotFoundError(PROFILE_NOT_FOUND)
        return profile

    async def public_notes_count(self, profile: Profile) -> int:
        return await self.repo.count_public_notes(profile.id)

    async def update_own(self, data: ProfileUpdate) -> Profile:
        """
        Apply the fields that were set. Blank display names and bios clear
        the value.

        Raises:
            ValidationError: If the username is blank or too long
            ConflictError: If another user holds the username
        """
        values = data.model_dump(exclude_unset=True)
        if "username" in values:
            self._validate_required(values, ["username"])
            values["username"] = values["username"].strip()
            self._validate_string_length(values["username"], "username", MAX_USERNAME_LENGTH)
        if "is_public" in values:
            self._validate_required(values, ["is_public"])
        for field in ("display_name", "bio"):
            if field in values and values[field] is not None:
                values[field] = values[field].strip() or None

        profile = await self._own()
        username = values.get("username")
        if username is not None and username != profile.username:
            holder = await self.repo.get_by_username(username)
            if holder is not None:
                raise ConflictError("Username is already taken.")

        updated = await self._execute_db_operation(
            "update_profile",
            self.repo.update(profile, **values),
        )
        self._log_operation("Profile updated", user_id=self.user_id, fields=sorted(values))
        return updated
