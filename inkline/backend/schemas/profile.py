"""
Profile Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from inkline.backend.models.profile import (
    MAX_BIO_LENGTH,
    MAX_DISPLAY_NAME_LENGTH,
    MAX_USERNAME_LENGTH,
)


class ProfileUpdate(BaseModel):
    """Partial update of the caller's profile; omitted fields are untouched."""

    username: str | None = Field(
        None,
        max_length=MAX_USERNAME_LENGTH,
        examples=["ada"],
    )
    display_name: str | None = Field(None, max_length=MAX_DISPLAY_NAME_LENGTH)
    bio: str | None = Field(None, max_length=MAX_BIO_LENGTH)
    is_public: bool | None = None


class ProfileResponse(BaseModel):
    id: str
    username: str
    display_name: str | None
    bio: str | None
    is_public: bool
    public_notes_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_profile(cls, profile, public_notes_count: int) -> "ProfileResponse":
        return cls.model_validate(profile).model_copy(
            update={"public_notes_count": public_notes_count}
        )
