"""
Category Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Create-or-find a category by name."""

    name: str = Field(
        ...,
        max_length=100,
        description="Category name (matched case-insensitively)",
        examples=["Work"],
    )


class CategoryResponse(BaseModel):
    """Schema for category in API responses."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)
