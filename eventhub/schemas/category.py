"""Category schemas."""

from datetime import datetime

from pydantic import Field

from eventhub.schemas.common import BaseSchema


class CategoryCreate(BaseSchema):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)


class CategoryResponse(BaseSchema):
    """Schema for category response."""

    category_id: int
    name: str
    description: str | None
    created_at: datetime


class CategoryWithCountResponse(CategoryResponse):
    """Category with the number of events filed under it."""

    event_count: int = 0
