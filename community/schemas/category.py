"""Pydantic schemas for post categories."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from community.schemas.common import BaseSchema


class CategoryCreate(BaseSchema):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default="bg-gray-500", max_length=50)
    description: str | None = Field(default=None, max_length=1000)
    order: int = Field(default=0, ge=0)


class CategoryUpdate(BaseSchema):
    """Partial category update."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=1000)
    order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @field_validator("name", "color", "order", "is_active")
    @classmethod
    def reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class CategorySummary(BaseSchema):
    id: UUID
    name: str
    color: str


class CategoryResponse(BaseSchema):
    id: UUID
    name: str
    color: str
    description: str | None
    order: int
    is_active: bool
    created_at: datetime
