"""Pydantic schemas for badges and member points."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from community.schemas.common import BaseSchema


class BadgeCreate(BaseSchema):
    """Schema for creating or replacing a badge."""

    name: str = Field(..., min_length=1, max_length=100)
    image_url: str = Field(..., min_length=1, max_length=1024)
    required_points: int = Field(..., ge=0)
    description: str | None = Field(default=None, max_length=1000)
    order: int = Field(default=0, ge=0)


class BadgeUpdate(BadgeCreate):
    """Badges are replaced as a whole; the same fields are required."""


class BadgeResponse(BaseSchema):
    id: UUID
    name: str
    image_url: str
    required_points: int
    description: str | None
    order: int
    is_default: bool
    created_at: datetime


class MemberPointsResponse(BaseSchema):
    """A member's points, unlocked badges and the next badge to earn."""

    member_id: UUID
    points: int
    badges: list[BadgeResponse]
    next_badge: BadgeResponse | None
    points_to_next_badge: int | None
