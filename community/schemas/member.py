"""Pydantic schemas for shop members and roles."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from community.models.member import MemberRole
from community.schemas.common import BaseSchema


class MemberSummary(BaseSchema):
    """Public author information shown next to posts and comments."""

    id: UUID
    name: str | None
    email: str
    avatar_url: str | None


class MemberResponse(BaseSchema):
    """Full member record."""

    id: UUID
    shop_id: UUID
    email: str
    name: str | None
    avatar_url: str | None
    role: MemberRole
    is_shop_owner: bool
    points: int
    created_at: datetime
    updated_at: datetime


class MemberJoin(BaseSchema):
    """Optional profile data supplied when joining a shop's community."""

    name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=1024)


class MemberJoinResponse(BaseSchema):
    """Result of joining; ``created`` is False when already a member."""

    member: MemberResponse
    created: bool


class MemberRoleUpdate(BaseSchema):
    """Role change request. Validated against ``MemberRole`` by the endpoint."""

    role: str


class MemberRoleResponse(BaseSchema):
    message: str
    member: MemberResponse
