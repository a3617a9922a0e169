"""Pydantic schemas for the member profile page."""

from pydantic import Field

from community.schemas.badge import BadgeResponse
from community.schemas.common import BaseSchema
from community.schemas.member import MemberResponse
from community.schemas.post import RecentComment, RecentPost


class ProfileResponse(BaseSchema):
    """The current member with recent activity and unlocked badges."""

    member: MemberResponse
    recent_posts: list[RecentPost]
    recent_comments: list[RecentComment]
    points: int
    badges: list[BadgeResponse]
    followers_count: int


class ProfileUpdate(BaseSchema):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=1024)
