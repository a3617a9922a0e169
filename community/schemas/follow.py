"""Pydantic schemas for member follows."""

from uuid import UUID

from community.schemas.common import BaseSchema


class FollowResponse(BaseSchema):
    """Result of a follow or unfollow with the target's new follower count."""

    member_id: UUID
    following: bool
    followers_count: int


class FollowersCountResponse(BaseSchema):
    member_id: UUID
    followers_count: int


class FollowStatusResponse(BaseSchema):
    member_id: UUID
    is_following: bool
