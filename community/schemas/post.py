"""Pydantic schemas for posts and polls."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from community.models.post import PostStatus
from community.models.reaction import ReactionType
from community.schemas.badge import BadgeResponse
from community.schemas.category import CategorySummary
from community.schemas.common import BaseSchema
from community.schemas.member import MemberSummary
from community.schemas.reaction import ReactionCount

# === Polls ===


class PollOptionCreate(BaseSchema):
    text: str = Field(..., min_length=1, max_length=255)


class PollCreate(BaseSchema):
    """Poll created together with its post."""

    question: str = Field(..., min_length=1, max_length=500)
    options: list[PollOptionCreate] = Field(..., min_length=2, max_length=10)


class PollOptionResponse(BaseSchema):
    id: UUID
    text: str
    order: int
    votes: int


class PollResponse(BaseSchema):
    """Poll with per-option vote counts and the caller's choice."""

    id: UUID
    question: str
    options: list[PollOptionResponse]
    total_votes: int
    my_vote_option_id: UUID | None = None


class PollVoteRequest(BaseSchema):
    option_id: UUID


# === Posts ===


class PostCreate(BaseSchema):
    """Schema for creating a post. ``category`` is a category name in the shop."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    image_url: str | None = Field(default=None, max_length=1024)
    category: str | None = Field(default=None, max_length=100)
    status: PostStatus = PostStatus.PUBLISHED
    poll: PollCreate | None = None


class PostUpdate(BaseSchema):
    """Partial post update. ``is_pinned`` requires moderator rights."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    image_url: str | None = Field(default=None, max_length=1024)
    category: str | None = Field(default=None, max_length=100)
    status: PostStatus | None = None
    is_pinned: bool | None = None

    @field_validator("title", "content", "status", "is_pinned")
    @classmethod
    def reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class PostResponse(BaseSchema):
    """Post as listed in the community feed."""

    id: UUID
    shop_id: UUID
    title: str
    content: str
    image_url: str | None
    slug: str
    status: PostStatus
    is_pinned: bool
    author: MemberSummary
    category: CategorySummary | None
    comments_count: int = 0
    reactions_count: int = 0
    reactions: list[ReactionCount] = []
    my_reaction: ReactionType | None = None
    poll: PollResponse | None = None
    created_at: datetime
    updated_at: datetime


class RecentPost(BaseSchema):
    id: UUID
    title: str
    slug: str
    created_at: datetime
    comments_count: int
    reactions_count: int


class RecentComment(BaseSchema):
    id: UUID
    content: str
    created_at: datetime
    post_id: UUID
    post_title: str
    post_slug: str


class PostDetailResponse(BaseSchema):
    """A post together with context about its author."""

    post: PostResponse
    author_recent_posts: list[RecentPost]
    author_recent_comments: list[RecentComment]
    author_badges: list[BadgeResponse]
