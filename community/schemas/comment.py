"""Pydantic schemas for comments and replies."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from community.models.reaction import ReactionType
from community.schemas.common import BaseSchema
from community.schemas.member import MemberSummary
from community.schemas.reaction import ReactionCount


class CommentCreate(BaseSchema):
    """New comment; set ``parent_id`` to reply to another comment of the same post."""

    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: UUID | None = None


class CommentResponse(BaseSchema):
    id: UUID
    post_id: UUID
    parent_id: UUID | None
    content: str
    author: MemberSummary
    reactions: list[ReactionCount] = []
    reactions_count: int = 0
    my_reaction: ReactionType | None = None
    replies: list["CommentResponse"] = []
    created_at: datetime


CommentResponse.model_rebuild()
