"""Pydantic schemas for reactions."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from community.models.reaction import ReactionType
from community.schemas.common import BaseSchema
from community.schemas.member import MemberSummary


class ReactionToggle(BaseSchema):
    """Add, switch or remove the caller's reaction."""

    type: ReactionType


class ReactionResponse(BaseSchema):
    id: UUID
    type: ReactionType
    member_id: UUID
    post_id: UUID | None
    comment_id: UUID | None
    created_at: datetime


class ReactionToggleResponse(BaseSchema):
    """Outcome of a toggle: ``reaction`` is None when it was removed."""

    action: Literal["created", "updated", "removed"]
    type: ReactionType
    reaction: ReactionResponse | None = None


class ReactionCount(BaseSchema):
    type: ReactionType
    count: int


class ReactionGroup(BaseSchema):
    """Members who picked one reaction type."""

    type: ReactionType
    count: int
    members: list[MemberSummary]


class PostReactionsResponse(BaseSchema):
    post_id: UUID
    total: int
    reactions: list[ReactionGroup]
