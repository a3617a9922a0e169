"""SQLAlchemy models."""

from community.models.badge import Badge
from community.models.base import Base
from community.models.category import Category
from community.models.comment import Comment
from community.models.follow import Follow
from community.models.member import Member, MemberRole
from community.models.poll import Poll, PollOption, PollVote
from community.models.post import Post, PostStatus
from community.models.reaction import Reaction, ReactionType
from community.models.shop import Shop

__all__ = [
    # Base
    "Base",
    # Tenancy
    "Shop",
    "Member",
    "MemberRole",
    "Follow",
    # Forum
    "Category",
    "Post",
    "PostStatus",
    "Comment",
    "Reaction",
    "ReactionType",
    # Polls
    "Poll",
    "PollOption",
    "PollVote",
    # Gamification
    "Badge",
]
