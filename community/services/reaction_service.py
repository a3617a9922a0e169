"""Reactions on posts and comments."""

import logging
from collections import defaultdict
from typing import Literal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, selectinload

from community.core.config import settings
from community.models.comment import Comment
from community.models.member import Member
from community.models.post import Post
from community.models.reaction import Reaction, ReactionType
from community.schemas.reaction import ReactionCount
from community.services.badge_service import BadgeService

logger = logging.getLogger(__name__)

ToggleAction = Literal["created", "updated", "removed"]


class ReactionService:
    """Service for toggling and summarizing reactions."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def toggle(
        self,
        member: Member,
        type: ReactionType,
        post: Post | None = None,
        comment: Comment | None = None,
    ) -> tuple[ToggleAction, Reaction | None]:
        """Add, switch or remove a member's reaction on one post or comment.

        No reaction yet creates one, the same type again removes it, and a
        different type replaces it. Only a newly created reaction earns the
        content's author points, and never for reacting to one's own content.

        Returns:
            Tuple of (action, reaction); the reaction is None when removed
        """
        if (post is None) == (comment is None):
            raise ValueError("Reaction needs exactly one target")

        query = select(Reaction).where(
            Reaction.shop_id == member.shop_id,
            Reaction.member_id == member.id,
        )
        if post is not None:
            query = query.where(Reaction.post_id == post.id)
        else:
            query = query.where(Reaction.comment_id == comment.id)  # type: ignore[union-attr]

        result = await self.db.execute(query)
        existing = result.scalar_one_or_none()

        if existing and existing.type == type:
            await self.db.delete(existing)
            await self.db.flush()
            return "removed", None

        if existing:
            existing.type = type
            await self.db.flush()
            return "updated", existing

        reaction = Reaction(
            shop_id=member.shop_id,
            member_id=member.id,
            post_id=post.id if post else None,
            comment_id=comment.id if comment else None,
            type=type,
        )
        self.db.add(reaction)
        await self.db.flush()

        author_id = post.author_id if post else comment.author_id  # type: ignore[union-attr]
        if author_id != member.id:
            await BadgeService(self.db).award_points(
                author_id, settings.points_per_reaction_received
            )

        return "created", reaction

    # === Summaries ===

    async def _count_by_type(
        self,
        column: InstrumentedAttribute[UUID | None],
        target_ids: list[UUID],
    ) -> dict[UUID, list[ReactionCount]]:
        if not target_ids:
            return {}

        query = (
            select(column, Reaction.type, func.count().label("count"))
            .where(column.in_(target_ids))
            .group_by(column, Reaction.type)
        )
        result = await self.db.execute(query)

        counts: dict[UUID, list[ReactionCount]] = defaultdict(list)
        for target_id, reaction_type, count in result.all():
            counts[target_id].append(ReactionCount(type=reaction_type, count=count))
        return dict(counts)

    async def counts_for_posts(self, post_ids: list[UUID]) -> dict[UUID, list[ReactionCount]]:
        """Reaction counts per type for each post id."""
        return await self._count_by_type(Reaction.post_id, post_ids)

    async def counts_for_comments(
        self, comment_ids: list[UUID]
    ) -> dict[UUID, list[ReactionCount]]:
        return await self._count_by_type(Reaction.comment_id, comment_ids)

    async def member_reactions_on_posts(
        self, member_id: UUID, post_ids: list[UUID]
    ) -> dict[UUID, ReactionType]:
        if not post_ids:
            return {}
        query = select(Reaction.post_id, Reaction.type).where(
            Reaction.member_id == member_id,
            Reaction.post_id.in_(post_ids),
        )
        result = await self.db.execute(query)
        return {post_id: reaction_type for post_id, reaction_type in result.all()}

    async def member_reactions_on_comments(
        self, member_id: UUID, comment_ids: list[UUID]
    ) -> dict[UUID, ReactionType]:
        if not comment_ids:
            return {}
        query = select(Reaction.comment_id, Reaction.type).where(
            Reaction.member_id == member_id,
            Reaction.comment_id.in_(comment_ids),
        )
        result = await self.db.execute(query)
        return {comment_id: reaction_type for comment_id, reaction_type in result.all()}

    async def list_post_reactions(
        self, post_id: UUID, shop_id: UUID
    ) -> dict[ReactionType, list[Member]]:
        """Members who reacted to a post, grouped by reaction type."""
        query = (
            select(Reaction)
            .where(
                Reaction.post_id == post_id,
                Reaction.shop_id == shop_id,
            )
            .options(selectinload(Reaction.member))
            .order_by(Reaction.created_at)
        )
        result = await self.db.execute(query)

        grouped: dict[ReactionType, list[Member]] = defaultdict(list)
        for reaction in result.scalars().all():
            grouped[reaction.type].append(reaction.member)
        return dict(grouped)
