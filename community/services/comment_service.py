"""Comments and nested replies."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from community.core.config import settings
from community.models.comment import Comment
from community.models.member import Member
from community.models.post import Post
from community.schemas.comment import CommentResponse
from community.schemas.member import MemberSummary
from community.services.badge_service import BadgeService
from community.services.reaction_service import ReactionService

logger = logging.getLogger(__name__)


class CommentService:
    """Service for comments on posts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_comment(self, comment_id: UUID, shop_id: UUID) -> Comment | None:
        """Get comment by ID, scoped to shop."""
        query = (
            select(Comment)
            .where(
                Comment.id == comment_id,
                Comment.shop_id == shop_id,
            )
            .options(selectinload(Comment.author))
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_comments(self, post_id: UUID, shop_id: UUID) -> list[Comment]:
        """All comments of a post, oldest first."""
        query = (
            select(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.shop_id == shop_id,
            )
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_comment(
        self,
        post: Post,
        author: Member,
        content: str,
        parent_id: UUID | None = None,
    ) -> Comment | None:
        """Add a comment to a post and award the author points.

        Returns:
            The comment, or None when ``parent_id`` is not a comment of this post
        """
        if parent_id is not None:
            parent = await self.get_comment(parent_id, post.shop_id)
            if parent is None or parent.post_id != post.id:
                return None

        comment = Comment(
            shop_id=post.shop_id,
            post_id=post.id,
            author=author,
            parent_id=parent_id,
            content=content,
        )
        self.db.add(comment)
        await self.db.flush()

        await BadgeService(self.db).award_points(author.id, settings.points_per_comment)
        return comment

    async def delete_comment(self, comment: Comment) -> None:
        """Delete a comment together with its replies and reactions."""
        await self.db.delete(comment)
        await self.db.flush()
        logger.info("Comment %s deleted from post %s", comment.id, comment.post_id)

    async def build_tree(
        self,
        comments: list[Comment],
        viewer_id: UUID | None = None,
    ) -> list[CommentResponse]:
        """Nest comments under their parents, keeping creation order at each level."""
        comment_ids = [comment.id for comment in comments]
        reactions = ReactionService(self.db)
        reaction_counts = await reactions.counts_for_comments(comment_ids)
        my_reactions = (
            await reactions.member_reactions_on_comments(viewer_id, comment_ids)
            if viewer_id
            else {}
        )

        nodes = {
            comment.id: self.to_response(
                comment,
                reaction_counts.get(comment.id, []),
                my_reactions.get(comment.id),
            )
            for comment in comments
        }

        roots: list[CommentResponse] = []
        for comment in comments:
            node = nodes[comment.id]
            parent = nodes.get(comment.parent_id) if comment.parent_id else None
            if parent is not None:
                parent.replies.append(node)
            else:
                roots.append(node)
        return roots

    @staticmethod
    def to_response(comment: Comment, counts=None, my_reaction=None) -> CommentResponse:
        counts = counts or []
        return CommentResponse(
            id=comment.id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            content=comment.content,
            author=MemberSummary.model_validate(comment.author),
            reactions=counts,
            reactions_count=sum(c.count for c in counts),
            my_reaction=my_reaction,
            replies=[],
            created_at=comment.created_at,
        )
