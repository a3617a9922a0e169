"""Community post management."""

import logging
import re
import uuid
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from community.core.config import settings
from community.models.comment import Comment
from community.models.member import Member
from community.models.poll import Poll
from community.models.post import Post, PostStatus
from community.schemas.category import CategorySummary
from community.schemas.member import MemberSummary
from community.schemas.post import (
    PostCreate,
    PostResponse,
    PostUpdate,
    RecentComment,
    RecentPost,
)
from community.services.badge_service import BadgeService
from community.services.category_service import CategoryService
from community.services.poll_service import PollService, build_poll_response
from community.services.reaction_service import ReactionService

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """URL slug for a post title, made unique with a short random suffix."""
    base = _SLUG_STRIP.sub("-", title.lower()).strip("-")[:80].rstrip("-") or "post"
    return f"{base}-{uuid.uuid4().hex[:8]}"


class PostService:
    """Service for posts, their feed and their authors' recent activity."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @staticmethod
    def _load_options() -> list:
        return [
            selectinload(Post.author),
            selectinload(Post.category),
            selectinload(Post.poll).selectinload(Poll.options),
            selectinload(Post.poll).selectinload(Poll.votes),
        ]

    # === Queries ===

    async def get_post(self, post_id: UUID, shop_id: UUID) -> Post | None:
        """Get post by ID, scoped to shop."""
        query = (
            select(Post)
            .where(
                Post.id == post_id,
                Post.shop_id == shop_id,
            )
            .options(*self._load_options())
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_post_by_slug(self, slug: str, shop_id: UUID) -> Post | None:
        query = (
            select(Post)
            .where(
                Post.slug == slug,
                Post.shop_id == shop_id,
            )
            .options(*self._load_options())
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_posts(
        self,
        shop_id: UUID,
        category_id: UUID | None = None,
        author_id: UUID | None = None,
        search: str | None = None,
        status: PostStatus | None = PostStatus.PUBLISHED,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Post], int]:
        """List a shop's posts, pinned first then newest first.

        Returns:
            Tuple of (posts, total_count)
        """
        base_query = select(Post).where(Post.shop_id == shop_id)

        if category_id:
            base_query = base_query.where(Post.category_id == category_id)
        if author_id:
            base_query = base_query.where(Post.author_id == author_id)
        if status:
            base_query = base_query.where(Post.status == status)
        if search:
            pattern = f"%{search.lower()}%"
            base_query = base_query.where(
                or_(
                    func.lower(Post.title).like(pattern),
                    func.lower(Post.content).like(pattern),
                )
            )

        count_query = select(func.count()).select_from(base_query.subquery())
        total = await self.db.scalar(count_query) or 0

        query = (
            base_query.options(*self._load_options())
            .order_by(Post.is_pinned.desc(), Post.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def comment_counts(self, post_ids: list[UUID]) -> dict[UUID, int]:
        if not post_ids:
            return {}
        query = (
            select(Comment.post_id, func.count().label("count"))
            .where(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id)
        )
        result = await self.db.execute(query)
        return {post_id: count for post_id, count in result.all()}

    # === Mutations ===

    async def create_post(self, author: Member, data: PostCreate) -> Post:
        """Create a post, with its poll when one is supplied, and award the author points.

        An unknown category name leaves the post without a category.
        """
        category = None
        if data.category:
            category = await CategoryService(self.db).get_by_name(author.shop_id, data.category)

        post = Post(
            shop_id=author.shop_id,
            author=author,
            category=category,
            title=data.title,
            content=data.content,
            image_url=data.image_url,
            slug=slugify(data.title),
            status=data.status,
            poll=PollService(self.db).create_poll(author.shop_id, data.poll) if data.poll else None,
        )
        self.db.add(post)
        await self.db.flush()

        await BadgeService(self.db).award_points(author.id, settings.points_per_post)
        logger.info("Post %s created in shop %s", post.id, author.shop_id)
        return post

    async def update_post(self, post: Post, data: PostUpdate) -> Post:
        """Apply a partial update; a category name that does not exist clears the category."""
        update_data = data.model_dump(exclude_unset=True)

        if "category" in update_data:
            name = update_data.pop("category")
            post.category = (
                await CategoryService(self.db).get_by_name(post.shop_id, name) if name else None
            )

        for field, value in update_data.items():
            setattr(post, field, value)

        await self.db.flush()
        return post

    async def delete_post(self, post: Post) -> None:
        """Delete a post with its comments, reactions and poll."""
        await self.db.delete(post)
        await self.db.flush()
        logger.info("Post %s deleted from shop %s", post.id, post.shop_id)

    # === Responses ===

    async def build_responses(
        self,
        posts: list[Post],
        viewer_id: UUID | None = None,
    ) -> list[PostResponse]:
        """Feed entries with counts and the viewer's own reaction and vote."""
        post_ids = [post.id for post in posts]
        reactions = ReactionService(self.db)

        comment_counts = await self.comment_counts(post_ids)
        reaction_counts = await reactions.counts_for_posts(post_ids)
        my_reactions = (
            await reactions.member_reactions_on_posts(viewer_id, post_ids) if viewer_id else {}
        )

        responses = []
        for post in posts:
            counts = reaction_counts.get(post.id, [])
            responses.append(
                PostResponse(
                    id=post.id,
                    shop_id=post.shop_id,
                    title=post.title,
                    content=post.content,
                    image_url=post.image_url,
                    slug=post.slug,
                    status=post.status,
                    is_pinned=post.is_pinned,
                    author=MemberSummary.model_validate(post.author),
                    category=(
                        CategorySummary.model_validate(post.category) if post.category else None
                    ),
                    comments_count=comment_counts.get(post.id, 0),
                    reactions_count=sum(c.count for c in counts),
                    reactions=counts,
                    my_reaction=my_reactions.get(post.id),
                    poll=build_poll_response(post.poll, viewer_id) if post.poll else None,
                    created_at=post.created_at,
                    updated_at=post.updated_at,
                )
            )
        return responses

    async def recent_posts(
        self,
        author_id: UUID,
        shop_id: UUID,
        exclude_post_id: UUID | None = None,
        limit: int = 4,
    ) -> list[RecentPost]:
        """An author's latest published posts."""
        query = select(Post).where(
            Post.shop_id == shop_id,
            Post.author_id == author_id,
            Post.status == PostStatus.PUBLISHED,
        )
        if exclude_post_id:
            query = query.where(Post.id != exclude_post_id)

        result = await self.db.execute(query.order_by(Post.created_at.desc()).limit(limit))
        posts = list(result.scalars().all())

        post_ids = [post.id for post in posts]
        comment_counts = await self.comment_counts(post_ids)
        reaction_counts = await ReactionService(self.db).counts_for_posts(post_ids)

        return [
            RecentPost(
                id=post.id,
                title=post.title,
                slug=post.slug,
                created_at=post.created_at,
                comments_count=comment_counts.get(post.id, 0),
                reactions_count=sum(c.count for c in reaction_counts.get(post.id, [])),
            )
            for post in posts
        ]

    async def recent_comments(
        self,
        author_id: UUID,
        shop_id: UUID,
        exclude_post_id: UUID | None = None,
        limit: int = 3,
    ) -> list[RecentComment]:
        """An author's latest comments, with the post each one belongs to."""
        query = (
            select(Comment, Post.title, Post.slug)
            .join(Post, Comment.post_id == Post.id)
            .where(
                Comment.shop_id == shop_id,
                Comment.author_id == author_id,
            )
        )
        if exclude_post_id:
            query = query.where(Comment.post_id != exclude_post_id)

        result = await self.db.execute(query.order_by(Comment.created_at.desc()).limit(limit))

        return [
            RecentComment(
                id=comment.id,
                content=comment.content,
                created_at=comment.created_at,
                post_id=comment.post_id,
                post_title=title,
                post_slug=slug,
            )
            for comment, title, slug in result.all()
        ]
