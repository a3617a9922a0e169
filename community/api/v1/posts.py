"""Community post endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request, status

from community.core.deps import CurrentMember, CurrentShop, DBSession, OptionalMember
from community.core.rate_limit import limiter
from community.core.tenancy import require_moderator
from community.models.post import Post
from community.schemas.badge import BadgeResponse
from community.schemas.common import MessageResponse, PaginatedResponse, page_count
from community.schemas.post import PostCreate, PostDetailResponse, PostResponse, PostUpdate
from community.services.badge_service import BadgeService
from community.services.category_service import CategoryService
from community.services.post_service import PostService

router = APIRouter()


# === Helpers ===


async def get_post_or_404(db: DBSession, post_id: UUID, shop_id: UUID) -> Post:
    """Load a post of the current shop; posts of other shops look missing."""
    post = await PostService(db).get_post(post_id, shop_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found in this shop",
        )
    return post


async def _single_response(db: DBSession, post: Post, viewer_id: UUID | None) -> PostResponse:
    responses = await PostService(db).build_responses([post], viewer_id)
    return responses[0]


# === Endpoints ===


@router.get(
    "",
    response_model=PaginatedResponse[PostResponse],
    summary="List posts",
    description="""
    List the shop's published posts, pinned posts first, then newest first.

    Filter by category (name or id), author or a search term matched
    against title and content.
    """,
)
async def list_posts(
    shop: CurrentShop,
    viewer: OptionalMember,
    db: DBSession,
    category: str | None = Query(None, description="Category name or id"),
    author_id: UUID | None = Query(None, description="Filter by author"),
    search: str | None = Query(None, description="Search title and content"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PaginatedResponse[PostResponse]:
    """List posts for the current shop."""
    category_id = None
    if category:
        found = await CategoryService(db).resolve(shop.id, category)
        if found is None:
            return PaginatedResponse(items=[], total=0, page=page, page_size=page_size, pages=1)
        category_id = found.id

    service = PostService(db)
    posts, total = await service.list_posts(
        shop_id=shop.id,
        category_id=category_id,
        author_id=author_id,
        search=search,
        limit=page_size,
        offset=(page - 1) * page_size,
    )

    return PaginatedResponse(
        items=await service.build_responses(posts, viewer.id if viewer else None),
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a post, optionally with a poll. The author earns points.",
)
@limiter.limit("10/minute")
async def create_post(
    request: Request,  # noqa: ARG001  # required by slowapi
    data: PostCreate,
    member: CurrentMember,
    db: DBSession,
) -> PostResponse:
    post = await PostService(db).create_post(member, data)
    response = await _single_response(db, post, member.id)
    await db.commit()
    return response


@router.get(
    "/by-slug/{slug}",
    response_model=PostResponse,
    summary="Get post by slug",
)
async def get_post_by_slug(
    slug: str,
    shop: CurrentShop,
    viewer: OptionalMember,
    db: DBSession,
) -> PostResponse:
    post = await PostService(db).get_post_by_slug(slug, shop.id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found in this shop",
        )
    return await _single_response(db, post, viewer.id if viewer else None)


@router.get(
    "/{post_id}",
    response_model=PostDetailResponse,
    summary="Get post",
    description="""
    Get a post together with its author's context: their 4 most recent other
    posts, their 3 most recent comments on other posts, and their badges.
    """,
)
async def get_post(
    post_id: UUID,
    shop: CurrentShop,
    viewer: OptionalMember,
    db: DBSession,
) -> PostDetailResponse:
    post = await get_post_or_404(db, post_id, shop.id)
    service = PostService(db)

    badges = await BadgeService(db).unlocked_badges(shop.id, post.author.points)

    return PostDetailResponse(
        post=await _single_response(db, post, viewer.id if viewer else None),
        author_recent_posts=await service.recent_posts(
            post.author_id, shop.id, exclude_post_id=post.id, limit=4
        ),
        author_recent_comments=await service.recent_comments(
            post.author_id, shop.id, exclude_post_id=post.id, limit=3
        ),
        author_badges=[BadgeResponse.model_validate(b) for b in badges],
    )


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    summary="Update post",
    description="""
    Partially update a post. Only the author may edit its content;
    pinning and unpinning require moderator rights.
    """,
)
async def update_post(
    post_id: UUID,
    data: PostUpdate,
    member: CurrentMember,
    db: DBSession,
) -> PostResponse:
    post = await get_post_or_404(db, post_id, member.shop_id)

    changes = data.model_dump(exclude_unset=True)
    if "is_pinned" in changes:
        require_moderator(member)
    if set(changes) - {"is_pinned"} and post.author_id != member.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the author can edit this post",
        )

    await PostService(db).update_post(post, data)
    response = await _single_response(db, post, member.id)
    await db.commit()
    return response


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete post",
    description="Delete a post with its comments, reactions and poll. Author, admin or moderator.",
)
async def delete_post(
    post_id: UUID,
    member: CurrentMember,
    db: DBSession,
) -> MessageResponse:
    post = await get_post_or_404(db, post_id, member.shop_id)

    if post.author_id != member.id and not member.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own posts",
        )

    await PostService(db).delete_post(post)
    await db.commit()
    return MessageResponse(message="Post deleted")
