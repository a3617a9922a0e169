"""Comment endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, status

from community.api.v1.posts import get_post_or_404
from community.core.deps import CurrentMember, CurrentShop, DBSession, OptionalMember
from community.core.rate_limit import limiter
from community.schemas.comment import CommentCreate, CommentResponse
from community.schemas.common import MessageResponse
from community.services.comment_service import CommentService

router = APIRouter()


@router.get(
    "/posts/{post_id}/comments",
    response_model=list[CommentResponse],
    summary="List comments",
    description="Comments of a post, oldest first, with replies nested under their parent.",
)
async def list_comments(
    post_id: UUID,
    shop: CurrentShop,
    viewer: OptionalMember,
    db: DBSession,
) -> list[CommentResponse]:
    post = await get_post_or_404(db, post_id, shop.id)
    service = CommentService(db)
    comments = await service.list_comments(post.id, shop.id)
    return await service.build_tree(comments, viewer.id if viewer else None)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
    description="Comment on a post, or reply to one of its comments with `parent_id`.",
)
@limiter.limit("20/minute")
async def create_comment(
    request: Request,  # noqa: ARG001  # required by slowapi
    post_id: UUID,
    data: CommentCreate,
    member: CurrentMember,
    db: DBSession,
) -> CommentResponse:
    post = await get_post_or_404(db, post_id, member.shop_id)

    comment = await CommentService(db).create_comment(
        post,
        member,
        content=data.content,
        parent_id=data.parent_id,
    )
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Parent comment not found on this post",
        )

    await db.commit()
    return CommentService.to_response(comment)


@router.delete(
    "/comments/{comment_id}",
    response_model=MessageResponse,
    summary="Delete comment",
    description="Delete a comment and its replies. Author, admin or moderator.",
)
async def delete_comment(
    comment_id: UUID,
    member: CurrentMember,
    db: DBSession,
) -> MessageResponse:
    service = CommentService(db)
    comment = await service.get_comment(comment_id, member.shop_id)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found",
        )

    if comment.author_id != member.id and not member.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own comments",
        )

    await service.delete_comment(comment)
    await db.commit()
    return MessageResponse(message="Comment deleted")
