"""Reaction endpoints for posts and comments."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, status

from community.api.v1.posts import get_post_or_404
from community.core.deps import CurrentMember, CurrentShop, DBSession
from community.core.rate_limit import limiter
from community.models.reaction import Reaction, ReactionType
from community.schemas.member import MemberSummary
from community.schemas.reaction import (
    PostReactionsResponse,
    ReactionGroup,
    ReactionResponse,
    ReactionToggle,
    ReactionToggleResponse,
)
from community.services.comment_service import CommentService
from community.services.reaction_service import ReactionService, ToggleAction

router = APIRouter()


def _toggle_response(
    action: ToggleAction, type: ReactionType, reaction: Reaction | None
) -> ReactionToggleResponse:
    return ReactionToggleResponse(
        action=action,
        type=type,
        reaction=ReactionResponse.model_validate(reaction) if reaction else None,
    )


@router.get(
    "/posts/{post_id}/reactions",
    response_model=PostReactionsResponse,
    summary="List post reactions",
    description="Members who reacted to a post, grouped by reaction type.",
)
async def list_post_reactions(
    post_id: UUID,
    shop: CurrentShop,
    db: DBSession,
) -> PostReactionsResponse:
    post = await get_post_or_404(db, post_id, shop.id)
    grouped = await ReactionService(db).list_post_reactions(post.id, shop.id)

    groups = [
        ReactionGroup(
            type=reaction_type,
            count=len(members),
            members=[MemberSummary.model_validate(m) for m in members],
        )
        for reaction_type, members in grouped.items()
    ]
    return PostReactionsResponse(
        post_id=post.id,
        total=sum(g.count for g in groups),
        reactions=groups,
    )


@router.post(
    "/posts/{post_id}/reactions",
    response_model=ReactionToggleResponse,
    summary="Toggle post reaction",
    description="""
    Toggle the caller's reaction on a post: react, switch to another type,
    or remove the reaction by sending the same type again.
    """,
)
@limiter.limit("60/minute")
async def toggle_post_reaction(
    request: Request,  # noqa: ARG001  # required by slowapi
    post_id: UUID,
    data: ReactionToggle,
    member: CurrentMember,
    db: DBSession,
) -> ReactionToggleResponse:
    post = await get_post_or_404(db, post_id, member.shop_id)
    action, reaction = await ReactionService(db).toggle(member, data.type, post=post)
    response = _toggle_response(action, data.type, reaction)
    await db.commit()
    return response


@router.post(
    "/comments/{comment_id}/reactions",
    response_model=ReactionToggleResponse,
    summary="Toggle comment reaction",
)
@limiter.limit("60/minute")
async def toggle_comment_reaction(
    request: Request,  # noqa: ARG001  # required by slowapi
    comment_id: UUID,
    data: ReactionToggle,
    member: CurrentMember,
    db: DBSession,
) -> ReactionToggleResponse:
    comment = await CommentService(db).get_comment(comment_id, member.shop_id)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found",
        )

    action, reaction = await ReactionService(db).toggle(member, data.type, comment=comment)
    response = _toggle_response(action, data.type, reaction)
    await db.commit()
    return response
