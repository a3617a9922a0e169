"""Poll endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from community.core.deps import CurrentMember, CurrentShop, DBSession, OptionalMember
from community.models.poll import Poll
from community.schemas.post import PollResponse, PollVoteRequest
from community.services.poll_service import PollService, build_poll_response

router = APIRouter()


async def _get_poll_or_404(db: DBSession, post_id: UUID, shop_id: UUID) -> Poll:
    poll = await PollService(db).get_poll_for_post(post_id, shop_id)
    if poll is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Poll not found for this post",
        )
    return poll


@router.get(
    "/posts/{post_id}/poll",
    response_model=PollResponse,
    summary="Get poll results",
)
async def get_poll(
    post_id: UUID,
    shop: CurrentShop,
    viewer: OptionalMember,
    db: DBSession,
) -> PollResponse:
    poll = await _get_poll_or_404(db, post_id, shop.id)
    return build_poll_response(poll, viewer.id if viewer else None)


@router.post(
    "/posts/{post_id}/poll/vote",
    response_model=PollResponse,
    summary="Vote in poll",
    description="Cast a vote, or move an existing vote to another option.",
)
async def vote(
    post_id: UUID,
    data: PollVoteRequest,
    member: CurrentMember,
    db: DBSession,
) -> PollResponse:
    poll = await _get_poll_or_404(db, post_id, member.shop_id)

    cast = await PollService(db).vote(poll, member, data.option_id)
    if cast is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Option does not belong to this poll",
        )

    response = build_poll_response(poll, member.id)
    await db.commit()
    return response


@router.delete(
    "/posts/{post_id}/poll/vote",
    response_model=PollResponse,
    summary="Withdraw vote",
)
async def withdraw_vote(
    post_id: UUID,
    member: CurrentMember,
    db: DBSession,
) -> PollResponse:
    poll = await _get_poll_or_404(db, post_id, member.shop_id)

    if not await PollService(db).withdraw_vote(poll, member):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="You have not voted in this poll",
        )

    response = build_poll_response(poll, member.id)
    await db.commit()
    return response
