"""Follow endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, status

from community.core.deps import CurrentMember, CurrentShop, DBSession, OptionalMember
from community.core.tenancy import get_member_in_shop
from community.schemas.follow import FollowersCountResponse, FollowResponse, FollowStatusResponse
from community.services.follow_service import FollowService

router = APIRouter()


@router.post(
    "/{member_id}/follow",
    response_model=FollowResponse,
    summary="Follow member",
)
async def follow_member(
    member_id: UUID,
    request: Request,
    member: CurrentMember,
    db: DBSession,
) -> FollowResponse:
    if member_id == member.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot follow yourself",
        )

    target = await get_member_in_shop(db, member_id, member.shop_id, request.url.path)
    service = FollowService(db)
    await service.follow(member, target)
    await db.commit()

    return FollowResponse(
        member_id=target.id,
        following=True,
        followers_count=await service.followers_count(target.id, member.shop_id),
    )


@router.delete(
    "/{member_id}/follow",
    response_model=FollowResponse,
    summary="Unfollow member",
)
async def unfollow_member(
    member_id: UUID,
    request: Request,
    member: CurrentMember,
    db: DBSession,
) -> FollowResponse:
    target = await get_member_in_shop(db, member_id, member.shop_id, request.url.path)
    service = FollowService(db)
    await service.unfollow(member, target)
    await db.commit()

    return FollowResponse(
        member_id=target.id,
        following=False,
        followers_count=await service.followers_count(target.id, member.shop_id),
    )


@router.get(
    "/{member_id}/followers/count",
    response_model=FollowersCountResponse,
    summary="Count followers",
)
async def followers_count(
    member_id: UUID,
    request: Request,
    shop: CurrentShop,
    db: DBSession,
) -> FollowersCountResponse:
    target = await get_member_in_shop(db, member_id, shop.id, request.url.path)
    return FollowersCountResponse(
        member_id=target.id,
        followers_count=await FollowService(db).followers_count(target.id, shop.id),
    )


@router.get(
    "/{member_id}/followers/status",
    response_model=FollowStatusResponse,
    summary="Check follow status",
    description="Whether the caller follows the member. Always false for anonymous visitors.",
)
async def follow_status(
    member_id: UUID,
    request: Request,
    shop: CurrentShop,
    viewer: OptionalMember,
    db: DBSession,
) -> FollowStatusResponse:
    target = await get_member_in_shop(db, member_id, shop.id, request.url.path)
    is_following = (
        await FollowService(db).is_following(viewer.id, target.id) if viewer else False
    )
    return FollowStatusResponse(member_id=target.id, is_following=is_following)
