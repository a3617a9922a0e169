"""Badge endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request, status

from community.core.deps import AdminMember, CurrentShop, DBSession
from community.core.tenancy import get_member_in_shop
from community.schemas.badge import BadgeCreate, BadgeResponse, BadgeUpdate
from community.schemas.common import MessageResponse
from community.services.badge_service import BadgeService

router = APIRouter()


def _badge_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Badge not found",
    )


def _duplicate_name(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Badge '{name}' already exists in this shop",
    )


@router.get(
    "",
    response_model=list[BadgeResponse],
    summary="List badges",
    description="""
    List the shop's badges ordered by display order.

    With `member_id`, list the badges that member has unlocked, falling back
    to all of the shop's badges when they have not unlocked any yet.
    """,
)
async def list_badges(
    request: Request,
    shop: CurrentShop,
    db: DBSession,
    member_id: UUID | None = Query(None, description="Only badges this member has unlocked"),
) -> list[BadgeResponse]:
    service = BadgeService(db)

    badges = []
    if member_id is not None:
        member = await get_member_in_shop(db, member_id, shop.id, request.url.path)
        badges = await service.unlocked_badges(shop.id, member.points)

    if not badges:
        badges = await service.list_badges(shop.id)

    return [BadgeResponse.model_validate(b) for b in badges]


@router.post(
    "",
    response_model=BadgeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create badge",
)
async def create_badge(
    data: BadgeCreate,
    admin: AdminMember,
    db: DBSession,
) -> BadgeResponse:
    badge = await BadgeService(db).create_badge(admin.shop_id, data)
    if badge is None:
        raise _duplicate_name(data.name)

    await db.commit()
    return BadgeResponse.model_validate(badge)


@router.put(
    "/{badge_id}",
    response_model=BadgeResponse,
    summary="Replace badge",
)
async def update_badge(
    badge_id: UUID,
    data: BadgeUpdate,
    admin: AdminMember,
    db: DBSession,
) -> BadgeResponse:
    service = BadgeService(db)
    badge = await service.get_badge(badge_id, admin.shop_id)
    if badge is None:
        raise _badge_not_found()

    updated = await service.update_badge(badge, data)
    if updated is None:
        raise _duplicate_name(data.name)

    await db.commit()
    return BadgeResponse.model_validate(updated)


@router.delete(
    "/{badge_id}",
    response_model=MessageResponse,
    summary="Delete badge",
    description="Delete a custom badge. Default badges cannot be deleted.",
)
async def delete_badge(
    badge_id: UUID,
    admin: AdminMember,
    db: DBSession,
) -> MessageResponse:
    service = BadgeService(db)
    badge = await service.get_badge(badge_id, admin.shop_id)
    if badge is None:
        raise _badge_not_found()

    if not await service.delete_badge(badge):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Default badges cannot be deleted",
        )

    await db.commit()
    return MessageResponse(message="Badge deleted")
