"""Community membership and role endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request, status

from community.core.auth import get_user_email
from community.core.deps import AdminMember, CurrentMember, CurrentShop, CurrentUser, DBSession
from community.core.tenancy import get_member_in_shop
from community.models.member import MemberRole
from community.schemas.badge import MemberPointsResponse
from community.schemas.common import PaginatedResponse, page_count
from community.schemas.member import (
    MemberJoin,
    MemberJoinResponse,
    MemberResponse,
    MemberRoleResponse,
    MemberRoleUpdate,
)
from community.services.badge_service import BadgeService
from community.services.member_service import MemberService

router = APIRouter()


@router.post(
    "/join",
    response_model=MemberJoinResponse,
    summary="Join the shop community",
    description="""
    Create the caller's membership in the current shop.

    The first person to join a shop becomes its admin and owner.
    Joining again returns the existing membership.
    """,
)
async def join_community(
    user: CurrentUser,
    shop: CurrentShop,
    db: DBSession,
    data: MemberJoin | None = None,
) -> MemberJoinResponse:
    """Join the current shop's community."""
    data = data or MemberJoin()
    member, created = await MemberService(db).join(
        shop,
        email=get_user_email(user),
        name=data.name or user.get("name"),
        avatar_url=data.avatar_url or user.get("picture"),
    )
    await db.commit()

    return MemberJoinResponse(
        member=MemberResponse.model_validate(member),
        created=created,
    )


@router.get(
    "/me",
    response_model=MemberResponse,
    summary="Get my membership",
)
async def get_me(member: CurrentMember) -> MemberResponse:
    return MemberResponse.model_validate(member)


@router.get(
    "",
    response_model=PaginatedResponse[MemberResponse],
    summary="List members",
    description="List the shop's members, newest first. Admin only.",
)
async def list_members(
    admin: AdminMember,
    db: DBSession,
    search: str | None = Query(None, description="Match against name or email"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PaginatedResponse[MemberResponse]:
    """List members of the current shop."""
    members, total = await MemberService(db).list_members(
        shop_id=admin.shop_id,
        search=search,
        limit=page_size,
        offset=(page - 1) * page_size,
    )

    return PaginatedResponse(
        items=[MemberResponse.model_validate(m) for m in members],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.put(
    "/{member_id}/role",
    response_model=MemberRoleResponse,
    summary="Change a member's role",
    description="Set a member's role to ADMIN, MODERATOR or MEMBER. Admin only.",
)
async def update_member_role(
    member_id: UUID,
    data: MemberRoleUpdate,
    request: Request,
    admin: AdminMember,
    db: DBSession,
) -> MemberRoleResponse:
    """Change the role of another member of the shop."""
    try:
        role = MemberRole(data.role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid role. Must be one of: ADMIN, MODERATOR, MEMBER",
        ) from None

    target = await get_member_in_shop(db, member_id, admin.shop_id, request.url.path)

    if target.id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot change your own role",
        )

    await MemberService(db).update_role(target, role)
    await db.commit()

    return MemberRoleResponse(
        message=f"Role updated to {role.value}",
        member=MemberResponse.model_validate(target),
    )


@router.get(
    "/{member_id}/points",
    response_model=MemberPointsResponse,
    summary="Get a member's points",
    description="Points, unlocked badges and the next badge for a member of the shop.",
)
async def get_member_points(
    member_id: UUID,
    request: Request,
    shop: CurrentShop,
    db: DBSession,
) -> MemberPointsResponse:
    member = await get_member_in_shop(db, member_id, shop.id, request.url.path)
    return await BadgeService(db).points_summary(member)
