"""Profile endpoints for the current member."""

from fastapi import APIRouter

from community.core.deps import CurrentMember, DBSession
from community.models.member import Member
from community.schemas.badge import BadgeResponse
from community.schemas.member import MemberResponse
from community.schemas.profile import ProfileResponse, ProfileUpdate
from community.services.badge_service import BadgeService
from community.services.follow_service import FollowService
from community.services.member_service import MemberService
from community.services.post_service import PostService

router = APIRouter()


async def _build_profile(db: DBSession, member: Member) -> ProfileResponse:
    posts = PostService(db)
    badges = await BadgeService(db).unlocked_badges(member.shop_id, member.points)

    return ProfileResponse(
        member=MemberResponse.model_validate(member),
        recent_posts=await posts.recent_posts(member.id, member.shop_id, limit=5),
        recent_comments=await posts.recent_comments(member.id, member.shop_id, limit=5),
        points=member.points,
        badges=[BadgeResponse.model_validate(b) for b in badges],
        followers_count=await FollowService(db).followers_count(member.id, member.shop_id),
    )


@router.get(
    "",
    response_model=ProfileResponse,
    summary="Get my profile",
    description="The current member with recent posts, recent comments, points and badges.",
)
async def get_profile(member: CurrentMember, db: DBSession) -> ProfileResponse:
    return await _build_profile(db, member)


@router.patch(
    "",
    response_model=ProfileResponse,
    summary="Update my profile",
)
async def update_profile(
    data: ProfileUpdate,
    member: CurrentMember,
    db: DBSession,
) -> ProfileResponse:
    await MemberService(db).update_profile(member, name=data.name, avatar_url=data.avatar_url)
    await db.commit()
    return await _build_profile(db, member)
