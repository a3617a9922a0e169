"""Follow relationships between members of a shop."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from community.models.follow import Follow
from community.models.member import Member


class FollowService:
    """Service for following members."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_follow(self, follower_id: UUID, following_id: UUID) -> Follow | None:
        query = select(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def follow(self, follower: Member, target: Member) -> bool:
        """Follow a member of the same shop. Returns False when already following."""
        if await self._get_follow(follower.id, target.id):
            return False

        self.db.add(
            Follow(
                shop_id=follower.shop_id,
                follower_id=follower.id,
                following_id=target.id,
            )
        )
        await self.db.flush()
        return True

    async def unfollow(self, follower: Member, target: Member) -> bool:
        """Stop following. Returns False when there was nothing to remove."""
        follow = await self._get_follow(follower.id, target.id)
        if follow is None:
            return False

        await self.db.delete(follow)
        await self.db.flush()
        return True

    async def followers_count(self, member_id: UUID, shop_id: UUID) -> int:
        query = (
            select(func.count())
            .select_from(Follow)
            .where(
                Follow.following_id == member_id,
                Follow.shop_id == shop_id,
            )
        )
        return await self.db.scalar(query) or 0

    async def is_following(self, follower_id: UUID, following_id: UUID) -> bool:
        return await self._get_follow(follower_id, following_id) is not None
