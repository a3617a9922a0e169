"""Badges and points-based gamification."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community.models.badge import Badge
from community.models.member import Member
from community.schemas.badge import BadgeCreate, BadgeResponse, BadgeUpdate, MemberPointsResponse

logger = logging.getLogger(__name__)

# Badges every shop starts with
DEFAULT_BADGES: list[dict[str, Any]] = [
    {
        "name": "Newcomer",
        "image_url": "/badges/newcomer.svg",
        "required_points": 0,
        "description": "Welcome to the community!",
        "order": 1,
    },
    {
        "name": "Novice",
        "image_url": "/badges/novice.svg",
        "required_points": 50,
        "description": "You are starting to take part.",
        "order": 2,
    },
    {
        "name": "Intermediate",
        "image_url": "/badges/intermediate.svg",
        "required_points": 200,
        "description": "An active member of the community.",
        "order": 3,
    },
    {
        "name": "Expert",
        "image_url": "/badges/expert.svg",
        "required_points": 500,
        "description": "A recognised expert of the community.",
        "order": 4,
    },
]


class BadgeService:
    """Service for shop badges and member points."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # === Points ===

    async def award_points(self, member_id: UUID, amount: int) -> int:
        """Add points to a member, never going below zero.

        Returns:
            The member's new total, or 0 when the member no longer exists
        """
        member = await self.db.get(Member, member_id)
        if member is None:
            return 0

        member.points = max(0, member.points + amount)
        await self.db.flush()
        logger.debug("Member %s awarded %d points (total %d)", member_id, amount, member.points)
        return member.points

    async def points_summary(self, member: Member) -> MemberPointsResponse:
        unlocked = await self.unlocked_badges(member.shop_id, member.points)
        next_badge = await self.next_badge(member.shop_id, member.points)

        return MemberPointsResponse(
            member_id=member.id,
            points=member.points,
            badges=[BadgeResponse.model_validate(b) for b in unlocked],
            next_badge=BadgeResponse.model_validate(next_badge) if next_badge else None,
            points_to_next_badge=(
                next_badge.required_points - member.points if next_badge else None
            ),
        )

    # === Badges ===

    async def list_badges(self, shop_id: UUID) -> list[Badge]:
        query = (
            select(Badge)
            .where(Badge.shop_id == shop_id)
            .order_by(Badge.order, Badge.required_points)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def unlocked_badges(self, shop_id: UUID, points: int) -> list[Badge]:
        """Badges whose required points the given total reaches."""
        query = (
            select(Badge)
            .where(
                Badge.shop_id == shop_id,
                Badge.required_points <= points,
            )
            .order_by(Badge.order, Badge.required_points)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def next_badge(self, shop_id: UUID, points: int) -> Badge | None:
        query = (
            select(Badge)
            .where(
                Badge.shop_id == shop_id,
                Badge.required_points > points,
            )
            .order_by(Badge.required_points)
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def ensure_default_badges(self, shop_id: UUID) -> list[Badge]:
        """Create any missing default badges for a shop. Returns the ones created."""
        created = []
        for values in DEFAULT_BADGES:
            badge = await self.create_badge(shop_id, BadgeCreate(**values), is_default=True)
            if badge is not None:
                created.append(badge)

        if created:
            logger.info("Created %d default badges for shop %s", len(created), shop_id)
        return created

    async def get_badge(self, badge_id: UUID, shop_id: UUID) -> Badge | None:
        """Get badge by ID, scoped to shop."""
        query = select(Badge).where(
            Badge.id == badge_id,
            Badge.shop_id == shop_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_name(self, shop_id: UUID, name: str) -> Badge | None:
        query = select(Badge).where(
            Badge.shop_id == shop_id,
            Badge.name == name,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create_badge(
        self,
        shop_id: UUID,
        data: BadgeCreate,
        is_default: bool = False,
    ) -> Badge | None:
        """Create a badge. Returns None when the shop already has one with that name."""
        if await self.get_by_name(shop_id, data.name):
            return None

        badge = Badge(
            shop_id=shop_id,
            is_default=is_default,
            **data.model_dump(),
        )
        self.db.add(badge)
        await self.db.flush()
        return badge

    async def update_badge(self, badge: Badge, data: BadgeUpdate) -> Badge | None:
        """Replace a badge's fields. Returns None when the new name is taken."""
        if data.name != badge.name:
            clash = await self.get_by_name(badge.shop_id, data.name)
            if clash:
                return None

        for field, value in data.model_dump().items():
            setattr(badge, field, value)

        await self.db.flush()
        return badge

    async def delete_badge(self, badge: Badge) -> bool:
        """Delete a badge. Default badges are kept and False is returned."""
        if badge.is_default:
            return False

        await self.db.delete(badge)
        await self.db.flush()
        return True
