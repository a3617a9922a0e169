"""Shop membership and role management."""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from community.models.member import Member, MemberRole
from community.models.shop import Shop
from community.services.badge_service import BadgeService

logger = logging.getLogger(__name__)


class MemberService:
    """Service for members of a shop's community."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_member(self, member_id: UUID, shop_id: UUID) -> Member | None:
        """Get a member by ID, scoped to shop."""
        query = select(Member).where(
            Member.id == member_id,
            Member.shop_id == shop_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, shop_id: UUID, email: str) -> Member | None:
        query = select(Member).where(
            Member.shop_id == shop_id,
            Member.email == email.lower(),
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def join(
        self,
        shop: Shop,
        email: str,
        name: str | None = None,
        avatar_url: str | None = None,
    ) -> tuple[Member, bool]:
        """Add a person to the shop's community.

        The first member of a shop becomes its admin and owner; everyone after
        joins as a regular member. Joining twice returns the existing row.

        Returns:
            Tuple of (member, created)
        """
        existing = await self.get_by_email(shop.id, email)
        if existing:
            return existing, False

        count_query = select(func.count()).select_from(Member).where(Member.shop_id == shop.id)
        is_first = (await self.db.scalar(count_query) or 0) == 0

        member = Member(
            shop_id=shop.id,
            email=email.lower(),
            name=name,
            avatar_url=avatar_url,
            role=MemberRole.ADMIN if is_first else MemberRole.MEMBER,
            is_shop_owner=is_first,
        )
        self.db.add(member)
        await self.db.flush()

        if is_first:
            shop.owner_id = member.email
            await BadgeService(self.db).ensure_default_badges(shop.id)
            logger.info("First member %s is now admin of shop %s", member.email, shop.shop_domain)

        return member, True

    async def list_members(
        self,
        shop_id: UUID,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Member], int]:
        """List a shop's members, optionally searching name and email.

        Returns:
            Tuple of (members, total_count)
        """
        base_query = select(Member).where(Member.shop_id == shop_id)

        if search:
            pattern = f"%{search.lower()}%"
            base_query = base_query.where(
                or_(
                    func.lower(Member.name).like(pattern),
                    func.lower(Member.email).like(pattern),
                )
            )

        count_query = select(func.count()).select_from(base_query.subquery())
        total = await self.db.scalar(count_query) or 0

        query = base_query.order_by(Member.created_at.desc()).limit(limit).offset(offset)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def update_role(self, member: Member, role: MemberRole) -> Member:
        previous = member.role
        member.role = role
        await self.db.flush()
        logger.info(
            "Member %s role changed from %s to %s", member.id, previous.value, role.value
        )
        return member

    async def update_profile(
        self,
        member: Member,
        name: str | None = None,
        avatar_url: str | None = None,
    ) -> Member:
        if name is not None:
            member.name = name
        if avatar_url is not None:
            member.avatar_url = avatar_url
        await self.db.flush()
        return member
