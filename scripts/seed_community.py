"""Seed script for local community development.

Creates the development shop used when requests carry no shop context:
- 1 shop (collective-club-dev.myshopify.com)
- 6 post categories
- 6 members: owner and admin, a moderator, three members
- the 4 default badges (0 / 50 / 200 / 500 points)

Set DEFAULT_SHOP_DOMAIN=collective-club-dev.myshopify.com to use it without
sending X-Shop-Domain.

Usage:
    uv run python -m scripts.seed_community
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community.core.database import async_session_maker, engine
from community.models import Base, Category, Member, MemberRole, Shop
from community.services.badge_service import BadgeService

DEV_SHOP_DOMAIN = "collective-club-dev.myshopify.com"

CATEGORIES = [
    ("Home", "bg-orange-500", "Home and decoration"),
    ("Tech", "bg-green-500", "Technology and gadgets"),
    ("Crafts", "bg-pink-500", "Handmade creations and DIY"),
    ("Travel", "bg-primary", "Trips and destinations"),
    ("Beauty", "bg-purple-500", "Beauty and cosmetics"),
    ("Resale", "bg-yellow-500", "Selling and reselling items"),
]

# (email, name, role, is_shop_owner)
MEMBERS = [
    ("owner@collective-club.com", "Shop Owner", MemberRole.ADMIN, True),
    ("admin@collective-club.com", "Admin User", MemberRole.ADMIN, False),
    ("moderator@collective-club.com", "Moderator User", MemberRole.MODERATOR, False),
    ("member1@collective-club.com", "Marie Martin", MemberRole.MEMBER, False),
    ("member2@collective-club.com", "Pierre Dupont", MemberRole.MEMBER, False),
    ("member3@collective-club.com", "Sophie Bernard", MemberRole.MEMBER, False),
]


async def seed(session: AsyncSession) -> Shop:
    # ── Shop ────────────────────────────────────────────────────────────
    result = await session.execute(select(Shop).where(Shop.shop_domain == DEV_SHOP_DOMAIN))
    shop = result.scalar_one_or_none()
    if shop is None:
        shop = Shop(
            shop_domain=DEV_SHOP_DOMAIN,
            shop_name="Collective Club - Development",
            settings={"environment": "development"},
        )
        session.add(shop)
        await session.flush()

    # ── Categories ──────────────────────────────────────────────────────
    for order, (name, color, description) in enumerate(CATEGORIES, start=1):
        exists = await session.scalar(
            select(Category.id).where(Category.shop_id == shop.id, Category.name == name)
        )
        if exists is None:
            session.add(
                Category(
                    shop_id=shop.id,
                    name=name,
                    color=color,
                    description=description,
                    order=order,
                )
            )

    # ── Members ─────────────────────────────────────────────────────────
    for email, name, role, is_owner in MEMBERS:
        exists = await session.scalar(
            select(Member.id).where(Member.shop_id == shop.id, Member.email == email)
        )
        if exists is None:
            session.add(
                Member(
                    shop_id=shop.id,
                    email=email,
                    name=name,
                    role=role,
                    is_shop_owner=is_owner,
                )
            )
        if is_owner:
            shop.owner_id = email

    # ── Default badges ──────────────────────────────────────────────────
    await BadgeService(session).ensure_default_badges(shop.id)

    await session.commit()
    return shop


async def main() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        shop = await seed(session)

    await engine.dispose()

    print("=" * 60)
    print("  Community seed data created successfully!")
    print("=" * 60)
    print()
    print(f"  Shop:        {shop.shop_domain}")
    print(f"  Shop ID:     {shop.id}")
    print(f"  Categories:  {', '.join(name for name, _, _ in CATEGORIES)}")
    print()
    print("  Members:")
    for email, _, role, _ in MEMBERS:
        print(f"    {role.value:<10} {email}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
