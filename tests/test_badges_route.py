"""Tests for badges, points and default badge provisioning."""

from typing import Any

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from community.models import Member, Shop
from community.services.badge_service import DEFAULT_BADGES, BadgeService

BADGE_PAYLOAD = {
    "name": "Helper",
    "image_url": "/badges/helper.svg",
    "required_points": 100,
    "description": "Answers questions",
    "order": 5,
}

# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class TestBadgeService:
    async def test_default_badges_created_once(
        self, db_session: AsyncSession, shop: Shop
    ) -> None:
        service = BadgeService(db_session)

        created = await service.ensure_default_badges(shop.id)
        again = await service.ensure_default_badges(shop.id)

        assert [b.name for b in created] == [b["name"] for b in DEFAULT_BADGES]
        assert all(b.is_default for b in created)
        assert again == []

    async def test_points_never_go_negative(
        self, db_session: AsyncSession, member_factory: Any, shop: Shop
    ) -> None:
        someone = await member_factory(shop_id=shop.id, email="p@example.com", points=3)
        service = BadgeService(db_session)

        assert await service.award_points(someone.id, -10) == 0
        assert await service.award_points(someone.id, 7) == 7

    async def test_next_badge(self, db_session: AsyncSession, shop: Shop) -> None:
        service = BadgeService(db_session)
        await service.ensure_default_badges(shop.id)

        assert (await service.next_badge(shop.id, 0)).name == "Novice"  # type: ignore[union-attr]
        assert (await service.next_badge(shop.id, 200)).name == "Expert"  # type: ignore[union-attr]
        assert await service.next_badge(shop.id, 500) is None


# ---------------------------------------------------------------------------
# GET /api/v1/badges
# ---------------------------------------------------------------------------


class TestListBadges:
    async def test_ordered_list(
        self, client: AsyncClient, shop: Shop, badge_factory: Any
    ) -> None:
        await badge_factory(shop_id=shop.id, name="Second", order=2)
        await badge_factory(shop_id=shop.id, name="First", order=1)

        response = await client.get("/api/v1/badges")
        assert response.status_code == 200
        assert [b["name"] for b in response.json()] == ["First", "Second"]

    async def test_member_unlocked_badges(
        self,
        client: AsyncClient,
        shop: Shop,
        member_factory: Any,
        badge_factory: Any,
    ) -> None:
        await badge_factory(shop_id=shop.id, name="Starter", required_points=10, order=1)
        await badge_factory(shop_id=shop.id, name="Veteran", required_points=100, order=2)
        someone = await member_factory(shop_id=shop.id, email="s@example.com", points=50)

        response = await client.get("/api/v1/badges", params={"member_id": str(someone.id)})
        assert [b["name"] for b in response.json()] == ["Starter"]

    async def test_falls_back_to_all_badges(
        self,
        client: AsyncClient,
        shop: Shop,
        member: Member,
        badge_factory: Any,
    ) -> None:
        """A member with no unlocked badge sees every badge of the shop."""
        await badge_factory(shop_id=shop.id, name="Starter", required_points=10)

        response = await client.get("/api/v1/badges", params={"member_id": str(member.id)})
        assert [b["name"] for b in response.json()] == ["Starter"]


# ---------------------------------------------------------------------------
# Admin management
# ---------------------------------------------------------------------------


class TestManageBadges:
    async def test_create(self, client: AsyncClient, admin: Member) -> None:  # noqa: ARG002
        response = await client.post("/api/v1/badges", json=BADGE_PAYLOAD)
        assert response.status_code == 201
        assert response.json()["name"] == "Helper"
        assert response.json()["is_default"] is False

    async def test_duplicate_name(
        self, client: AsyncClient, admin: Member, badge_factory: Any
    ) -> None:
        await badge_factory(shop_id=admin.shop_id, name="Helper")
        response = await client.post("/api/v1/badges", json=BADGE_PAYLOAD)
        assert response.status_code == 409

    async def test_negative_points_rejected(
        self, client: AsyncClient, admin: Member  # noqa: ARG002
    ) -> None:
        response = await client.post(
            "/api/v1/badges", json={**BADGE_PAYLOAD, "required_points": -1}
        )
        assert response.status_code == 422

    async def test_replace(
        self, client: AsyncClient, admin: Member, badge_factory: Any
    ) -> None:
        badge = await badge_factory(shop_id=admin.shop_id, name="Old")

        response = await client.put(f"/api/v1/badges/{badge.id}", json=BADGE_PAYLOAD)
        assert response.status_code == 200
        assert response.json()["name"] == "Helper"
        assert response.json()["required_points"] == 100

    async def test_replace_with_taken_name(
        self, client: AsyncClient, admin: Member, badge_factory: Any
    ) -> None:
        await badge_factory(shop_id=admin.shop_id, name="Helper")
        badge = await badge_factory(shop_id=admin.shop_id, name="Other")

        response = await client.put(f"/api/v1/badges/{badge.id}", json=BADGE_PAYLOAD)
        assert response.status_code == 409

    async def test_delete_custom_badge(
        self, client: AsyncClient, admin: Member, badge_factory: Any
    ) -> None:
        badge = await badge_factory(shop_id=admin.shop_id, name="Custom")
        response = await client.delete(f"/api/v1/badges/{badge.id}")
        assert response.status_code == 200

    async def test_default_badge_cannot_be_deleted(
        self, client: AsyncClient, admin: Member, badge_factory: Any
    ) -> None:
        badge = await badge_factory(shop_id=admin.shop_id, name="Newcomer", is_default=True)
        response = await client.delete(f"/api/v1/badges/{badge.id}")
        assert response.status_code == 400

    async def test_member_cannot_create(
        self, client: AsyncClient, member: Member, act_as: Any
    ) -> None:
        act_as(member)
        response = await client.post("/api/v1/badges", json=BADGE_PAYLOAD)
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# GET /api/v1/members/{id}/points
# ---------------------------------------------------------------------------


class TestMemberPoints:
    async def test_points_summary(
        self,
        client: AsyncClient,
        shop: Shop,
        member_factory: Any,
        db_session: AsyncSession,
    ) -> None:
        await BadgeService(db_session).ensure_default_badges(shop.id)
        await db_session.commit()
        someone = await member_factory(shop_id=shop.id, email="p@example.com", points=60)

        response = await client.get(f"/api/v1/members/{someone.id}/points")
        assert response.status_code == 200

        data = response.json()
        assert data["points"] == 60
        assert [b["name"] for b in data["badges"]] == ["Newcomer", "Novice"]
        assert data["next_badge"]["name"] == "Intermediate"
        assert data["points_to_next_badge"] == 140

    async def test_unknown_member(self, client: AsyncClient, shop: Shop) -> None:  # noqa: ARG002
        response = await client.get(
            "/api/v1/members/00000000-0000-0000-0000-000000000000/points"
        )
        assert response.status_code == 404
