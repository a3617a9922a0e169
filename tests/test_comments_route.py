"""Tests for comment API routes."""

from typing import Any

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from community.models import Comment, Member, Reaction, ReactionType


class TestListComments:
    async def test_replies_are_nested(
        self,
        client: AsyncClient,
        admin: Member,
        member: Member,
        post_factory: Any,
        comment_factory: Any,
    ) -> None:
        post = await post_factory(author=admin)
        first = await comment_factory(post=post, author=member, content="First")
        await comment_factory(post=post, author=admin, content="Second")
        await comment_factory(post=post, author=admin, content="Reply", parent_id=first.id)

        response = await client.get(f"/api/v1/posts/{post.id}/comments")
        assert response.status_code == 200

        data = response.json()
        assert [c["content"] for c in data] == ["First", "Second"]
        assert [r["content"] for r in data[0]["replies"]] == ["Reply"]
        assert data[0]["author"]["email"] == member.email
        assert data[1]["replies"] == []

    async def test_reaction_counts_and_mine(
        self,
        client: AsyncClient,
        admin: Member,
        member: Member,
        post_factory: Any,
        comment_factory: Any,
        reaction_factory: Any,
    ) -> None:
        post = await post_factory(author=admin)
        comment = await comment_factory(post=post, author=member)
        await reaction_factory(member=admin, comment=comment, type=ReactionType.WOW)
        await reaction_factory(member=member, comment=comment, type=ReactionType.WOW)

        response = await client.get(f"/api/v1/posts/{post.id}/comments")
        data = response.json()[0]

        assert data["reactions_count"] == 2
        assert data["reactions"] == [{"type": "WOW", "count": 2}]
        assert data["my_reaction"] == "WOW"


class TestCreateComment:
    async def test_create_comment_awards_points(
        self,
        client: AsyncClient,
        admin: Member,
        member: Member,
        post_factory: Any,
        act_as: Any,
        db_session: AsyncSession,
    ) -> None:
        post = await post_factory(author=admin)
        act_as(member)

        response = await client.post(
            f"/api/v1/posts/{post.id}/comments", json={"content": "Nice post"}
        )
        assert response.status_code == 201

        data = response.json()
        assert data["content"] == "Nice post"
        assert data["parent_id"] is None
        assert data["author"]["id"] == str(member.id)

        await db_session.refresh(member)
        assert member.points == 5

    async def test_reply(
        self,
        client: AsyncClient,
        admin: Member,
        post_factory: Any,
        comment_factory: Any,
    ) -> None:
        post = await post_factory(author=admin)
        parent = await comment_factory(post=post, author=admin)

        response = await client.post(
            f"/api/v1/posts/{post.id}/comments",
            json={"content": "Replying", "parent_id": str(parent.id)},
        )
        assert response.status_code == 201
        assert response.json()["parent_id"] == str(parent.id)

    async def test_parent_on_another_post_is_rejected(
        self,
        client: AsyncClient,
        admin: Member,
        post_factory: Any,
        comment_factory: Any,
    ) -> None:
        post = await post_factory(author=admin, title="One")
        other_post = await post_factory(author=admin, title="Two")
        parent = await comment_factory(post=other_post, author=admin)

        response = await client.post(
            f"/api/v1/posts/{post.id}/comments",
            json={"content": "Wrong thread", "parent_id": str(parent.id)},
        )
        assert response.status_code == 400

    async def test_empty_content_rejected(
        self, client: AsyncClient, admin: Member, post_factory: Any
    ) -> None:
        post = await post_factory(author=admin)
        response = await client.post(f"/api/v1/posts/{post.id}/comments", json={"content": ""})
        assert response.status_code == 422


class TestDeleteComment:
    async def test_delete_removes_replies_and_reactions(
        self,
        client: AsyncClient,
        admin: Member,
        member: Member,
        post_factory: Any,
        comment_factory: Any,
        reaction_factory: Any,
        db_session: AsyncSession,
    ) -> None:
        post = await post_factory(author=admin)
        parent = await comment_factory(post=post, author=admin)
        reply = await comment_factory(post=post, author=member, parent_id=parent.id)
        await reaction_factory(member=member, comment=reply)

        response = await client.delete(f"/api/v1/comments/{parent.id}")
        assert response.status_code == 200

        assert await db_session.scalar(select(func.count()).select_from(Comment)) == 0
        assert await db_session.scalar(select(func.count()).select_from(Reaction)) == 0

    async def test_moderator_can_delete_any(
        self,
        client: AsyncClient,
        admin: Member,
        moderator: Member,
        post_factory: Any,
        comment_factory: Any,
        act_as: Any,
    ) -> None:
        post = await post_factory(author=admin)
        comment = await comment_factory(post=post, author=admin)
        act_as(moderator)

        response = await client.delete(f"/api/v1/comments/{comment.id}")
        assert response.status_code == 200

    async def test_member_cannot_delete_others(
        self,
        client: AsyncClient,
        admin: Member,
        member: Member,
        post_factory: Any,
        comment_factory: Any,
        act_as: Any,
    ) -> None:
        post = await post_factory(author=admin)
        comment = await comment_factory(post=post, author=admin)
        act_as(member)

        response = await client.delete(f"/api/v1/comments/{comment.id}")
        assert response.status_code == 403

    async def test_unknown_comment(self, client: AsyncClient, admin: Member) -> None:  # noqa: ARG002
        response = await client.delete("/api/v1/comments/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
