"""Tests for authentication dependencies and their enforcement.

Covers:
- HTTP-level auth enforcement (missing token → 401, anonymous reads allowed)
- Unit tests for get_current_user, get_optional_user, verify_token
- Unit tests for get_user_email
"""

import time
from typing import Any
from unittest.mock import MagicMock, patch

import jwt as pyjwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import HTTPException
from httpx import AsyncClient

from community.core.auth import get_current_user, get_optional_user, get_user_email, verify_token
from community.models import Member, Post, Shop

# ---------------------------------------------------------------------------
# HTTP-level auth tests
# ---------------------------------------------------------------------------


class TestAuthEnforcementHTTP:
    """Write endpoints reject unauthenticated requests; public reads do not."""

    async def test_create_post_requires_auth(
        self,
        unauthed_client: AsyncClient,
        shop: Shop,  # noqa: ARG002  # Ensures shop exists in DB
    ) -> None:
        """POST /posts without auth → 401."""
        response = await unauthed_client.post(
            "/api/v1/posts",
            json={"title": "Hello", "content": "World"},
        )
        assert response.status_code == 401

    async def test_join_requires_auth(
        self,
        unauthed_client: AsyncClient,
        shop: Shop,  # noqa: ARG002
    ) -> None:
        response = await unauthed_client.post("/api/v1/members/join")
        assert response.status_code == 401

    async def test_profile_requires_auth(
        self,
        unauthed_client: AsyncClient,
        shop: Shop,  # noqa: ARG002
    ) -> None:
        response = await unauthed_client.get("/api/v1/profile")
        assert response.status_code == 401

    async def test_anonymous_can_list_posts(
        self, unauthed_client: AsyncClient, post_factory: Any, member: Member
    ) -> None:
        """The feed is public; anonymous visitors see no personal reaction."""
        await post_factory(author=member, title="Public post")

        response = await unauthed_client.get("/api/v1/posts")
        assert response.status_code == 200
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["my_reaction"] is None

    async def test_anonymous_can_read_comments(
        self, unauthed_client: AsyncClient, post_factory: Any, member: Member
    ) -> None:
        post: Post = await post_factory(author=member)
        response = await unauthed_client.get(f"/api/v1/posts/{post.id}/comments")
        assert response.status_code == 200
        assert response.json() == []


# ---------------------------------------------------------------------------
# Unit tests for auth dependency functions
# ---------------------------------------------------------------------------


class TestGetCurrentUser:
    """Unit tests for get_current_user dependency."""

    async def test_no_credentials_raises_401(self) -> None:
        """get_current_user(None) raises 401."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(None)
        assert exc_info.value.status_code == 401
        assert "Not authenticated" in exc_info.value.detail


class TestGetOptionalUser:
    """Unit tests for get_optional_user dependency."""

    async def test_no_credentials_returns_none(self) -> None:
        """get_optional_user(None) returns None without raising."""
        result = await get_optional_user(None)
        assert result is None


class TestGetUserEmail:
    def test_lowercases_email(self) -> None:
        assert get_user_email({"email": "Jane@Example.COM"}) == "jane@example.com"

    def test_missing_email_raises_401(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            get_user_email({"sub": "user-without-email"})
        assert exc_info.value.status_code == 401


def _signed_token(private_key: Any, **overrides: Any) -> str:
    now = int(time.time())
    payload = {
        "sub": "user-123",
        "email": "user@example.com",
        "iat": now,
        "exp": now + 3600,
        "iss": "http://localhost:3000",
        "aud": "http://localhost:3000",
        **overrides,
    }
    return pyjwt.encode(payload, private_key, algorithm="RS256")


def _mock_jwks(private_key: Any) -> MagicMock:
    mock_signing_key = MagicMock()
    mock_signing_key.key = private_key.public_key()

    mock_jwks_client = MagicMock()
    mock_jwks_client.get_signing_key_from_jwt.return_value = mock_signing_key
    return mock_jwks_client


class TestVerifyToken:
    """Unit tests for verify_token (mocking JWKS)."""

    async def test_invalid_token_raises_401(self) -> None:
        """A garbage token is rejected before or at the JWKS lookup."""
        with pytest.raises(HTTPException) as exc_info:
            await verify_token("not-a-jwt-token")
        assert exc_info.value.status_code in (401, 503)

    async def test_expired_token_raises_401(self) -> None:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        now = int(time.time())
        token = _signed_token(private_key, iat=now - 7200, exp=now - 3600)

        with patch("community.core.auth.get_jwks_client", return_value=_mock_jwks(private_key)):
            with pytest.raises(HTTPException) as exc_info:
                await verify_token(token)
        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    async def test_valid_token_returns_payload(self) -> None:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = _signed_token(private_key)

        with patch("community.core.auth.get_jwks_client", return_value=_mock_jwks(private_key)):
            payload = await verify_token(token)

        assert payload["sub"] == "user-123"
        assert payload["email"] == "user@example.com"

    async def test_wrong_audience_raises_401(self) -> None:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = _signed_token(private_key, aud="https://elsewhere.example.com")

        with patch("community.core.auth.get_jwks_client", return_value=_mock_jwks(private_key)):
            with pytest.raises(HTTPException) as exc_info:
                await verify_token(token)
        assert exc_info.value.status_code == 401
