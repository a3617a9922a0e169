"""Pytest configuration and fixtures for the community API test suite.

Provides:
- A fresh SQLite database (aiosqlite) per test
- Mock authentication (JWT bypass) with a switchable identity
- Mock Redis (fakeredis)
- Disabled rate limiting and a clean monitoring buffer per test
- Model factory fixtures for Shop, Member, Category, Post, Comment,
  Reaction, Poll, Badge and Follow
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any
from uuid import UUID

import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from community.core.auth import get_current_user, get_optional_user
from community.core.database import get_async_session
from community.core.deps import get_redis
from community.core.monitoring import get_monitoring
from community.core.rate_limit import limiter
from community.core.tenancy import SHOP_HEADER
from community.main import app
from community.models import (
    Badge,
    Base,
    Category,
    Comment,
    Follow,
    Member,
    MemberRole,
    Poll,
    PollOption,
    Post,
    PostStatus,
    Reaction,
    ReactionType,
    Shop,
)
from community.services.post_service import slugify

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SHOP_DOMAIN = "test-shop.myshopify.com"
OTHER_SHOP_DOMAIN = "other-shop.myshopify.com"
ADMIN_EMAIL = "admin@example.com"
MEMBER_EMAIL = "member@example.com"
MODERATOR_EMAIL = "moderator@example.com"
OTHER_SHOP_EMAIL = "outsider@example.com"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


@pytest.fixture(autouse=True)
def _reset_monitoring() -> None:
    """Start every test with empty metric and alert buffers."""
    get_monitoring().clear()


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def engine(tmp_path: Any) -> AsyncGenerator[AsyncEngine, None]:
    """A throwaway SQLite database with all tables created.

    Uses NullPool so every session opens its own aiosqlite connection, which
    keeps starlette's BaseHTTPMiddleware sub-tasks off a shared connection.
    """
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'community.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for test setup (factory fixtures) and direct assertions."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Fake Redis
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Provide a fresh fakeredis instance per test."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


# ---------------------------------------------------------------------------
# Auth mock
# ---------------------------------------------------------------------------


@pytest.fixture
def auth_user() -> dict[str, Any]:
    """The decoded JWT payload the mocked auth returns. Mutate it to switch identity."""
    return {
        "sub": "test-user-id",
        "email": ADMIN_EMAIL,
        "name": "Test Admin",
    }


@pytest.fixture
def act_as(auth_user: dict[str, Any]) -> Callable[[Member | str], None]:
    """Switch the authenticated identity to a member (or a bare email)."""

    def _act_as(who: Member | str) -> None:
        auth_user["email"] = who if isinstance(who, str) else who.email

    return _act_as


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


def _override_common(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> None:
    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as s:
            yield s

    async def _override_redis() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
        yield fake_redis

    app.dependency_overrides[get_async_session] = _override_session
    app.dependency_overrides[get_redis] = _override_redis


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: fakeredis.aioredis.FakeRedis,
    auth_user: dict[str, Any],
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client bound to the test shop via the shop header."""

    async def _override_user() -> dict[str, Any]:
        return auth_user

    async def _override_optional_user() -> dict[str, Any] | None:
        return auth_user

    _override_common(session_factory, fake_redis)
    app.dependency_overrides[get_current_user] = _override_user
    app.dependency_overrides[get_optional_user] = _override_optional_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={SHOP_HEADER: SHOP_DOMAIN},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def unauthed_client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> AsyncGenerator[AsyncClient, None]:
    """Client for the test shop with real auth (no bearer token is sent)."""
    _override_common(session_factory, fake_redis)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={SHOP_HEADER: SHOP_DOMAIN},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Model Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def shop_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Shop instances in the test database."""

    async def _create(
        *,
        shop_domain: str = SHOP_DOMAIN,
        shop_name: str = "Test Shop",
        is_active: bool = True,
        settings_data: dict[str, Any] | None = None,
    ) -> Shop:
        shop = Shop(
            shop_domain=shop_domain,
            shop_name=shop_name,
            is_active=is_active,
            settings=settings_data or {},
        )
        db_session.add(shop)
        await db_session.commit()
        await db_session.refresh(shop)
        return shop

    return _create


@pytest.fixture
def member_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Member instances."""

    async def _create(
        *,
        shop_id: UUID,
        email: str = MEMBER_EMAIL,
        name: str | None = "Test Member",
        role: MemberRole = MemberRole.MEMBER,
        is_shop_owner: bool = False,
        points: int = 0,
    ) -> Member:
        member = Member(
            shop_id=shop_id,
            email=email,
            name=name,
            role=role,
            is_shop_owner=is_shop_owner,
            points=points,
        )
        db_session.add(member)
        await db_session.commit()
        await db_session.refresh(member)
        return member

    return _create


@pytest.fixture
def category_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Category instances."""

    async def _create(
        *,
        shop_id: UUID,
        name: str = "General",
        color: str = "bg-blue-500",
        description: str | None = None,
        order: int = 0,
        is_active: bool = True,
    ) -> Category:
        category = Category(
            shop_id=shop_id,
            name=name,
            color=color,
            description=description,
            order=order,
            is_active=is_active,
        )
        db_session.add(category)
        await db_session.commit()
        await db_session.refresh(category)
        return category

    return _create


@pytest.fixture
def post_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Post instances."""

    async def _create(
        *,
        author: Member,
        title: str = "Test Post",
        content: str = "Test post content",
        category_id: UUID | None = None,
        status: PostStatus = PostStatus.PUBLISHED,
        is_pinned: bool = False,
    ) -> Post:
        post = Post(
            shop_id=author.shop_id,
            author_id=author.id,
            category_id=category_id,
            title=title,
            content=content,
            slug=slugify(title),
            status=status,
            is_pinned=is_pinned,
        )
        db_session.add(post)
        await db_session.commit()
        await db_session.refresh(post)
        return post

    return _create


@pytest.fixture
def comment_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Comment instances."""

    async def _create(
        *,
        post: Post,
        author: Member,
        content: str = "Test comment",
        parent_id: UUID | None = None,
    ) -> Comment:
        comment = Comment(
            shop_id=post.shop_id,
            post_id=post.id,
            author_id=author.id,
            parent_id=parent_id,
            content=content,
        )
        db_session.add(comment)
        await db_session.commit()
        await db_session.refresh(comment)
        return comment

    return _create


@pytest.fixture
def reaction_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Reaction instances on a post or a comment."""

    async def _create(
        *,
        member: Member,
        post: Post | None = None,
        comment: Comment | None = None,
        type: ReactionType = ReactionType.LIKE,
    ) -> Reaction:
        reaction = Reaction(
            shop_id=member.shop_id,
            member_id=member.id,
            post_id=post.id if post else None,
            comment_id=comment.id if comment else None,
            type=type,
        )
        db_session.add(reaction)
        await db_session.commit()
        await db_session.refresh(reaction)
        return reaction

    return _create


@pytest.fixture
def poll_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates a Poll with options on a post."""

    async def _create(
        *,
        post: Post,
        question: str = "Which one?",
        options: list[str] | None = None,
    ) -> Poll:
        poll = Poll(shop_id=post.shop_id, post_id=post.id, question=question)
        db_session.add(poll)
        await db_session.flush()

        for index, text in enumerate(options or ["Yes", "No"]):
            db_session.add(
                PollOption(shop_id=post.shop_id, poll_id=poll.id, text=text, order=index)
            )

        await db_session.commit()
        await db_session.refresh(poll, attribute_names=["options"])
        return poll

    return _create


@pytest.fixture
def badge_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Badge instances."""

    async def _create(
        *,
        shop_id: UUID,
        name: str = "Test Badge",
        required_points: int = 0,
        order: int = 0,
        is_default: bool = False,
    ) -> Badge:
        badge = Badge(
            shop_id=shop_id,
            name=name,
            image_url=f"/badges/{name.lower().replace(' ', '-')}.svg",
            required_points=required_points,
            order=order,
            is_default=is_default,
        )
        db_session.add(badge)
        await db_session.commit()
        await db_session.refresh(badge)
        return badge

    return _create


@pytest.fixture
def follow_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Follow instances."""

    async def _create(*, follower: Member, following: Member) -> Follow:
        follow = Follow(
            shop_id=follower.shop_id,
            follower_id=follower.id,
            following_id=following.id,
        )
        db_session.add(follow)
        await db_session.commit()
        await db_session.refresh(follow)
        return follow

    return _create


# ---------------------------------------------------------------------------
# Convenience fixtures (pre-built models)
# ---------------------------------------------------------------------------


@pytest.fixture
async def shop(shop_factory: Callable[..., Any]) -> Shop:
    """The shop the test clients are bound to."""
    return await shop_factory()


@pytest.fixture
async def other_shop(shop_factory: Callable[..., Any]) -> Shop:
    """A DIFFERENT shop (for multi-tenancy tests)."""
    return await shop_factory(shop_domain=OTHER_SHOP_DOMAIN, shop_name="Other Shop")


@pytest.fixture
async def admin(shop: Shop, member_factory: Callable[..., Any]) -> Member:
    """Admin of the test shop. The default authenticated identity."""
    return await member_factory(
        shop_id=shop.id,
        email=ADMIN_EMAIL,
        name="Test Admin",
        role=MemberRole.ADMIN,
        is_shop_owner=True,
    )


@pytest.fixture
async def member(shop: Shop, member_factory: Callable[..., Any]) -> Member:
    """Regular member of the test shop."""
    return await member_factory(shop_id=shop.id, email=MEMBER_EMAIL)


@pytest.fixture
async def moderator(shop: Shop, member_factory: Callable[..., Any]) -> Member:
    return await member_factory(
        shop_id=shop.id,
        email=MODERATOR_EMAIL,
        name="Test Moderator",
        role=MemberRole.MODERATOR,
    )


@pytest.fixture
async def other_member(other_shop: Shop, member_factory: Callable[..., Any]) -> Member:
    """Admin of the OTHER shop."""
    return await member_factory(
        shop_id=other_shop.id,
        email=OTHER_SHOP_EMAIL,
        name="Outsider",
        role=MemberRole.ADMIN,
    )
