"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Re-export auth dependencies for convenience
from community.core.auth import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_optional_user,
)
from community.core.config import settings
from community.core.database import get_async_session
from community.core.tenancy import (
    get_admin_member,
    get_current_member,
    get_current_shop,
    get_optional_member,
)
from community.models.member import Member
from community.models.shop import Shop

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_async_session)]

# Tenancy dependencies
CurrentShop = Annotated[Shop, Depends(get_current_shop)]
CurrentMember = Annotated[Member, Depends(get_current_member)]
OptionalMember = Annotated[Member | None, Depends(get_optional_member)]
AdminMember = Annotated[Member, Depends(get_admin_member)]


# Shared Redis connection pool
_redis_pool: aioredis.ConnectionPool | None = None


def _get_redis_pool() -> aioredis.ConnectionPool:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.ConnectionPool.from_url(
            str(settings.redis_url), decode_responses=True
        )
    return _redis_pool


async def close_redis_pool() -> None:
    """Disconnect the shared Redis pool on shutdown."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """Yield a Redis client from the shared connection pool."""
    pool = _get_redis_pool()
    r = aioredis.Redis(connection_pool=pool)
    try:
        yield r
    finally:
        await r.aclose()


__all__ = [
    "AdminMember",
    "CurrentMember",
    "CurrentShop",
    "CurrentUser",
    "DBSession",
    "OptionalMember",
    "OptionalUser",
    "get_async_session",
    "get_current_user",
    "get_optional_user",
    "get_redis",
]
