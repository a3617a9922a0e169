"""API v1 router combining all route modules."""

from fastapi import APIRouter

from community.api.v1 import (
    badges,
    categories,
    comments,
    customization,
    follows,
    health,
    members,
    monitoring,
    polls,
    posts,
    profile,
    reactions,
    shop,
)

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Shop context resolved from the request
api_router.include_router(
    shop.router,
    prefix="/shop",
    tags=["shop"],
)

# Membership, roles and points
api_router.include_router(
    members.router,
    prefix="/members",
    tags=["members"],
)

# Follows share the members prefix
api_router.include_router(
    follows.router,
    prefix="/members",
    tags=["follows"],
)

api_router.include_router(
    categories.router,
    prefix="/categories",
    tags=["categories"],
)

api_router.include_router(
    posts.router,
    prefix="/posts",
    tags=["posts"],
)

# Comments, reactions and polls span /posts and /comments paths
api_router.include_router(comments.router, tags=["comments"])
api_router.include_router(reactions.router, tags=["reactions"])
api_router.include_router(polls.router, tags=["polls"])

# Gamification
api_router.include_router(
    badges.router,
    prefix="/badges",
    tags=["badges"],
)

api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["profile"],
)

api_router.include_router(
    customization.router,
    prefix="/customization",
    tags=["customization"],
)

# Monitoring (shop admins; platform endpoints need the monitoring key)
api_router.include_router(
    monitoring.router,
    prefix="/monitoring",
    tags=["monitoring"],
)
