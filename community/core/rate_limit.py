"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from starlette.requests import Request

from community.core.config import settings


def _get_real_client_ip(request: Request) -> str:
    """Extract the real client IP behind the Shopify app proxy / reverse proxy."""
    return (
        request.headers.get("CF-Connecting-IP")
        or request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "127.0.0.1")
    )


limiter = Limiter(key_func=_get_real_client_ip, storage_uri=settings.rate_limit_storage_uri)
