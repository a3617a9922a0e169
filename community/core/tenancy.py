"""Multi-tenant shop isolation helpers.

Every community request is scoped to one shop. The shop is resolved from the
request, every query filters on its id, and admin-only actions are checked
against the member's role inside that shop. Refusals are reported to the
monitoring service.
"""

import logging
import uuid
from typing import Any
from urllib.parse import parse_qs, urlparse

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community.core.auth import get_current_user, get_optional_user, get_user_email
from community.core.config import settings
from community.core.database import get_async_session
from community.core.logging_config import shop_id_var
from community.core.monitoring import AlertSeverity, AlertType, get_monitoring
from community.models.member import Member, MemberRole
from community.models.shop import Shop

logger = logging.getLogger(__name__)

SHOP_HEADER = "X-Shop-Domain"


def normalize_shop_domain(raw: str) -> str:
    """Lower-case a shop domain and strip any scheme or path."""
    value = raw.strip().lower()
    if "://" in value:
        value = urlparse(value).netloc
    return value.split("/")[0]


def _shop_domain_from_request(request: Request) -> str | None:
    """Header first, then the ``shop`` query parameter, then the referer's ``shop``."""
    domain = request.headers.get(SHOP_HEADER) or request.query_params.get("shop")
    if domain:
        return normalize_shop_domain(domain)

    referer = request.headers.get("referer")
    if referer:
        values = parse_qs(urlparse(referer).query).get("shop")
        if values:
            return normalize_shop_domain(values[0])

    return None


async def get_shop_id(request: Request, db: AsyncSession) -> uuid.UUID | None:
    """Resolve the requesting shop's id.

    Returns None when the request carries no shop context. Raises 404 when a
    domain is given but no active shop has it.
    """
    domain = _shop_domain_from_request(request)

    if domain is None and settings.environment == "development" and settings.default_shop_domain:
        domain = normalize_shop_domain(settings.default_shop_domain)

    if domain is None:
        return None

    query = select(Shop.id).where(
        Shop.shop_domain == domain,
        Shop.is_active == True,  # noqa: E712
    )
    result = await db.execute(query)
    shop_id = result.scalar_one_or_none()

    if shop_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shop not found or inactive",
        )
    return shop_id


def ensure_shop_isolation(shop_id: uuid.UUID | None) -> uuid.UUID:
    """Refuse to serve a request that is not bound to a shop."""
    if shop_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Shop context required",
        )
    return shop_id


async def get_current_shop(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
) -> Shop:
    """Resolve the current shop and bind it to the request for logging and monitoring."""
    shop_id = ensure_shop_isolation(await get_shop_id(request, db))

    shop = await db.get(Shop, shop_id)
    if shop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shop not found or inactive",
        )

    request.state.shop_id = str(shop.id)
    shop_id_var.set(str(shop.id))
    return shop


async def find_member_by_email(db: AsyncSession, shop_id: uuid.UUID, email: str) -> Member | None:
    """Look up a person's membership in one shop."""
    query = select(Member).where(
        Member.shop_id == shop_id,
        Member.email == email,
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_current_member(
    request: Request,
    user: dict[str, Any] = Depends(get_current_user),
    shop: Shop = Depends(get_current_shop),
    db: AsyncSession = Depends(get_async_session),
) -> Member:
    """The authenticated person's membership in the current shop.

    A person who only belongs to other shops is reported as a cross-tenant
    attempt; a person who belongs to no shop at all as an invalid shop access.
    """
    email = get_user_email(user)
    member = await find_member_by_email(db, shop.id, email)
    if member is not None:
        return member

    monitor = get_monitoring()
    result = await db.execute(select(Member).where(Member.email == email).limit(1))
    elsewhere = result.scalar_one_or_none()

    if elsewhere is not None:
        monitor.alert_cross_tenant_attempt(
            member_id=str(elsewhere.id),
            member_shop_id=str(elsewhere.shop_id),
            attempted_shop_id=str(shop.id),
            resource="membership",
            request_path=request.url.path,
        )
    else:
        monitor.create_security_alert(
            type=AlertType.INVALID_SHOP_ACCESS,
            severity=AlertSeverity.LOW,
            shop_id=str(shop.id),
            details={
                "reason": "NOT_A_MEMBER",
                "email": email,
                "request_path": request.url.path,
            },
        )

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Not a member of this shop",
    )


async def get_optional_member(
    user: dict[str, Any] | None = Depends(get_optional_user),
    shop: Shop = Depends(get_current_shop),
    db: AsyncSession = Depends(get_async_session),
) -> Member | None:
    """Current member for public read endpoints; None for anonymous visitors."""
    if user is None or not user.get("email"):
        return None
    return await find_member_by_email(db, shop.id, str(user["email"]).lower())


def require_admin(member: Member, request_path: str, action: str = "admin_action") -> Member:
    """Raise 403 unless the member is an admin of their shop."""
    if member.role != MemberRole.ADMIN:
        get_monitoring().alert_admin_escalation(
            member_id=str(member.id),
            shop_id=str(member.shop_id),
            current_role=member.role.value,
            attempted_action=action,
            request_path=request_path,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return member


def require_moderator(member: Member) -> Member:
    """Raise 403 unless the member is an admin or moderator."""
    if not member.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator privileges required",
        )
    return member


async def get_admin_member(
    request: Request,
    member: Member = Depends(get_current_member),
) -> Member:
    """Dependency form of :func:`require_admin`."""
    return require_admin(member, request.url.path, f"{request.method} {request.url.path}")


async def check_isolation_violation(
    db: AsyncSession,
    member_id: uuid.UUID,
    requested_shop_id: uuid.UUID,
    request_path: str,
) -> None:
    """Report a member id that is unknown or belongs to another shop.

    Never raises: lookup failures are themselves reported as suspicious activity.
    """
    monitor = get_monitoring()
    try:
        member = await db.get(Member, member_id)
    except Exception as e:
        logger.warning("Isolation check failed for member %s: %s", member_id, e)
        monitor.create_security_alert(
            type=AlertType.SUSPICIOUS_ACTIVITY,
            severity=AlertSeverity.MEDIUM,
            member_id=str(member_id),
            details={
                "reason": "ISOLATION_CHECK_FAILED",
                "error": str(e),
                "request_path": request_path,
            },
        )
        return

    if member is None:
        monitor.create_security_alert(
            type=AlertType.INVALID_SHOP_ACCESS,
            severity=AlertSeverity.HIGH,
            member_id=str(member_id),
            details={
                "reason": "USER_NOT_FOUND",
                "requested_shop_id": str(requested_shop_id),
                "request_path": request_path,
            },
        )
        return

    if member.shop_id != requested_shop_id:
        monitor.alert_cross_tenant_attempt(
            member_id=str(member.id),
            member_shop_id=str(member.shop_id),
            attempted_shop_id=str(requested_shop_id),
            resource="data_access",
            request_path=request_path,
        )


async def get_member_in_shop(
    db: AsyncSession,
    member_id: uuid.UUID,
    shop_id: uuid.UUID,
    request_path: str,
) -> Member:
    """Load a member of the current shop; ids from elsewhere are reported and look missing."""
    query = select(Member).where(
        Member.id == member_id,
        Member.shop_id == shop_id,
    )
    result = await db.execute(query)
    member = result.scalar_one_or_none()

    if member is None:
        await check_isolation_violation(db, member_id, shop_id, request_path)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found in this shop",
        )
    return member
