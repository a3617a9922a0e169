"""Monitoring endpoints for shop admins and platform operators."""

import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from community.core.config import settings
from community.core.deps import AdminMember, DBSession
from community.core.monitoring import TimeRange, get_monitoring
from community.schemas.common import MessageResponse
from community.schemas.monitoring import (
    SecurityAlertResponse,
    ShopActivityResponse,
    SystemStatsResponse,
)

router = APIRouter()


async def verify_monitoring_key(
    x_monitoring_key: str | None = Header(None, alias="X-Monitoring-Key"),
) -> None:
    """Guard platform-wide endpoints. They do not exist unless a key is configured."""
    if not settings.monitoring_api_key:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not found",
        )

    if not x_monitoring_key or not secrets.compare_digest(
        x_monitoring_key, settings.monitoring_api_key
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid monitoring key",
        )


# === Shop admin ===


@router.get(
    "/activity",
    response_model=ShopActivityResponse,
    summary="Get shop activity",
    description="Request volume, latency, errors and alerts for the admin's shop.",
)
async def get_activity(
    admin: AdminMember,
    db: DBSession,
    time_range: TimeRange = Query("24h", description="Time window"),
) -> ShopActivityResponse:
    activities = await get_monitoring().get_shop_activity(
        db, time_range=time_range, shop_id=str(admin.shop_id)
    )
    return ShopActivityResponse.model_validate(activities[0])


@router.get(
    "/alerts",
    response_model=list[SecurityAlertResponse],
    summary="List security alerts",
    description="Most recent security alerts raised in the admin's shop.",
)
async def list_alerts(
    admin: AdminMember,
    limit: int = Query(50, ge=1, le=500),
) -> list[SecurityAlertResponse]:
    alerts = get_monitoring().get_recent_alerts(limit=limit, shop_id=str(admin.shop_id))
    return [SecurityAlertResponse.model_validate(a) for a in alerts]


@router.post(
    "/alerts/{alert_id}/resolve",
    response_model=MessageResponse,
    summary="Resolve alert",
)
async def resolve_alert(alert_id: str, admin: AdminMember) -> MessageResponse:
    if not get_monitoring().resolve_alert(alert_id, shop_id=str(admin.shop_id)):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Alert not found",
        )
    return MessageResponse(message="Alert resolved")


# === Platform ===


@router.get(
    "/system",
    response_model=SystemStatsResponse,
    summary="Get system stats",
    dependencies=[Depends(verify_monitoring_key)],
)
async def get_system_stats(db: DBSession) -> SystemStatsResponse:
    stats = await get_monitoring().get_system_stats(db)
    return SystemStatsResponse.model_validate(stats)


@router.get(
    "/shops",
    response_model=list[ShopActivityResponse],
    summary="Get activity for all shops",
    dependencies=[Depends(verify_monitoring_key)],
)
async def get_all_shop_activity(
    db: DBSession,
    time_range: TimeRange = Query("24h", description="Time window"),
) -> list[ShopActivityResponse]:
    activities = await get_monitoring().get_shop_activity(db, time_range=time_range)
    return [ShopActivityResponse.model_validate(a) for a in activities]


@router.get(
    "/platform/alerts",
    response_model=list[SecurityAlertResponse],
    summary="List all security alerts",
    description="Most recent security alerts across every shop, including those with no shop.",
    dependencies=[Depends(verify_monitoring_key)],
)
async def list_all_alerts(
    limit: int = Query(50, ge=1, le=500),
) -> list[SecurityAlertResponse]:
    alerts = get_monitoring().get_recent_alerts(limit=limit)
    return [SecurityAlertResponse.model_validate(a) for a in alerts]
