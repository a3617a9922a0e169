"""Response schemas for the monitoring endpoints."""

from datetime import datetime
from typing import Any

from community.core.monitoring import AlertSeverity, AlertType
from community.schemas.common import BaseSchema


class SecurityAlertResponse(BaseSchema):
    id: str
    type: AlertType
    severity: AlertSeverity
    shop_id: str | None
    member_id: str | None
    details: dict[str, Any]
    timestamp: datetime
    resolved: bool


class ShopActivityResponse(BaseSchema):
    """Activity of one shop over the requested time range."""

    shop_id: str
    shop_name: str
    active_members: int
    total_requests: int
    avg_response_time_ms: int
    error_rate: float
    last_activity: datetime | None
    alerts: int


class SystemStatsResponse(BaseSchema):
    total_shops: int
    active_shops_24h: int
    total_members: int
    active_members_24h: int
    avg_response_time_ms: int
    error_rate: float
    critical_alerts: int
