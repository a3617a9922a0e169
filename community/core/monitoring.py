"""In-memory monitoring of tenant isolation, security events and request performance.

Metrics and alerts are buffered per process. Metrics are flushed on a timer
(and whenever the buffer overflows); alerts are pruned on overflow, keeping
only unresolved alerts from the last 24 hours.
"""

import asyncio
import contextlib
import enum
import logging
import time
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from community.core.config import settings
from community.models.member import Member
from community.models.shop import Shop

logger = logging.getLogger(__name__)

TimeRange = Literal["1h", "24h", "7d"]

_TIME_RANGE_HOURS: dict[str, int] = {"1h": 1, "24h": 24, "7d": 168}


class AlertType(str, enum.Enum):
    """Kinds of security alert."""

    CROSS_TENANT_ATTEMPT = "CROSS_TENANT_ATTEMPT"
    ADMIN_ESCALATION = "ADMIN_ESCALATION"
    INVALID_SHOP_ACCESS = "INVALID_SHOP_ACCESS"
    SUSPICIOUS_ACTIVITY = "SUSPICIOUS_ACTIVITY"


class AlertSeverity(str, enum.Enum):
    """Alert severity, lowest to highest."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


_URGENT = (AlertSeverity.HIGH, AlertSeverity.CRITICAL)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class SecurityAlert:
    """A security event raised by the tenancy layer."""

    type: AlertType
    severity: AlertSeverity
    details: dict[str, Any]
    shop_id: str | None = None
    member_id: str | None = None
    resolved: bool = False
    timestamp: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class PerformanceMetric:
    """Duration and outcome of one measured operation."""

    operation: str
    shop_id: str
    duration_ms: float
    request_path: str
    success: bool = True
    error_type: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class ShopActivity:
    """Aggregated activity for one shop over a time range."""

    shop_id: str
    shop_name: str
    active_members: int
    total_requests: int
    avg_response_time_ms: int
    error_rate: float  # percent
    last_activity: datetime | None
    alerts: int


@dataclass
class SystemStats:
    """Platform-wide figures over the last 24 hours."""

    total_shops: int
    active_shops_24h: int
    total_members: int
    active_members_24h: int
    avg_response_time_ms: int
    error_rate: float  # percent
    critical_alerts: int


def _summarize(metrics: list[PerformanceMetric]) -> tuple[int, float]:
    """Return (average duration in ms, error rate in percent)."""
    if not metrics:
        return 0, 0.0
    avg = sum(m.duration_ms for m in metrics) / len(metrics)
    failures = sum(1 for m in metrics if not m.success)
    return round(avg), round(failures / len(metrics) * 100, 2)


class MonitoringService:
    """Buffers performance metrics and security alerts for the process."""

    def __init__(
        self,
        buffer_size: int = 1000,
        flush_interval: float = 30.0,
        slow_threshold_ms: float = 5000.0,
    ) -> None:
        self.buffer_size = buffer_size
        self.flush_interval = flush_interval
        self.slow_threshold_ms = slow_threshold_ms
        self.metrics: list[PerformanceMetric] = []
        self.alerts: list[SecurityAlert] = []
        self._flush_task: asyncio.Task[None] | None = None

    # === Recording ===

    def record_performance(
        self,
        operation: str,
        shop_id: str,
        duration_ms: float,
        request_path: str,
        success: bool = True,
        error_type: str | None = None,
    ) -> None:
        """Record a performance metric, alerting on slow responses."""
        self.metrics.append(
            PerformanceMetric(
                operation=operation,
                shop_id=shop_id,
                duration_ms=duration_ms,
                request_path=request_path,
                success=success,
                error_type=error_type,
            )
        )

        if duration_ms > self.slow_threshold_ms:
            self.create_security_alert(
                type=AlertType.SUSPICIOUS_ACTIVITY,
                severity=AlertSeverity.MEDIUM,
                shop_id=shop_id,
                details={
                    "reason": "SLOW_RESPONSE",
                    "operation": operation,
                    "duration_ms": round(duration_ms),
                    "request_path": request_path,
                },
            )

        if len(self.metrics) > self.buffer_size:
            self.flush_metrics()

    def create_security_alert(
        self,
        type: AlertType,
        severity: AlertSeverity,
        details: dict[str, Any],
        shop_id: str | None = None,
        member_id: str | None = None,
    ) -> SecurityAlert:
        """Record a security alert. HIGH and CRITICAL alerts are logged immediately."""
        alert = SecurityAlert(
            type=type,
            severity=severity,
            details=details,
            shop_id=shop_id,
            member_id=member_id,
        )
        self.alerts.append(alert)

        if severity in _URGENT:
            logger.error(
                "SECURITY ALERT [%s] %s shop=%s member=%s details=%s",
                severity.value,
                type.value,
                shop_id,
                member_id,
                details,
            )

        if len(self.alerts) > self.buffer_size:
            self.flush_alerts()

        return alert

    def alert_cross_tenant_attempt(
        self,
        member_id: str,
        member_shop_id: str | None,
        attempted_shop_id: str,
        resource: str,
        request_path: str,
    ) -> SecurityAlert:
        """Record an attempt to reach another shop's data."""
        return self.create_security_alert(
            type=AlertType.CROSS_TENANT_ATTEMPT,
            severity=AlertSeverity.HIGH,
            shop_id=member_shop_id,
            member_id=member_id,
            details={
                "attempted_shop_id": attempted_shop_id,
                "resource": resource,
                "request_path": request_path,
            },
        )

    def alert_admin_escalation(
        self,
        member_id: str,
        shop_id: str,
        current_role: str,
        attempted_action: str,
        request_path: str,
    ) -> SecurityAlert:
        """Record a non-admin attempting an admin-only action."""
        return self.create_security_alert(
            type=AlertType.ADMIN_ESCALATION,
            severity=AlertSeverity.CRITICAL,
            shop_id=shop_id,
            member_id=member_id,
            details={
                "current_role": current_role,
                "attempted_action": attempted_action,
                "request_path": request_path,
            },
        )

    @contextlib.asynccontextmanager
    async def measure(
        self,
        operation: str,
        shop_id: str,
        request_path: str,
    ) -> AsyncIterator[None]:
        """Measure the wrapped block and record its duration and outcome."""
        start = time.perf_counter()
        success = True
        error_type: str | None = None
        try:
            yield
        except Exception as e:
            success = False
            error_type = type(e).__name__
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.record_performance(
                operation, shop_id, duration_ms, request_path, success, error_type
            )

    # === Reporting ===

    async def get_shop_activity(
        self,
        db: AsyncSession,
        time_range: TimeRange = "24h",
        shop_id: str | None = None,
    ) -> list[ShopActivity]:
        """Per-shop activity for the time range, busiest shops first."""
        since = _utcnow() - timedelta(hours=_TIME_RANGE_HOURS[time_range])

        stmt = (
            select(
                Shop.id,
                Shop.shop_name,
                func.count(case((Member.updated_at > since, 1), else_=None)).label(
                    "active_members"
                ),
                func.max(Member.updated_at).label("last_activity"),
            )
            .outerjoin(Member, Member.shop_id == Shop.id)
            .group_by(Shop.id, Shop.shop_name)
        )
        if shop_id is not None:
            stmt = stmt.where(Shop.id == uuid.UUID(shop_id))

        result = await db.execute(stmt)
        rows = result.all()

        activities: list[ShopActivity] = []
        for row in rows:
            sid = str(row.id)
            shop_metrics = [m for m in self.metrics if m.shop_id == sid and m.timestamp > since]
            shop_alerts = [a for a in self.alerts if a.shop_id == sid and a.timestamp > since]
            avg_ms, error_rate = _summarize(shop_metrics)

            activities.append(
                ShopActivity(
                    shop_id=sid,
                    shop_name=row.shop_name,
                    active_members=row.active_members or 0,
                    total_requests=len(shop_metrics),
                    avg_response_time_ms=avg_ms,
                    error_rate=error_rate,
                    last_activity=row.last_activity,
                    alerts=len(shop_alerts),
                )
            )

        return sorted(activities, key=lambda a: a.total_requests, reverse=True)

    def get_recent_alerts(self, limit: int = 50, shop_id: str | None = None) -> list[SecurityAlert]:
        """Most recent alerts first, optionally for one shop."""
        alerts = [a for a in self.alerts if shop_id is None or a.shop_id == shop_id]
        return sorted(alerts, key=lambda a: a.timestamp, reverse=True)[:limit]

    async def get_system_stats(self, db: AsyncSession) -> SystemStats:
        """Platform-wide statistics for the last 24 hours."""
        last_24h = _utcnow() - timedelta(hours=24)

        total_shops = await db.scalar(select(func.count()).select_from(Shop)) or 0
        total_members = await db.scalar(select(func.count()).select_from(Member)) or 0
        active_members = (
            await db.scalar(
                select(func.count()).select_from(Member).where(Member.updated_at >= last_24h)
            )
            or 0
        )

        recent = [m for m in self.metrics if m.timestamp > last_24h]
        avg_ms, error_rate = _summarize(recent)
        critical = sum(1 for a in self.alerts if a.timestamp > last_24h and a.severity in _URGENT)

        return SystemStats(
            total_shops=total_shops,
            active_shops_24h=len({m.shop_id for m in recent}),
            total_members=total_members,
            active_members_24h=active_members,
            avg_response_time_ms=avg_ms,
            error_rate=error_rate,
            critical_alerts=critical,
        )

    def resolve_alert(self, alert_id: str, shop_id: str | None = None) -> bool:
        """Mark an alert resolved. Returns False when no matching alert exists."""
        for alert in self.alerts:
            if alert.id == alert_id and (shop_id is None or alert.shop_id == shop_id):
                alert.resolved = True
                return True
        return False

    # === Flushing ===

    def flush_metrics(self) -> None:
        """Drop buffered metrics after logging how many were flushed."""
        if not self.metrics:
            return
        logger.info("Flushing %d performance metrics", len(self.metrics))
        self.metrics = []

    def flush_alerts(self) -> None:
        """Keep the newest unresolved alerts from the last 24 hours."""
        if not self.alerts:
            return
        unresolved = [a for a in self.alerts if not a.resolved]
        logger.info(
            "Flushing %d security alerts (%d unresolved)", len(self.alerts), len(unresolved)
        )
        cutoff = _utcnow() - timedelta(hours=24)
        self.alerts = [a for a in unresolved if a.timestamp > cutoff][-self.buffer_size :]

    def clear(self) -> None:
        self.metrics = []
        self.alerts = []

    async def _flush_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            self.flush_metrics()

    def start(self) -> None:
        """Start the periodic metrics flush on the running event loop."""
        if self._flush_task is None or self._flush_task.done():
            self._flush_task = asyncio.create_task(self._flush_periodically())

    async def stop(self) -> None:
        """Cancel the periodic flush and flush what is left."""
        if self._flush_task is not None:
            self._flush_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._flush_task
            self._flush_task = None
        self.flush_metrics()


monitoring = MonitoringService(
    buffer_size=settings.monitoring_buffer_size,
    flush_interval=settings.monitoring_flush_interval_seconds,
    slow_threshold_ms=settings.monitoring_slow_request_ms,
)


def get_monitoring() -> MonitoringService:
    """Return the process-wide monitoring service."""
    return monitoring
