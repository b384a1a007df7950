"""Admin gateway merging collaborator reads into operator-facing views.

The status view fans out four independent reads concurrently (sheets health,
payments health, month-to-date revenue, dashboard composition) and merges the
results by field name. Each read is bounded by a timeout so one unresponsive
upstream cannot hang the request; a timed out read degrades into the same
shape a failed read would produce.
"""

from __future__ import annotations

import asyncio
import hmac
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

import structlog

from quiet_systems.adapters import PaymentGatewayPort, RevenueSourcePort
from quiet_systems.domain import (
    HEALTH_STATE_DEGRADED,
    Alert,
    HealthStatus,
    RevenueSnapshot,
    UpstreamErrorKind,
    UpstreamFailure,
    UpstreamResult,
    UpstreamSuccess,
    domain_format_revenue_progress,
    domain_serialize_timestamp,
    domain_utc_now,
)
from quiet_systems.monitoring import AlertRegistry, DashboardAggregator

logger = structlog.get_logger(__name__)

ReadT = TypeVar("ReadT")

SYSTEM_NAME = "quiet-systems"
REVENUE_UNAVAILABLE_MESSAGE = "Unable to fetch revenue"


class AdminUnauthorizedError(PermissionError):
    """Raised when an admin request does not carry the configured shared secret."""


class AdminGateway:
    """Authenticated admin surface over revenue, payments, dashboard and alerts."""

    def __init__(
        self,
        admin_api_key: str,
        revenue_source: RevenueSourcePort,
        payment_gateway: PaymentGatewayPort,
        dashboard_aggregator: DashboardAggregator,
        alert_registry: AlertRegistry,
        version: str,
        revenue_target: float = 100000,
        read_timeout_seconds: float = 15.0,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize admin gateway.

        Args:
            admin_api_key: Shared secret; blank rejects every request.
            revenue_source: Month-to-date revenue source.
            payment_gateway: Payment gateway used for health reads.
            dashboard_aggregator: Dashboard summary composer.
            alert_registry: Alert store owned for the process lifetime.
            version: Service version reported in status payloads.
            revenue_target: Positive monthly revenue goal.
            read_timeout_seconds: Upper bound for each concurrent status read.
            clock: Optional UTC clock used for status timestamps.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when collaborators are missing or numeric bounds are invalid.
        """

        if revenue_source is None:
            raise ValueError("revenue_source must not be None")
        if payment_gateway is None:
            raise ValueError("payment_gateway must not be None")
        if dashboard_aggregator is None:
            raise ValueError("dashboard_aggregator must not be None")
        if alert_registry is None:
            raise ValueError("alert_registry must not be None")
        if revenue_target <= 0:
            raise ValueError("revenue_target must be > 0")
        if read_timeout_seconds <= 0:
            raise ValueError("read_timeout_seconds must be > 0")

        self._admin_api_key = admin_api_key.strip()
        self._revenue_source = revenue_source
        self._payment_gateway = payment_gateway
        self._dashboard_aggregator = dashboard_aggregator
        self._alert_registry = alert_registry
        self._version = version
        self._revenue_target = revenue_target
        self._read_timeout_seconds = read_timeout_seconds
        self._clock = clock or domain_utc_now

    def admin_authenticate(self, presented_key: str | None) -> None:
        """Verify the presented shared secret.

        Args:
            presented_key: Value of the `x-api-key` header, if any.

        Returns:
            None: Returns silently when the key matches.

        Raises:
            AdminUnauthorizedError: Raised when the key is absent, wrong, or no secret is configured.
        """

        if not self._admin_api_key or not presented_key:
            raise AdminUnauthorizedError("admin api key missing")
        if not hmac.compare_digest(presented_key.encode("utf-8"), self._admin_api_key.encode("utf-8")):
            raise AdminUnauthorizedError("admin api key mismatch")

    async def admin_get_status(self) -> dict[str, object]:
        """Build the merged operator status view.

        Returns:
            dict[str, object]: Status payload with components, revenue and dashboard sections.

        Raises:
            RuntimeError: Collaborator soft failures are embedded, never raised.
        """

        sheets_health, payments_health, revenue_result, dashboard_payload = await asyncio.gather(
            self._admin_bounded_read(
                self._revenue_source.revenue_check_health(),
                on_timeout=lambda: self._admin_degraded_health("sheets"),
            ),
            self._admin_bounded_read(
                self._payment_gateway.payment_check_health(),
                on_timeout=lambda: self._admin_degraded_health("payments"),
            ),
            self._admin_bounded_read(
                self._revenue_source.revenue_fetch_month_to_date(),
                on_timeout=self._admin_revenue_timeout,
            ),
            self._admin_bounded_read(
                self._dashboard_aggregator.dashboard_compose(),
                on_timeout=self._dashboard_aggregator.dashboard_zero_payload,
            ),
        )

        return {
            "system": SYSTEM_NAME,
            "version": self._version,
            "status": "operational",
            "timestamp": domain_serialize_timestamp(self._clock()),
            "components": {
                "sheets": admin_serialize_health(sheets_health),
                "payments": admin_serialize_health(payments_health),
            },
            "revenue": self._admin_revenue_section(revenue_result),
            "dashboard": dashboard_payload,
        }

    def admin_list_alerts(self) -> dict[str, object]:
        """Return all registered alerts with their count.

        Returns:
            dict[str, object]: `{alerts, count}` payload.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        alerts = self._alert_registry.registry_list_alerts()
        return {
            "alerts": [admin_serialize_alert(alert) for alert in alerts],
            "count": len(alerts),
        }

    def admin_acknowledge_alert(self, alert_id: str) -> dict[str, object]:
        """Acknowledge one alert.

        Args:
            alert_id: Alert identifier.

        Returns:
            dict[str, object]: `{success: True, alert}` payload.

        Raises:
            AlertNotFoundError: Raised when no alert has the identifier.
        """

        acknowledged_alert = self._alert_registry.registry_acknowledge_alert(alert_id)
        return {"success": True, "alert": admin_serialize_alert(acknowledged_alert)}

    def _admin_revenue_section(self, revenue_result: UpstreamResult[float]) -> dict[str, object]:
        if not isinstance(revenue_result, UpstreamSuccess):
            return {"error": REVENUE_UNAVAILABLE_MESSAGE}

        snapshot = RevenueSnapshot(amount=revenue_result.value, target=self._revenue_target)
        return {
            "mtd": snapshot.amount,
            "target": snapshot.target,
            "progress": domain_format_revenue_progress(snapshot),
        }

    async def _admin_bounded_read(
        self,
        read: Awaitable[ReadT],
        on_timeout: Callable[[], ReadT],
    ) -> ReadT:
        """Await one collaborator read within the configured timeout.

        Args:
            read: Collaborator coroutine.
            on_timeout: Factory for the substitute value when the read times out.

        Returns:
            ReadT: Read result, or the substitute value after timeout.

        Raises:
            Exception: Unexpected collaborator exceptions propagate unchanged.
        """

        try:
            return await asyncio.wait_for(read, timeout=self._read_timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("admin_status_read_timed_out", timeout_seconds=self._read_timeout_seconds)
            return on_timeout()

    def _admin_degraded_health(self, component: str) -> HealthStatus:
        return HealthStatus(component=component, state=HEALTH_STATE_DEGRADED, checked_at_utc=self._clock())

    def _admin_revenue_timeout(self) -> UpstreamFailure:
        return UpstreamFailure(kind=UpstreamErrorKind.TIMEOUT, message="revenue read timed out")


def admin_serialize_health(health: HealthStatus) -> dict[str, object]:
    """Serialize a component health status to its wire payload.

    Args:
        health: Component health status.

    Returns:
        dict[str, object]: `{status, timestamp}` payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "status": health.state,
        "timestamp": domain_serialize_timestamp(health.checked_at_utc),
    }


def admin_serialize_alert(alert: Alert) -> dict[str, object]:
    """Serialize an alert to its wire payload.

    Args:
        alert: Alert record.

    Returns:
        dict[str, object]: JSON-serializable alert payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "id": alert.alert_id,
        "message": alert.message,
        "severity": alert.severity,
        "timestamp": domain_serialize_timestamp(alert.created_at_utc),
        "acknowledged": alert.acknowledged,
        "details": alert.details,
    }
