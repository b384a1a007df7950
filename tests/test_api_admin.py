"""Regression tests for admin API authentication, rate limiting and alert endpoints."""
# pylint: disable=duplicate-code

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from quiet_systems.admin import AdminGateway
from quiet_systems.api.application import create_api_application
from quiet_systems.config import AppSettings
from quiet_systems.domain import (
    Alert,
    AlternatePayment,
    HealthStatus,
    UpstreamErrorKind,
    UpstreamFailure,
    UpstreamResult,
    UpstreamSuccess,
)
from quiet_systems.monitoring import AlertRegistry, DashboardAggregator

_FIXED_NOW = datetime(2026, 5, 10, 8, 0, 0, tzinfo=timezone.utc)
_ADMIN_HEADERS = {"x-api-key": "admin-secret"}
_ADMIN_ROUTES = [
    ("get", "/api/admin/status"),
    ("get", "/api/admin/alerts"),
    ("post", "/api/admin/alert/a1/acknowledge"),
]


class _RevenueSourceStub:
    """Revenue source stub returning one fixed result."""

    def __init__(self, result: UpstreamResult[float]):
        self._result = result

    def revenue_source_name(self) -> str:
        return "stub"

    async def revenue_fetch_month_to_date(self) -> UpstreamResult[float]:
        return self._result

    async def revenue_check_health(self) -> HealthStatus:
        state = "healthy" if isinstance(self._result, UpstreamSuccess) else "degraded"
        return HealthStatus(component="sheets", state=state, checked_at_utc=_FIXED_NOW)


class _PaymentGatewayStub:
    """Payment gateway stub exposing static health."""

    async def payment_create_order(self, order_request):
        raise AssertionError("not used by admin routes")

    async def payment_create_alternate(self, amount: float, currency: str) -> AlternatePayment:
        raise AssertionError("not used by admin routes")

    async def payment_acknowledge_webhook(self, payload, headers):
        raise AssertionError("not used by admin routes")

    async def payment_check_health(self) -> HealthStatus:
        return HealthStatus(component="payments", state="healthy", checked_at_utc=_FIXED_NOW)


def _build_settings(**overrides: object) -> AppSettings:
    """Create test settings object.

    Args:
        **overrides: Field overrides.

    Returns:
        AppSettings: Deterministic test settings for API creation.

    Raises:
        ValueError: Raised by AppSettings when values are invalid.
    """

    values: dict[str, object] = {
        "environment_name": "test",
        "version": "2.0.0",
        "admin_api_key": "admin-secret",
        "dashboard_dir": "/nonexistent/quiet-systems-dashboard",
    }
    values.update(overrides)
    return AppSettings(**values)


def _build_client(
    revenue_result: UpstreamResult[float] | None = None,
    alerts: list[Alert] | None = None,
    **settings_overrides: object,
) -> tuple[TestClient, AlertRegistry]:
    """Create a test client over stubbed collaborators.

    Args:
        revenue_result: Revenue result returned by the stub source.
        alerts: Initial registry alerts.
        **settings_overrides: Settings field overrides.

    Returns:
        tuple[TestClient, AlertRegistry]: Client and the registry it serves.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    settings = _build_settings(**settings_overrides)
    revenue_source = _RevenueSourceStub(revenue_result or UpstreamSuccess(value=50000.0))
    payment_gateway = _PaymentGatewayStub()
    registry = AlertRegistry(alerts)
    admin_gateway = AdminGateway(
        admin_api_key=settings.admin_api_key,
        revenue_source=revenue_source,
        payment_gateway=payment_gateway,
        dashboard_aggregator=DashboardAggregator(revenue_source, revenue_target=settings.revenue_target),
        alert_registry=registry,
        version=settings.version,
        revenue_target=settings.revenue_target,
        clock=lambda: _FIXED_NOW,
    )
    application = create_api_application(
        settings=settings,
        admin_gateway=admin_gateway,
        revenue_source=revenue_source,
        payment_gateway=payment_gateway,
    )
    return TestClient(application), registry


@pytest.mark.parametrize(("method", "path"), _ADMIN_ROUTES)
@pytest.mark.parametrize("headers", [{}, {"x-api-key": "wrong"}, {"x-api-key": ""}])
def test_api_admin_routes_reject_missing_or_wrong_key(method: str, path: str, headers: dict[str, str]) -> None:
    """Return 401 ADMIN_401 for every admin route without the shared secret.

    Args:
        method: HTTP method.
        path: Admin route path.
        headers: Request headers.

    Returns:
        None: Assertions validate auth rejection.

    Raises:
        AssertionError: Raised when a request is not rejected.
    """

    client, registry = _build_client(alerts=[Alert(alert_id="a1", message="cpu high")])

    response = getattr(client, method)(path, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "code": "ADMIN_401"}
    assert registry.registry_get_alert("a1").acknowledged is False


def test_api_admin_routes_reject_all_keys_when_secret_is_unset() -> None:
    """Fail closed when ADMIN_API_KEY is not configured.

    Returns:
        None: Assertions validate fail-closed authentication.

    Raises:
        AssertionError: Raised when a request is accepted.
    """

    client, _ = _build_client(admin_api_key="")

    response = client.get("/api/admin/status", headers={"x-api-key": ""})

    assert response.status_code == 401
    assert response.json()["code"] == "ADMIN_401"


def test_api_admin_status_returns_merged_payload() -> None:
    """Return components, revenue progress and dashboard for valid requests.

    Returns:
        None: Assertions validate merged payload.

    Raises:
        AssertionError: Raised when payload differs.
    """

    client, _ = _build_client(revenue_result=UpstreamSuccess(value=50000.0))

    response = client.get("/api/admin/status", headers=_ADMIN_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["system"] == "quiet-systems"
    assert body["version"] == "2.0.0"
    assert body["status"] == "operational"
    assert body["components"]["sheets"]["status"] == "healthy"
    assert body["components"]["payments"]["status"] == "healthy"
    assert body["revenue"] == {"mtd": 50000.0, "target": 100000.0, "progress": "50.0%"}
    assert body["dashboard"] == {
        "metrics": {"revenue": {"current": 50000.0, "target": 100000.0}},
        "checks": {"apis": {"status": "healthy"}},
    }


def test_api_admin_status_embeds_revenue_error_with_http_200() -> None:
    """Keep HTTP 200 and embed revenue error when the source fails.

    Returns:
        None: Assertions validate soft failure.

    Raises:
        AssertionError: Raised when failure changes status or shape.
    """

    failure = UpstreamFailure(kind=UpstreamErrorKind.TRANSPORT, message="connection refused")
    client, _ = _build_client(revenue_result=failure)

    response = client.get("/api/admin/status", headers=_ADMIN_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["revenue"] == {"error": "Unable to fetch revenue"}
    assert body["components"]["sheets"]["status"] == "degraded"
    assert body["dashboard"]["metrics"]["revenue"]["current"] == 0


def test_api_admin_alerts_lists_registry_contents() -> None:
    """Return alerts and count.

    Returns:
        None: Assertions validate list payload.

    Raises:
        AssertionError: Raised when payload differs.
    """

    client, _ = _build_client(
        alerts=[Alert(alert_id="a1", message="cpu high"), Alert(alert_id="a2", message="disk full")]
    )

    response = client.get("/api/admin/alerts", headers=_ADMIN_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [alert["id"] for alert in body["alerts"]] == ["a1", "a2"]
    assert body["alerts"][0]["acknowledged"] is False


def test_api_admin_alerts_empty_registry() -> None:
    """Return an empty list with zero count for a fresh registry.

    Returns:
        None: Assertions validate empty payload.

    Raises:
        AssertionError: Raised when payload differs.
    """

    client, _ = _build_client()

    response = client.get("/api/admin/alerts", headers=_ADMIN_HEADERS)

    assert response.json() == {"alerts": [], "count": 0}


def test_api_admin_acknowledge_twice_is_idempotent() -> None:
    """Acknowledge the same alert twice with success both times.

    Returns:
        None: Assertions validate idempotent acknowledgment.

    Raises:
        AssertionError: Raised when the second call fails.
    """

    client, registry = _build_client(alerts=[Alert(alert_id="a1", message="cpu high")])

    first = client.post("/api/admin/alert/a1/acknowledge", headers=_ADMIN_HEADERS)
    second = client.post("/api/admin/alert/a1/acknowledge", headers=_ADMIN_HEADERS)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["alert"]["acknowledged"] is True
    assert second.json()["alert"]["acknowledged"] is True
    assert registry.registry_get_alert("a1").acknowledged is True


def test_api_admin_acknowledge_unknown_alert_returns_404_without_mutation() -> None:
    """Return 404 for unknown ids and leave the registry untouched.

    Returns:
        None: Assertions validate not-found behavior.

    Raises:
        AssertionError: Raised when status or state differs.
    """

    client, registry = _build_client(alerts=[Alert(alert_id="a1", message="cpu high")])
    before = registry.registry_list_alerts()

    response = client.post("/api/admin/alert/abc/acknowledge", headers=_ADMIN_HEADERS)

    assert response.status_code == 404
    assert response.json() == {"error": "Alert not found"}
    assert registry.registry_list_alerts() == before


def test_api_admin_rate_limit_caps_requests_per_client() -> None:
    """Return 429 once a client exceeds the configured admin request cap.

    Returns:
        None: Assertions validate rate limiting.

    Raises:
        AssertionError: Raised when requests are not capped.
    """

    client, _ = _build_client(admin_rate_limit_max_requests=2)

    responses = [client.get("/api/admin/alerts", headers=_ADMIN_HEADERS) for _ in range(3)]
    unauthenticated = client.get("/api/admin/alerts")

    assert [response.status_code for response in responses] == [200, 200, 429]
    assert responses[2].json() == {"error": "Too many requests from this IP", "code": "ADMIN_429"}
    assert unauthenticated.status_code == 429


def test_api_admin_rate_limit_does_not_apply_to_public_routes() -> None:
    """Keep public routes reachable after the admin cap is exhausted.

    Returns:
        None: Assertions validate limiter scope.

    Raises:
        AssertionError: Raised when public routes are limited.
    """

    client, _ = _build_client(admin_rate_limit_max_requests=1)
    client.get("/api/admin/alerts", headers=_ADMIN_HEADERS)
    client.get("/api/admin/alerts", headers=_ADMIN_HEADERS)

    response = client.get("/health")

    assert response.status_code == 200
