"""Tests for application-level error handling, headers and dashboard serving."""
# pylint: disable=duplicate-code

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from quiet_systems.admin import AdminGateway
from quiet_systems.api.application import create_api_application
from quiet_systems.config import AppSettings
from quiet_systems.domain import AlternatePayment, HealthStatus, UpstreamResult
from quiet_systems.monitoring import AlertRegistry, DashboardAggregator

_FIXED_NOW = datetime(2026, 5, 10, 8, 0, 0, tzinfo=timezone.utc)


class _ExplodingRevenueSource:
    """Revenue source stub that raises an unexpected error."""

    def revenue_source_name(self) -> str:
        return "exploding"

    async def revenue_fetch_month_to_date(self) -> UpstreamResult[float]:
        raise RuntimeError("spreadsheet client crashed")

    async def revenue_check_health(self) -> HealthStatus:
        return HealthStatus(component="sheets", state="healthy", checked_at_utc=_FIXED_NOW)


class _PaymentGatewayStub:
    """Payment gateway stub with static health."""

    async def payment_create_order(self, order_request):
        raise AssertionError("not used")

    async def payment_create_alternate(self, amount: float, currency: str) -> AlternatePayment:
        return AlternatePayment(transaction_id="GP_1_00000000", amount=amount, currency=currency)

    async def payment_acknowledge_webhook(self, payload, headers):
        raise AssertionError("not used")

    async def payment_check_health(self) -> HealthStatus:
        return HealthStatus(component="payments", state="healthy", checked_at_utc=_FIXED_NOW)


def _build_client(**settings_overrides: object) -> TestClient:
    """Create a test client whose revenue source raises unexpectedly.

    Args:
        **settings_overrides: Settings field overrides.

    Returns:
        TestClient: Client that returns server errors as responses.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    values: dict[str, object] = {
        "environment_name": "production",
        "admin_api_key": "admin-secret",
        "dashboard_dir": "/nonexistent/quiet-systems-dashboard",
    }
    values.update(settings_overrides)
    settings = AppSettings(**values)
    revenue_source = _ExplodingRevenueSource()
    payment_gateway = _PaymentGatewayStub()
    admin_gateway = AdminGateway(
        admin_api_key=settings.admin_api_key,
        revenue_source=revenue_source,
        payment_gateway=payment_gateway,
        dashboard_aggregator=DashboardAggregator(revenue_source),
        alert_registry=AlertRegistry(),
        version=settings.version,
    )
    application = create_api_application(
        settings=settings,
        admin_gateway=admin_gateway,
        revenue_source=revenue_source,
        payment_gateway=payment_gateway,
    )
    return TestClient(application, raise_server_exceptions=False)


@pytest.mark.parametrize(
    ("environment_name", "expected_message"),
    [
        ("production", "Internal server error"),
        ("development", "spreadsheet client crashed"),
    ],
)
def test_api_unexpected_errors_return_qs_500(environment_name: str, expected_message: str) -> None:
    """Return generic 500 in production and raw message in development.

    Args:
        environment_name: Runtime environment label.
        expected_message: Expected message field.

    Returns:
        None: Assertions validate catch-all handler.

    Raises:
        AssertionError: Raised when payload differs.
    """

    client = _build_client(environment_name=environment_name)

    response = client.get("/api/sheets/mtd")

    assert response.status_code == 500
    assert response.json() == {"error": "System error", "message": expected_message, "code": "QS_500"}


def test_api_unexpected_admin_status_error_returns_qs_500() -> None:
    """Return 500 when an admin collaborator raises instead of soft-failing.

    Returns:
        None: Assertions validate catch-all handler on admin routes.

    Raises:
        AssertionError: Raised when the error escapes differently.
    """

    client = _build_client()

    response = client.get("/api/admin/status", headers={"x-api-key": "admin-secret"})

    assert response.status_code == 500
    assert response.json()["code"] == "QS_500"


def test_api_responses_carry_security_headers() -> None:
    """Attach hardening headers to ordinary responses.

    Returns:
        None: Assertions validate response headers.

    Raises:
        AssertionError: Raised when headers are missing.
    """

    client = _build_client()

    response = client.get("/health")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"
    assert response.headers["referrer-policy"] == "no-referrer"


def test_api_cors_allows_only_configured_origins() -> None:
    """Echo configured origins and omit CORS headers for others.

    Returns:
        None: Assertions validate CORS allow-list.

    Raises:
        AssertionError: Raised when allow-list is not enforced.
    """

    client = _build_client(cors_origin="https://ops.example.com, https://admin.example.com")

    allowed = client.get("/health", headers={"Origin": "https://admin.example.com"})
    denied = client.get("/health", headers={"Origin": "https://evil.example.com"})

    assert allowed.headers["access-control-allow-origin"] == "https://admin.example.com"
    assert allowed.headers["access-control-allow-credentials"] == "true"
    assert "access-control-allow-origin" not in denied.headers


def test_api_cors_reflects_any_origin_when_unconfigured() -> None:
    """Reflect the request origin when no allow-list is configured.

    Returns:
        None: Assertions validate permissive CORS default.

    Raises:
        AssertionError: Raised when origin is not reflected.
    """

    client = _build_client(cors_origin="")

    response = client.get("/health", headers={"Origin": "https://anywhere.example.com"})

    assert response.headers["access-control-allow-origin"] == "https://anywhere.example.com"


def test_api_dashboard_bundle_served_when_directory_exists(tmp_path: Path) -> None:
    """Serve index at `/dashboard` and `/` without shadowing API routes.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate static serving.

    Raises:
        AssertionError: Raised when static or API routes misbehave.
    """

    (tmp_path / "index.html").write_text("<h1>Quiet Systems</h1>", encoding="utf-8")
    (tmp_path / "app.js").write_text("console.log('ok');", encoding="utf-8")
    client = _build_client(dashboard_dir=str(tmp_path))

    dashboard_response = client.get("/dashboard")
    root_response = client.get("/")
    asset_response = client.get("/app.js")
    health_response = client.get("/health")

    assert dashboard_response.status_code == 200
    assert "Quiet Systems" in dashboard_response.text
    assert root_response.status_code == 200
    assert "Quiet Systems" in root_response.text
    assert asset_response.status_code == 200
    assert health_response.json()["status"] == "operational"


def test_api_dashboard_routes_absent_without_bundle() -> None:
    """Return 404 for dashboard routes when no bundle directory exists.

    Returns:
        None: Assertions validate conditional mounting.

    Raises:
        AssertionError: Raised when dashboard routes exist.
    """

    client = _build_client()

    assert client.get("/dashboard").status_code == 404
