"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from quiet_systems.adapters import GoogleSheetsRevenueSource, PayPalPaymentGateway, adapter_create_http_client
from quiet_systems.admin import AdminGateway
from quiet_systems.api import create_api_application
from quiet_systems.config import AppSettings, config_load_settings
from quiet_systems.monitoring import AlertRegistry, DashboardAggregator


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Every collaborator is constructed once here and injected by reference; the
    alert registry starts empty and lives as long as the application.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    http_client = adapter_create_http_client(timeout_seconds=resolved_settings.upstream_timeout_seconds)
    revenue_source = GoogleSheetsRevenueSource(
        http_client=http_client,
        spreadsheet_id=resolved_settings.google_sheets_id,
        api_key=resolved_settings.google_sheets_api_key,
        revenue_range=resolved_settings.google_sheets_revenue_range,
    )
    payment_gateway = PayPalPaymentGateway(
        http_client=http_client,
        client_id=resolved_settings.paypal_client_id,
        secret=resolved_settings.paypal_secret,
        environment=resolved_settings.paypal_env,
        webhook_id=resolved_settings.paypal_webhook_id,
    )
    dashboard_aggregator = DashboardAggregator(
        revenue_source=revenue_source,
        revenue_target=resolved_settings.revenue_target,
    )
    admin_gateway = AdminGateway(
        admin_api_key=resolved_settings.admin_api_key,
        revenue_source=revenue_source,
        payment_gateway=payment_gateway,
        dashboard_aggregator=dashboard_aggregator,
        alert_registry=AlertRegistry(),
        version=resolved_settings.version,
        revenue_target=resolved_settings.revenue_target,
        read_timeout_seconds=resolved_settings.admin_status_timeout_seconds,
    )
    return create_api_application(
        settings=resolved_settings,
        admin_gateway=admin_gateway,
        revenue_source=revenue_source,
        payment_gateway=payment_gateway,
        http_client=http_client,
    )
