"""FastAPI application factory for the Quiet Systems service.

This module composes routers, cross-cutting middleware, error handlers and the
static dashboard into one application.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from quiet_systems.adapters import PaymentGatewayPort, RevenueSourcePort
from quiet_systems.admin import AdminGateway, AdminUnauthorizedError
from quiet_systems.config import AppSettings

from .rate_limit import AdminRateLimitExceededError, ClientRateLimiter
from .routers import (
    api_create_admin_router,
    api_create_automations_router,
    api_create_health_router,
    api_create_payments_router,
    api_create_sheets_router,
)

logger = structlog.get_logger(__name__)

SYSTEM_COMPONENT_NAMES: tuple[str, ...] = ("Sheets Integration", "Payment Processor", "Monitoring")
SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


def create_api_application(
    settings: AppSettings,
    admin_gateway: AdminGateway,
    revenue_source: RevenueSourcePort,
    payment_gateway: PaymentGatewayPort,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings.
        admin_gateway: Admin gateway for authenticated operator routes.
        revenue_source: Revenue source for public sheets routes.
        payment_gateway: Payment gateway for public payment routes.
        http_client: Optional shared HTTP client closed on application shutdown.

    Returns:
        FastAPI: Fully composed application.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    @asynccontextmanager
    async def api_lifespan(_application: FastAPI) -> AsyncIterator[None]:
        logger.info("application_started", version=settings.version, environment=settings.environment_name)
        yield
        if http_client is not None:
            await http_client.aclose()
        logger.info("application_stopped")

    application = FastAPI(title="Quiet Systems", version=settings.version, lifespan=api_lifespan)

    cors_origins = settings.config_cors_origins()
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=None if cors_origins else ".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def api_apply_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header_name, header_value in SECURITY_HEADERS.items():
            response.headers.setdefault(header_name, header_value)
        return response

    api_register_error_handlers(application=application, settings=settings)

    rate_limiter = ClientRateLimiter(
        max_requests=settings.admin_rate_limit_max_requests,
        window_seconds=settings.admin_rate_limit_window_seconds,
    )
    application.include_router(api_create_health_router(settings=settings, system_names=SYSTEM_COMPONENT_NAMES))
    application.include_router(api_create_admin_router(admin_gateway=admin_gateway, rate_limiter=rate_limiter))
    application.include_router(api_create_sheets_router(revenue_source=revenue_source))
    application.include_router(api_create_payments_router(payment_gateway=payment_gateway))
    application.include_router(api_create_automations_router())

    api_mount_dashboard(application=application, dashboard_dir=Path(settings.dashboard_dir))
    return application


def api_register_error_handlers(application: FastAPI, settings: AppSettings) -> None:
    """Register admin and catch-all exception handlers.

    Args:
        application: Application to configure.
        settings: Settings deciding whether raw error messages are exposed.

    Returns:
        None: Registers handlers as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    @application.exception_handler(AdminUnauthorizedError)
    async def api_handle_admin_unauthorized(_request: Request, _error: AdminUnauthorizedError) -> JSONResponse:
        payload = {"error": "Unauthorized", "code": "ADMIN_401"}
        return JSONResponse(content=payload, status_code=status.HTTP_401_UNAUTHORIZED)

    @application.exception_handler(AdminRateLimitExceededError)
    async def api_handle_admin_rate_limited(
        _request: Request,
        _error: AdminRateLimitExceededError,
    ) -> JSONResponse:
        payload = {"error": "Too many requests from this IP", "code": "ADMIN_429"}
        return JSONResponse(content=payload, status_code=status.HTTP_429_TOO_MANY_REQUESTS)

    @application.exception_handler(Exception)
    async def api_handle_unexpected_error(request: Request, error: Exception) -> JSONResponse:
        logger.exception("unhandled_request_error", path=request.url.path, method=request.method)
        payload = {
            "error": "System error",
            "message": str(error) if settings.config_is_development() else "Internal server error",
            "code": "QS_500",
        }
        return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def api_mount_dashboard(application: FastAPI, dashboard_dir: Path) -> bool:
    """Serve the static dashboard bundle at `/dashboard` and `/`.

    Must run after all API routers are included so the root mount does not
    shadow them.

    Args:
        application: Application to configure.
        dashboard_dir: Directory holding `index.html` and assets.

    Returns:
        bool: True when the bundle was mounted, False when the directory is absent.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    index_path = dashboard_dir / "index.html"
    if not dashboard_dir.is_dir() or not index_path.is_file():
        logger.warning("dashboard_bundle_missing", dashboard_dir=str(dashboard_dir))
        return False

    @application.get("/dashboard", include_in_schema=False)
    def api_dashboard_index() -> FileResponse:
        return FileResponse(index_path)

    application.mount("/", StaticFiles(directory=dashboard_dir, html=True), name="dashboard")
    return True
