"""Admin API router composition for status aggregation and alert endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from quiet_systems.admin import AdminGateway, AdminUnauthorizedError
from quiet_systems.monitoring import AlertNotFoundError

from ..rate_limit import AdminRateLimitExceededError, ClientRateLimiter

logger = structlog.get_logger(__name__)


def api_create_admin_router(admin_gateway: AdminGateway, rate_limiter: ClientRateLimiter) -> APIRouter:
    """Create admin router guarded by a per-client rate limit and the shared secret.

    Args:
        admin_gateway: Admin gateway owning authentication and aggregation.
        rate_limiter: Per-client request limiter applied before authentication.

    Returns:
        APIRouter: Router exposing `/api/admin` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if admin_gateway is None:
        raise ValueError("admin_gateway must not be None")
    if rate_limiter is None:
        raise ValueError("rate_limiter must not be None")

    async def api_admin_enforce_rate_limit(request: Request) -> None:
        client_key = request.client.host if request.client else "unknown"
        if not rate_limiter.limiter_try_acquire(client_key):
            logger.warning("admin_rate_limited", client=client_key)
            raise AdminRateLimitExceededError(f"admin rate limit exceeded for {client_key}")

    async def api_admin_require_key(
        request: Request,
        x_api_key: str | None = Header(default=None, alias="x-api-key"),
    ) -> None:
        try:
            admin_gateway.admin_authenticate(x_api_key)
        except AdminUnauthorizedError as error:
            logger.warning("admin_auth_rejected", path=request.url.path, reason=str(error))
            raise

    router = APIRouter(
        prefix="/api/admin",
        tags=["admin"],
        dependencies=[Depends(api_admin_enforce_rate_limit), Depends(api_admin_require_key)],
    )

    @router.get("/status")
    async def api_admin_status() -> JSONResponse:
        """Return merged system status, revenue progress and dashboard summary.

        Returns:
            JSONResponse: Aggregated status payload; upstream failures are embedded.

        Raises:
            RuntimeError: Raised when aggregation fails unexpectedly.
        """

        payload = await admin_gateway.admin_get_status()
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/alerts")
    async def api_admin_alerts() -> JSONResponse:
        """Return all registered alerts.

        Returns:
            JSONResponse: `{alerts, count}` payload.

        Raises:
            RuntimeError: Raised when registry read fails unexpectedly.
        """

        return JSONResponse(content=admin_gateway.admin_list_alerts(), status_code=status.HTTP_200_OK)

    @router.post("/alert/{alert_id}/acknowledge")
    async def api_admin_acknowledge_alert(alert_id: str) -> JSONResponse:
        """Acknowledge one alert.

        Args:
            alert_id: Alert identifier.

        Returns:
            JSONResponse: Acknowledged alert payload or 404 when absent.

        Raises:
            RuntimeError: Raised when registry update fails unexpectedly.
        """

        try:
            payload = admin_gateway.admin_acknowledge_alert(alert_id)
        except AlertNotFoundError:
            return JSONResponse(content={"error": "Alert not found"}, status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
