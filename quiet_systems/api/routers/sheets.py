"""Sheets API router composition for month-to-date revenue reads."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from quiet_systems.adapters import RevenueSourcePort
from quiet_systems.domain import UpstreamSuccess


def api_create_sheets_router(revenue_source: RevenueSourcePort) -> APIRouter:
    """Create sheets router exposing the month-to-date revenue figure.

    Args:
        revenue_source: Month-to-date revenue source.

    Returns:
        APIRouter: Router exposing `/api/sheets` endpoints.

    Raises:
        ValueError: Raised when revenue_source is invalid.
    """

    if revenue_source is None:
        raise ValueError("revenue_source must not be None")

    router = APIRouter(prefix="/api/sheets", tags=["sheets"])

    @router.get("/mtd")
    async def api_sheets_month_to_date() -> JSONResponse:
        """Return month-to-date revenue; upstream failures are reported as data.

        Returns:
            JSONResponse: `{success, amount}` or `{success: false, error}` with HTTP 200.

        Raises:
            RuntimeError: Raised when the revenue source fails unexpectedly.
        """

        revenue_result = await revenue_source.revenue_fetch_month_to_date()
        if isinstance(revenue_result, UpstreamSuccess):
            payload = {"success": True, "amount": revenue_result.value}
        else:
            payload = {"success": False, "error": revenue_result.domain_error_payload()}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
