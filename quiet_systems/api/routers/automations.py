"""Automation API router with placeholder run and simulation endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse


def api_create_automations_router() -> APIRouter:
    """Create automations router.

    Returns:
        APIRouter: Router exposing `/api/automations` placeholder endpoints.

    Raises:
        RuntimeError: This factory does not raise runtime errors.
    """

    router = APIRouter(prefix="/api/automations", tags=["automations"])

    @router.post("/run")
    def api_automations_run() -> JSONResponse:
        """Return a fixed single-task run summary."""

        return JSONResponse(content={"successCount": 1, "totalTasks": 1}, status_code=status.HTTP_200_OK)

    @router.post("/simulate-month")
    def api_automations_simulate_month() -> JSONResponse:
        """Return a fixed zero-revenue monthly simulation."""

        return JSONResponse(content={"totalRevenue": 0}, status_code=status.HTTP_200_OK)

    return router
