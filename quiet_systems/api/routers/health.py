"""Health endpoint router composition for unauthenticated liveness checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from quiet_systems.config import AppSettings
from quiet_systems.domain import domain_serialize_timestamp, domain_utc_now


def api_create_health_router(settings: AppSettings, system_names: tuple[str, ...]) -> APIRouter:
    """Create health-check router.

    The endpoint performs no upstream I/O and always reports `operational`.

    Args:
        settings: Runtime settings providing version and revenue target.
        system_names: Display names of the loaded subsystems.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when settings is invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return liveness payload with display revenue figures.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        payload = {
            "status": "operational",
            "version": settings.version,
            "timestamp": domain_serialize_timestamp(domain_utc_now()),
            "systems": list(system_names),
            "revenue": {
                "today": api_format_currency(0),
                "mtd": api_format_currency(0),
                "target": api_format_currency(settings.revenue_target),
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_format_currency(amount: float) -> str:
    """Render a dollar amount with thousands separators, e.g. `$100,000.00`."""

    return f"${amount:,.2f}"
