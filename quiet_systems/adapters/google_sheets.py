"""Google Sheets adapter implementation for month-to-date revenue reads."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Callable, Final
from urllib.parse import quote

import httpx
import structlog

from quiet_systems.domain import (
    HEALTH_STATE_DEGRADED,
    HEALTH_STATE_HEALTHY,
    HealthStatus,
    UpstreamErrorKind,
    UpstreamFailure,
    UpstreamResult,
    UpstreamSuccess,
    domain_utc_now,
)

from .http_support import adapter_response_detail
from .interfaces import RevenueSourcePort

logger = structlog.get_logger(__name__)


class GoogleSheetsRevenueSource(RevenueSourcePort):
    """Revenue source reading one configured cell through the Sheets v4 values API."""

    _BASE_URL: Final[str] = "https://sheets.googleapis.com/v4/spreadsheets"
    _CURRENCY_NOISE: Final[tuple[str, ...]] = ("$", ",", " ")

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        spreadsheet_id: str,
        api_key: str,
        revenue_range: str = "Dashboard!B2",
        base_url: str = _BASE_URL,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize Sheets revenue source.

        The readiness flag is computed once here and never re-probed.

        Args:
            http_client: Shared async HTTP client.
            spreadsheet_id: Spreadsheet identifier; blank leaves the source degraded.
            api_key: Google API key; blank leaves the source degraded.
            revenue_range: A1 range whose first cell holds month-to-date revenue.
            base_url: Sheets values API base URL.
            clock: Optional UTC clock used for health timestamps.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when http_client is None or revenue_range is blank.
        """

        if http_client is None:
            raise ValueError("http_client must not be None")
        normalized_range = revenue_range.strip()
        if not normalized_range:
            raise ValueError("revenue_range must not be blank")

        self._http_client = http_client
        self._spreadsheet_id = spreadsheet_id.strip()
        self._api_key = api_key.strip()
        self._revenue_range = normalized_range
        self._base_url = base_url.strip().rstrip("/")
        self._clock = clock or domain_utc_now
        self._ready = bool(self._spreadsheet_id and self._api_key)
        if not self._ready:
            logger.warning("sheets_client_not_configured", spreadsheet_id_set=bool(self._spreadsheet_id))

    def revenue_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return "google_sheets"

    async def revenue_fetch_month_to_date(self) -> UpstreamResult[float]:
        """Read the month-to-date revenue cell.

        An empty cell is reported by the API without a `values` key and reads as zero.

        Returns:
            UpstreamResult[float]: Non-negative revenue amount or soft failure.

        Raises:
            RuntimeError: This implementation does not raise for upstream failures.
        """

        if not self._ready:
            return UpstreamFailure(
                kind=UpstreamErrorKind.NOT_CONFIGURED,
                message="spreadsheet client is not configured",
            )

        values_url = (
            f"{self._base_url}/{quote(self._spreadsheet_id, safe='')}"
            f"/values/{quote(self._revenue_range, safe='')}"
        )
        query_parameters = {
            "key": self._api_key,
            "valueRenderOption": "UNFORMATTED_VALUE",
            "majorDimension": "ROWS",
        }
        try:
            response = await self._http_client.get(values_url, params=query_parameters)
        except httpx.TimeoutException:
            return self._adapter_failure(UpstreamErrorKind.TIMEOUT, "spreadsheet request timed out")
        except httpx.HTTPError as error:
            return self._adapter_failure(UpstreamErrorKind.TRANSPORT, f"spreadsheet request failed: {error}")

        if response.status_code >= 400:
            return self._adapter_failure(
                UpstreamErrorKind.REJECTED,
                f"spreadsheet upstream returned HTTP {response.status_code}",
                detail=adapter_response_detail(response),
            )

        try:
            payload = response.json()
        except ValueError:
            return self._adapter_failure(UpstreamErrorKind.MALFORMED, "spreadsheet response is not JSON")

        amount = self._adapter_extract_amount(payload)
        if amount is None:
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                f"spreadsheet range {self._revenue_range} does not hold a non-negative number",
            )
        return UpstreamSuccess(value=amount)

    async def revenue_check_health(self) -> HealthStatus:
        """Report startup readiness of the spreadsheet client.

        Returns:
            HealthStatus: `healthy` when configured, otherwise `degraded`.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        state = HEALTH_STATE_HEALTHY if self._ready else HEALTH_STATE_DEGRADED
        return HealthStatus(component="sheets", state=state, checked_at_utc=self._clock())

    def _adapter_extract_amount(self, payload: Any) -> float | None:
        """Extract the first cell of a values response as a non-negative amount.

        Args:
            payload: Decoded values API response.

        Returns:
            float | None: Parsed amount, or None when the payload shape or value is invalid.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        if not isinstance(payload, dict):
            return None
        rows = payload.get("values")
        if rows is None:
            return 0.0
        if not isinstance(rows, list):
            return None
        if not rows or not isinstance(rows[0], list) or not rows[0]:
            return 0.0

        cell_value = rows[0][0]
        if isinstance(cell_value, bool):
            return None
        if isinstance(cell_value, str):
            cleaned_value = cell_value
            for noise in self._CURRENCY_NOISE:
                cleaned_value = cleaned_value.replace(noise, "")
            if not cleaned_value:
                return 0.0
            try:
                cell_value = float(cleaned_value)
            except ValueError:
                return None
        if not isinstance(cell_value, (int, float)):
            return None

        amount = float(cell_value)
        if not math.isfinite(amount) or amount < 0:
            return None
        return amount

    def _adapter_failure(
        self,
        kind: UpstreamErrorKind,
        message: str,
        detail: Any = None,
    ) -> UpstreamFailure:
        logger.warning("revenue_fetch_failed", kind=kind.value, message=message)
        return UpstreamFailure(kind=kind, message=message, detail=detail)
