"""Dashboard summary composition over the revenue source."""

from __future__ import annotations

from quiet_systems.adapters import RevenueSourcePort
from quiet_systems.domain import HEALTH_STATE_HEALTHY, UpstreamSuccess


class DashboardAggregator:
    """Compose month-to-date revenue and API checks into one dashboard payload."""

    def __init__(self, revenue_source: RevenueSourcePort, revenue_target: float = 100000):
        """Initialize dashboard aggregator.

        Args:
            revenue_source: Month-to-date revenue source.
            revenue_target: Positive monthly revenue goal.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when revenue_source is None or revenue_target is not positive.
        """

        if revenue_source is None:
            raise ValueError("revenue_source must not be None")
        if revenue_target <= 0:
            raise ValueError("revenue_target must be > 0")

        self._revenue_source = revenue_source
        self._revenue_target = revenue_target

    def dashboard_zero_payload(self) -> dict[str, object]:
        """Return the dashboard payload used when revenue is unavailable.

        Returns:
            dict[str, object]: Dashboard payload with zero current revenue.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self._dashboard_build_payload(current_revenue=0)

    async def dashboard_compose(self) -> dict[str, object]:
        """Build the dashboard summary; revenue failures read as zero.

        Returns:
            dict[str, object]: `{metrics: {revenue: {current, target}}, checks: {apis: {status}}}`.

        Raises:
            RuntimeError: This method does not propagate collaborator failures.
        """

        revenue_result = await self._revenue_source.revenue_fetch_month_to_date()
        current_revenue = revenue_result.value if isinstance(revenue_result, UpstreamSuccess) else 0
        return self._dashboard_build_payload(current_revenue=current_revenue)

    def _dashboard_build_payload(self, current_revenue: float) -> dict[str, object]:
        return {
            "metrics": {
                "revenue": {
                    "current": current_revenue,
                    "target": self._revenue_target,
                },
            },
            "checks": {"apis": {"status": HEALTH_STATE_HEALTHY}},
        }
