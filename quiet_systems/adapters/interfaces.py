"""Typed interfaces for adapter-layer responsibilities."""

from collections.abc import Mapping
from typing import Protocol

from quiet_systems.domain import (
    AlternatePayment,
    HealthStatus,
    PaymentOrder,
    PaymentOrderRequest,
    UpstreamResult,
)


class RevenueSourcePort(Protocol):
    """Port definition for month-to-date revenue bookkeeping reads."""

    def revenue_source_name(self) -> str:
        """Return source identifier for diagnostics and telemetry.

        Returns:
            str: Human-readable upstream source identifier.

        Raises:
            RuntimeError: Raised when source metadata is unavailable.
        """

    async def revenue_fetch_month_to_date(self) -> UpstreamResult[float]:
        """Fetch month-to-date revenue from the bookkeeping backend.

        Returns:
            UpstreamResult[float]: Non-negative revenue amount or soft failure.

        Raises:
            RuntimeError: Implementations do not raise for upstream failures.
        """

    async def revenue_check_health(self) -> HealthStatus:
        """Report readiness of the bookkeeping client configured at startup.

        Returns:
            HealthStatus: `healthy` when configured, otherwise `degraded`.

        Raises:
            RuntimeError: Implementations do not raise runtime errors.
        """


class PaymentGatewayPort(Protocol):
    """Port definition for payment provider order and webhook flows."""

    async def payment_create_order(self, order_request: PaymentOrderRequest) -> UpstreamResult[PaymentOrder]:
        """Create one provider order.

        Args:
            order_request: Order amount, currency, description and redirect URLs.

        Returns:
            UpstreamResult[PaymentOrder]: Created order or soft failure with upstream payload.

        Raises:
            RuntimeError: Implementations do not raise for upstream failures.
        """

    async def payment_create_alternate(self, amount: float, currency: str) -> AlternatePayment:
        """Synthesize one alternate-method transaction without upstream calls.

        Args:
            amount: Requested amount.
            currency: ISO currency code.

        Returns:
            AlternatePayment: Locally generated transaction record.

        Raises:
            RuntimeError: Implementations do not raise runtime errors.
        """

    async def payment_acknowledge_webhook(
        self,
        payload: bytes,
        headers: Mapping[str, str],
    ) -> UpstreamResult[dict[str, object]]:
        """Verify and acknowledge one provider webhook delivery.

        Args:
            payload: Raw request body bytes.
            headers: Request headers carrying provider transmission metadata.

        Returns:
            UpstreamResult[dict[str, object]]: Parsed webhook event or verification failure.

        Raises:
            RuntimeError: Implementations do not raise for upstream failures.
        """

    async def payment_check_health(self) -> HealthStatus:
        """Report payment gateway readiness.

        Returns:
            HealthStatus: Payment gateway health status.

        Raises:
            RuntimeError: Implementations do not raise runtime errors.
        """
