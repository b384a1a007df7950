"""Typed domain models shared across runtime layers.

This module provides simple data contracts for cross-layer communication
between adapters, the monitoring registry and the API surface.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

HEALTH_STATE_HEALTHY = "healthy"
HEALTH_STATE_DEGRADED = "degraded"


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by component health checks.

    Attributes:
        component: Collaborator that produced the status (`sheets`, `payments`, `apis`).
        state: `healthy` or `degraded`.
        checked_at_utc: Time the status was produced.
    """

    component: str
    state: str
    checked_at_utc: datetime


@dataclass(frozen=True)
class Alert:
    """Operator alert owned by the alert registry.

    Attributes:
        alert_id: Unique alert identifier.
        message: Human-readable alert text.
        severity: Opaque severity label supplied by the producing monitor.
        created_at_utc: Optional creation timestamp supplied by the producing monitor.
        acknowledged: Whether an operator acknowledged the alert.
        details: Opaque passthrough payload.
    """

    alert_id: str
    message: str = ""
    severity: str = "info"
    created_at_utc: datetime | None = None
    acknowledged: bool = False
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RevenueSnapshot:
    """Month-to-date revenue paired with the configured monthly goal.

    Attributes:
        amount: Non-negative month-to-date revenue.
        target: Positive monthly revenue goal.
    """

    amount: float
    target: float


@dataclass(frozen=True)
class PaymentOrderRequest:
    """Input contract for provider order creation.

    Attributes:
        amount: Order amount in major currency units.
        currency: ISO currency code.
        description: Purchase unit description.
        return_url: Optional buyer redirect after approval.
        cancel_url: Optional buyer redirect after cancellation.
    """

    amount: float
    currency: str = "USD"
    description: str = "Digital Product"
    return_url: str | None = None
    cancel_url: str | None = None


@dataclass(frozen=True)
class PaymentOrder:
    """Provider order created by the payment gateway.

    Attributes:
        order_id: Provider order identifier.
        status: Provider order status text.
        links: Provider HATEOAS links (approval URL and friends).
    """

    order_id: str
    status: str
    links: list[dict[str, Any]]


@dataclass(frozen=True)
class AlternatePayment:
    """Locally synthesized alternate-method transaction.

    Attributes:
        transaction_id: Generated `GP_<epoch-millis>_<hex>` identifier.
        amount: Requested amount.
        currency: ISO currency code.
    """

    transaction_id: str
    amount: float
    currency: str


def domain_format_revenue_progress(snapshot: RevenueSnapshot) -> str:
    """Render revenue progress toward target as a one-decimal percentage.

    Values above the target are not clamped, so 150000 of 100000 renders `150.0%`.
    Exact ties round up, so 250 of 100000 renders `0.3%`.

    Args:
        snapshot: Revenue snapshot with positive target.

    Returns:
        str: Progress text such as `50.0%`.

    Raises:
        ValueError: Raised when snapshot target is not positive.
    """

    if snapshot.target <= 0:
        raise ValueError("snapshot target must be > 0")

    progress_percent = (snapshot.amount / snapshot.target) * 100
    # Half-up on the exact binary value, matching JavaScript toFixed(1).
    rounded_percent = Decimal(progress_percent).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded_percent}%"
