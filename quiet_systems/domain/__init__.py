"""Domain models used across application layer boundaries."""

from .models import (
	HEALTH_STATE_DEGRADED,
	HEALTH_STATE_HEALTHY,
	Alert,
	AlternatePayment,
	HealthStatus,
	PaymentOrder,
	PaymentOrderRequest,
	RevenueSnapshot,
	domain_format_revenue_progress,
)
from .results import UpstreamErrorKind, UpstreamFailure, UpstreamResult, UpstreamSuccess
from .timeline import domain_serialize_timestamp, domain_utc_now

__all__ = [
	"HEALTH_STATE_DEGRADED",
	"HEALTH_STATE_HEALTHY",
	"Alert",
	"AlternatePayment",
	"HealthStatus",
	"PaymentOrder",
	"PaymentOrderRequest",
	"RevenueSnapshot",
	"UpstreamErrorKind",
	"UpstreamFailure",
	"UpstreamResult",
	"UpstreamSuccess",
	"domain_format_revenue_progress",
	"domain_serialize_timestamp",
	"domain_utc_now",
]
