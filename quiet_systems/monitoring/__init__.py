"""Monitoring package for alert storage and dashboard composition."""

from .alerts import AlertAlreadyExistsError, AlertNotFoundError, AlertRegistry
from .dashboard import DashboardAggregator

__all__ = ["AlertAlreadyExistsError", "AlertNotFoundError", "AlertRegistry", "DashboardAggregator"]
