"""In-memory alert registry owned for the process lifetime."""

from __future__ import annotations

import threading
from dataclasses import replace

import structlog

from quiet_systems.domain import Alert

logger = structlog.get_logger(__name__)


class AlertNotFoundError(LookupError):
    """Raised when no alert carries the requested identifier."""


class AlertAlreadyExistsError(ValueError):
    """Raised when an alert with the same identifier is already registered."""


class AlertRegistry:
    """Insertion-ordered alert store.

    Alerts are frozen records, so readers always hold stable copies and only the
    registry swaps in updated versions. One lock per registry guards the list.
    """

    def __init__(self, alerts: list[Alert] | None = None):
        """Initialize alert registry.

        Args:
            alerts: Optional initial alerts in insertion order.

        Returns:
            None: Initializer does not return a value.

        Raises:
            AlertAlreadyExistsError: Raised when initial alerts repeat an identifier.
        """

        self._lock = threading.Lock()
        self._alerts: list[Alert] = []
        for alert in alerts or []:
            self.registry_append_alert(alert)

    def registry_append_alert(self, alert: Alert) -> Alert:
        """Register one alert produced by an external monitor.

        Args:
            alert: Alert to store.

        Returns:
            Alert: The stored alert.

        Raises:
            ValueError: Raised when alert is None or its identifier is blank.
            AlertAlreadyExistsError: Raised when the identifier is already registered.
        """

        if alert is None:
            raise ValueError("alert must not be None")
        if not alert.alert_id.strip():
            raise ValueError("alert_id must not be blank")

        with self._lock:
            if self._registry_find_index(alert.alert_id) is not None:
                raise AlertAlreadyExistsError(f"alert already registered: {alert.alert_id}")
            self._alerts.append(alert)
        logger.info("alert_registered", alert_id=alert.alert_id, severity=alert.severity)
        return alert

    def registry_list_alerts(self) -> list[Alert]:
        """Return all alerts in insertion order."""

        with self._lock:
            return list(self._alerts)

    def registry_get_alert(self, alert_id: str) -> Alert | None:
        """Return the alert with the given identifier.

        Args:
            alert_id: Alert identifier.

        Returns:
            Alert | None: Matching alert, or None when absent.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        with self._lock:
            alert_index = self._registry_find_index(alert_id)
            return None if alert_index is None else self._alerts[alert_index]

    def registry_acknowledge_alert(self, alert_id: str) -> Alert:
        """Mark one alert acknowledged.

        Acknowledging an already-acknowledged alert succeeds and leaves it acknowledged.

        Args:
            alert_id: Alert identifier.

        Returns:
            Alert: The acknowledged alert.

        Raises:
            AlertNotFoundError: Raised when no alert has the identifier; nothing is mutated.
        """

        with self._lock:
            alert_index = self._registry_find_index(alert_id)
            if alert_index is None:
                raise AlertNotFoundError(f"alert not found: {alert_id}")
            acknowledged_alert = replace(self._alerts[alert_index], acknowledged=True)
            self._alerts[alert_index] = acknowledged_alert
        logger.info("alert_acknowledged", alert_id=alert_id)
        return acknowledged_alert

    def _registry_find_index(self, alert_id: str) -> int | None:
        for alert_index, alert in enumerate(self._alerts):
            if alert.alert_id == alert_id:
                return alert_index
        return None
