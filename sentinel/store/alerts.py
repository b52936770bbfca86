"""Alert store — id-keyed alert records with forward-only lifecycle enforcement."""

from __future__ import annotations

import logging

from sentinel.detection.models import Alert, AlertStatus
from sentinel.store.events import EventKind, Listener, StoreEvent

logger = logging.getLogger("sentinel.store")

# Same-status entries allow field updates without a transition.
_ALLOWED_TRANSITIONS: dict[AlertStatus, frozenset[AlertStatus]] = {
    AlertStatus.ACTIVE: frozenset({AlertStatus.ACTIVE, AlertStatus.INVESTIGATING, AlertStatus.HEALING}),
    AlertStatus.INVESTIGATING: frozenset({AlertStatus.INVESTIGATING, AlertStatus.HEALING}),
    AlertStatus.HEALING: frozenset({AlertStatus.HEALING, AlertStatus.RESOLVED}),
    AlertStatus.RESOLVED: frozenset(),
}


class AlertStoreError(Exception):
    """Base class for alert store contract violations."""


class AlertNotFoundError(AlertStoreError, KeyError):
    def __init__(self, alert_id: str) -> None:
        super().__init__(alert_id)
        self.alert_id = alert_id

    def __str__(self) -> str:
        return f"Alert not found: {self.alert_id}"


class DuplicateAlertError(AlertStoreError):
    pass


class InvalidTransitionError(AlertStoreError):
    pass


class AlertStore:
    """Mapping of alert id to the current alert record.

    Every mutation replaces the whole record, so readers only ever see
    complete alerts.
    """

    def __init__(self) -> None:
        self._alerts: dict[str, Alert] = {}
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, kind: EventKind, alert_id: str) -> None:
        event = StoreEvent(kind=kind, alert_id=alert_id)
        for listener in self._listeners:
            listener(event)

    def insert(self, alert: Alert) -> Alert:
        if alert.id in self._alerts:
            raise DuplicateAlertError(f"Alert already exists: {alert.id}")
        if alert.status != AlertStatus.ACTIVE:
            raise InvalidTransitionError(
                f"Alerts must be created active, got {alert.status.value} for {alert.id}"
            )
        self._alerts[alert.id] = alert
        logger.info(
            "Alert created: id=%s title=%r service=%s severity=%s",
            alert.id, alert.title, alert.affected_service, alert.severity.value,
        )
        self._notify(EventKind.ALERT_CREATED, alert.id)
        return alert

    def update(self, alert_id: str, **changes) -> Alert:
        """Replace an alert with a copy carrying ``changes``."""
        current = self.get(alert_id)
        if "id" in changes and changes["id"] != alert_id:
            raise InvalidTransitionError(f"Alert ids are immutable: {alert_id}")

        target = AlertStatus(changes.get("status", current.status))
        if target not in _ALLOWED_TRANSITIONS[current.status]:
            raise InvalidTransitionError(
                f"Alert {alert_id}: {current.status.value} -> {target.value} is not allowed"
            )

        changes["status"] = target
        updated = current.model_copy(update=changes)
        self._alerts[alert_id] = updated
        if target != current.status:
            logger.info("Alert %s: %s -> %s", alert_id, current.status.value, target.value)
        self._notify(EventKind.ALERT_UPDATED, alert_id)
        return updated

    def get(self, alert_id: str) -> Alert:
        try:
            return self._alerts[alert_id]
        except KeyError:
            raise AlertNotFoundError(alert_id) from None

    def snapshot(self) -> list[Alert]:
        return list(self._alerts.values())

    def with_status(self, status: AlertStatus) -> list[Alert]:
        return [a for a in self._alerts.values() if a.status == status]

    def unresolved(self) -> list[Alert]:
        return [a for a in self._alerts.values() if a.status != AlertStatus.RESOLVED]

    def __contains__(self, alert_id: object) -> bool:
        return alert_id in self._alerts

    def __len__(self) -> int:
        return len(self._alerts)
