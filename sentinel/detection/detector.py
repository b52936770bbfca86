"""Incident detector — gates correlation on failure logs and materializes alerts."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from opentelemetry import trace

from sentinel.detection.models import Alert, AlertDraft, AlertStatus
from sentinel.ingestion.models import LogRecord
from sentinel.store.alerts import AlertStore
from sentinel.store.logs import LogStore
from sentinel.telemetry.metrics import (
    alerts_created_total,
    collaborator_failures_total,
    detection_runs_total,
)

logger = logging.getLogger("sentinel.detection")
tracer = trace.get_tracer(__name__)

ProposeFn = Callable[[list[LogRecord]], Awaitable[list[AlertDraft]]]

DETECTION_SCOPES = ("empty", "unresolved")


class IncidentDetector:
    """Turns a log snapshot into new active alerts.

    With scope "empty" detection is a one-shot gate: it only fires while no
    alert exists at all. Scope "unresolved" lets a new incident surface once
    every existing alert is resolved, and only looks at logs appended after
    the last pass that raised alerts.
    """

    def __init__(self, propose: ProposeFn, scope: str = "empty") -> None:
        if scope not in DETECTION_SCOPES:
            raise ValueError(f"Unsupported detection scope: {scope}")
        self._propose = propose
        self._scope = scope
        # Log store prefix already turned into alerts (scope "unresolved" only).
        self._covered = 0

    def _window(self, logs: list[LogRecord]) -> list[LogRecord]:
        return logs[self._covered:] if self._scope == "unresolved" else logs

    def should_detect(self, logs: list[LogRecord], existing_alerts: list[Alert]) -> bool:
        if not any(r.is_failure for r in self._window(logs)):
            return False
        if self._scope == "unresolved":
            return all(a.status == AlertStatus.RESOLVED for a in existing_alerts)
        return not existing_alerts

    async def detect(self, logs: list[LogRecord], existing_alerts: list[Alert]) -> list[Alert]:
        """Return new alerts for ``logs``; [] when the gate is closed or nothing correlates."""
        if not self.should_detect(logs, existing_alerts):
            return []

        problematic = [r for r in self._window(logs) if r.is_problem]
        with tracer.start_as_current_span("detect-incidents") as span:
            span.set_attribute("detection.records", len(problematic))
            try:
                drafts = await self._propose(problematic)
            except Exception:
                logger.exception("Correlation service failed — no alerts raised")
                collaborator_failures_total.labels(collaborator="correlation").inc()
                detection_runs_total.labels(outcome="failed").inc()
                return []

            known_ids = {r.id for r in logs}
            alerts = [Alert.from_draft(d, known_ids) for d in drafts]
            span.set_attribute("detection.alerts", len(alerts))

        if alerts:
            self._covered = len(logs)

        detection_runs_total.labels(outcome="alerts" if alerts else "quiet").inc()
        logger.info(
            "Detection pass: %d problematic records -> %d alerts",
            len(problematic), len(alerts),
        )
        return alerts

    async def run(self, log_store: LogStore, alert_store: AlertStore) -> list[Alert]:
        """Detect against the current stores and insert the resulting alerts."""
        alerts = await self.detect(log_store.snapshot(), alert_store.snapshot())
        for alert in alerts:
            alert_store.insert(alert)
            alerts_created_total.labels(severity=alert.severity.value).inc()
        return alerts
