"""Healing sequencer — runs one healing task per active alert, never two for the same alert."""

from __future__ import annotations

import asyncio
import logging

from sentinel.detection.models import AlertStatus
from sentinel.healing.graph import DiagnoseFn, compile_healing_graph
from sentinel.healing.models import HealingPhase
from sentinel.store.alerts import AlertStore
from sentinel.store.logs import LogStore
from sentinel.telemetry.metrics import healing_in_flight

logger = logging.getLogger("sentinel.healing")


class HealingError(Exception):
    """Base class for rejected healing requests."""


class HealingInProgressError(HealingError):
    pass


class NotRetryableError(HealingError):
    pass


class HealingSequencer:
    """Launches and tracks healing tasks.

    Each alert id has at most one task in flight. Tasks for different
    alerts run concurrently and are never cancelled once started, except
    by ``stop()`` at shutdown.
    """

    def __init__(
        self,
        alerts: AlertStore,
        logs: LogStore,
        diagnose: DiagnoseFn,
        thinking_delay: float = 2.0,
        action_delay: float = 4.0,
    ) -> None:
        self._alerts = alerts
        self._graph = compile_healing_graph(
            alerts, logs, diagnose, self._set_phase, thinking_delay, action_delay,
        )
        self._tasks: dict[str, asyncio.Task] = {}
        self._phases: dict[str, HealingPhase] = {}

    def _set_phase(self, alert_id: str, phase: HealingPhase) -> None:
        self._phases[alert_id] = phase

    def phase(self, alert_id: str) -> HealingPhase | None:
        return self._phases.get(alert_id)

    def is_running(self, alert_id: str) -> bool:
        task = self._tasks.get(alert_id)
        return task is not None and not task.done()

    def in_flight(self) -> list[asyncio.Task]:
        return [t for t in self._tasks.values() if not t.done()]

    def dispatch(self) -> list[str]:
        """Start healing every active alert that has no task yet. Returns the ids started."""
        started = []
        for alert in self._alerts.with_status(AlertStatus.ACTIVE):
            if self.is_running(alert.id):
                continue
            self._launch(alert.id)
            started.append(alert.id)
        if started:
            logger.info("Healing dispatched for %d alerts: %s", len(started), ", ".join(started))
        return started

    def retry(self, alert_id: str) -> asyncio.Task:
        """Re-run diagnosis and remediation for a stalled alert."""
        alert = self._alerts.get(alert_id)
        if self.is_running(alert_id):
            raise HealingInProgressError(f"Healing already in progress for {alert_id}")
        if alert.status != AlertStatus.HEALING:
            raise NotRetryableError(
                f"Only stalled alerts can be retried; {alert_id} is {alert.status.value}"
            )
        logger.info("Manual healing retry requested for alert=%s", alert_id)
        return self._launch(alert_id)

    def _launch(self, alert_id: str) -> asyncio.Task:
        self._phases[alert_id] = HealingPhase.QUEUED
        task = asyncio.create_task(self._run(alert_id), name=f"heal-{alert_id}")
        self._tasks[alert_id] = task

        def _forget(t: asyncio.Task) -> None:
            if self._tasks.get(alert_id) is t:
                del self._tasks[alert_id]

        task.add_done_callback(_forget)
        return task

    async def _run(self, alert_id: str) -> None:
        healing_in_flight.inc()
        try:
            result = await self._graph.ainvoke({"alert_id": alert_id})
            logger.info("Healing finished: alert=%s outcome=%s", alert_id, result.get("outcome"))
        except Exception:
            logger.exception("Healing sequence crashed for alert=%s", alert_id)
            self._phases[alert_id] = HealingPhase.STALLED
        finally:
            healing_in_flight.dec()

    async def stop(self) -> None:
        tasks = self.in_flight()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Cancelled %d healing tasks at shutdown", len(tasks))
