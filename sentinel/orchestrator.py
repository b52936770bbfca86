"""Incident lifecycle orchestrator — owns the stores and reacts to their change events."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from sentinel.config import Settings, settings
from sentinel.detection.detector import IncidentDetector, ProposeFn
from sentinel.detection.models import Alert
from sentinel.healing.graph import DiagnoseFn
from sentinel.healing.sequencer import HealingSequencer
from sentinel.ingestion.models import LogRecord
from sentinel.ingestion.scenarios import generate_enterprise_logs, heartbeat_record
from sentinel.reporting.models import HealthSummary
from sentinel.reporting.related import related_logs
from sentinel.reporting.summary import summarize
from sentinel.store.alerts import AlertStore
from sentinel.store.events import EventKind, StoreEvent
from sentinel.store.logs import LogStore
from sentinel.telemetry.metrics import collaborator_failures_total, logs_ingested_total

logger = logging.getLogger("sentinel.orchestrator")

ParseFn = Callable[[str], Awaitable[list[LogRecord]]]


class Orchestrator:
    """Single owner of the log and alert stores.

    Every store mutation is turned into an event on an internal queue. One
    dispatch task consumes the queue: log appends re-evaluate the detection
    gate, alert changes hand active alerts to the healing sequencer.
    """

    def __init__(
        self,
        parse: ParseFn,
        propose: ProposeFn,
        diagnose: DiagnoseFn,
        cfg: Settings = settings,
    ) -> None:
        self.logs = LogStore()
        self.alerts = AlertStore()
        self.detector = IncidentDetector(propose, scope=cfg.detection_scope)
        self.sequencer = HealingSequencer(
            self.alerts,
            self.logs,
            diagnose,
            thinking_delay=cfg.thinking_delay_seconds,
            action_delay=cfg.action_delay_seconds,
        )
        self._parse = parse
        self._raw_text_limit = cfg.raw_text_limit

        self._events: asyncio.Queue[StoreEvent] = asyncio.Queue()
        self.logs.subscribe(self._events.put_nowait)
        self.alerts.subscribe(self._events.put_nowait)

        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        self._running = True
        self._task = asyncio.create_task(self._dispatch_loop(), name="orchestrator-dispatch")
        logger.info("Orchestrator started")

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        await self.sequencer.stop()
        logger.info("Orchestrator stopped")

    async def _dispatch_loop(self) -> None:
        while self._running:
            event = await self._events.get()
            try:
                await self._handle(event)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Failed to handle %s event", event.kind.value)
            finally:
                self._events.task_done()

    async def _handle(self, event: StoreEvent) -> None:
        if event.kind == EventKind.LOGS_APPENDED:
            await self.detector.run(self.logs, self.alerts)
        else:
            self.sequencer.dispatch()

    async def wait_idle(self) -> None:
        """Wait until no event is pending and no healing task is running."""
        while True:
            await self._events.join()
            tasks = self.sequencer.in_flight()
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    # ── Ingestion ───────────────────────────────────────────────────

    def _append(self, records: Iterable[LogRecord], source: str) -> list[LogRecord]:
        accepted = self.logs.append(records)
        if accepted:
            logs_ingested_total.labels(source=source).inc(len(accepted))
            logger.info("Ingested %d log records from %s", len(accepted), source)
        return accepted

    async def ingest_text(self, text: str) -> list[LogRecord]:
        """Parse raw log text (bounded prefix only) and append the result."""
        if len(text) > self._raw_text_limit:
            logger.info(
                "Raw log text truncated from %d to %d characters",
                len(text), self._raw_text_limit,
            )
        try:
            records = await self._parse(text[: self._raw_text_limit])
        except Exception:
            logger.exception("Log parser failed — nothing ingested")
            collaborator_failures_total.labels(collaborator="parser").inc()
            return []
        return self._append(records, source="upload")

    def ingest_records(self, records: Iterable[LogRecord], source: str = "batch") -> list[LogRecord]:
        return self._append(records, source=source)

    def load_demo_scenario(self) -> list[LogRecord]:
        return self._append(generate_enterprise_logs(), source="demo")

    def heartbeat(self) -> LogRecord:
        record = heartbeat_record()
        self._append([record], source="heartbeat")
        return record

    # ── Queries and hooks ───────────────────────────────────────────

    def retry(self, alert_id: str) -> Alert:
        self.sequencer.retry(alert_id)
        return self.alerts.get(alert_id)

    def related_logs(self, alert_id: str) -> list[LogRecord]:
        return related_logs(self.alerts.get(alert_id), self.logs.snapshot())

    def summary(self) -> HealthSummary:
        return summarize(self.logs.snapshot(), self.alerts.snapshot())
