"""
Pytest configuration and fixtures.
"""

import asyncio
from collections import defaultdict
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from sentinel.config import Settings
from sentinel.detection.models import AlertDraft
from sentinel.healing.models import Diagnosis
from sentinel.ingestion.models import LogLevel, LogRecord
from sentinel.main import app
from sentinel.orchestrator import Orchestrator


def make_log(log_id: str, service: str = "Snowflake", level: LogLevel = LogLevel.INFO,
             message: str = "ok") -> LogRecord:
    return LogRecord(id=log_id, service=service, level=level, message=message)


class StubParser:
    """Records the text it was asked to parse and returns canned records."""

    def __init__(self, records=None, error: Exception | None = None):
        self.records = records or []
        self.error = error
        self.calls: list[str] = []

    async def __call__(self, text: str) -> list[LogRecord]:
        self.calls.append(text)
        if self.error:
            raise self.error
        return list(self.records)


class StubCorrelator:
    """Stands in for the correlation service."""

    def __init__(self, drafts=None, error: Exception | None = None):
        self.drafts = drafts or []
        self.error = error
        self.calls: list[list[LogRecord]] = []

    async def __call__(self, records: list[LogRecord]) -> list[AlertDraft]:
        self.calls.append(list(records))
        if self.error:
            raise self.error
        return list(self.drafts)


class StubDiagnoser:
    """Stands in for the diagnosis service and tracks per-alert concurrency."""

    def __init__(self, result: Diagnosis | None = None, error: Exception | None = None,
                 delay: float = 0.0):
        self.result = result or Diagnosis(narrative="Glue OOM", action="Scale Glue Workers", succeeded=True)
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self._running: dict[str, int] = defaultdict(int)
        self.max_concurrent: dict[str, int] = defaultdict(int)

    async def __call__(self, alert) -> Diagnosis:
        self.calls.append(alert.id)
        self._running[alert.id] += 1
        self.max_concurrent[alert.id] = max(self.max_concurrent[alert.id], self._running[alert.id])
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error:
                raise self.error
            return self.result
        finally:
            self._running[alert.id] -= 1


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with the healing delays removed."""
    return Settings(thinking_delay_seconds=0, action_delay_seconds=0)


@pytest.fixture
def snowflake_draft() -> AlertDraft:
    return AlertDraft(
        title="Snowflake pipe stalled",
        description="SALES_PIPE stopped loading after the Glue job failed",
        severity="critical",
        affected_service="Snowflake",
        suggested_fix="Trigger backfill",
        related_log_ids=["log-2"],
    )


@pytest.fixture
def parser() -> StubParser:
    return StubParser()


@pytest.fixture
def correlator(snowflake_draft) -> StubCorrelator:
    return StubCorrelator([snowflake_draft])


@pytest.fixture
def diagnoser() -> StubDiagnoser:
    return StubDiagnoser()


@pytest_asyncio.fixture
async def orchestrator(parser, correlator, diagnoser, fast_settings) -> AsyncGenerator[Orchestrator, None]:
    orch = Orchestrator(parser, correlator, diagnoser, cfg=fast_settings)
    await orch.start()
    yield orch
    await orch.stop()


@pytest_asyncio.fixture
async def client(orchestrator) -> AsyncGenerator[AsyncClient, None]:
    """API client bound to the test orchestrator; the app lifespan is not run."""
    app.state.orchestrator = orchestrator
    app.state.llm = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.orchestrator = None
