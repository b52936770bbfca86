"""Log ingestion and log store endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from sentinel.deps import get_orchestrator
from sentinel.ingestion.models import LogBatch, LogRecord
from sentinel.orchestrator import Orchestrator
from sentinel.store.alerts import AlertNotFoundError

logger = logging.getLogger("sentinel.ingestion")
router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=list[LogRecord])
async def list_logs(alert_id: str | None = None, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Log store snapshot, optionally narrowed to the logs related to one alert."""
    if alert_id is None:
        return orchestrator.logs.snapshot()
    try:
        return orchestrator.related_logs(alert_id)
    except AlertNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("")
async def ingest_batch(batch: LogBatch, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Append a pre-structured batch from an alternate log source."""
    accepted = orchestrator.ingest_records(batch.records)
    return {
        "received": len(batch.records),
        "appended": [r.id for r in accepted],
        "total_logs": len(orchestrator.logs),
    }


@router.post("/raw")
async def ingest_raw(request: Request, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Parse an uploaded plain-text log file and append the result."""
    body = await request.body()
    text = body.decode("utf-8", errors="replace")
    accepted = await orchestrator.ingest_text(text)
    logger.info("Raw upload: %d bytes -> %d records", len(body), len(accepted))
    return {
        "received_bytes": len(body),
        "appended": len(accepted),
        "total_logs": len(orchestrator.logs),
    }


@router.post("/demo")
async def load_demo(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Append the end-of-quarter pipeline failure scenario."""
    accepted = orchestrator.load_demo_scenario()
    return {"appended": len(accepted), "total_logs": len(orchestrator.logs)}


@router.post("/heartbeat", response_model=LogRecord)
async def heartbeat(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return orchestrator.heartbeat()
