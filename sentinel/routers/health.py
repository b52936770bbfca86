"""Health and dashboard summary endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from langchain_core.language_models import BaseChatModel

from sentinel.deps import get_llm, get_orchestrator
from sentinel.orchestrator import Orchestrator
from sentinel.reporting.models import HealthSummary

router = APIRouter()

_start_time = datetime.now(timezone.utc)


@router.get("/health")
async def health(
    orchestrator: Orchestrator = Depends(get_orchestrator),
    llm: BaseChatModel | None = Depends(get_llm),
):
    uptime = (datetime.now(timezone.utc) - _start_time).total_seconds()
    return {
        "status": "healthy",
        "uptime_seconds": round(uptime, 2),
        "llm_ready": llm is not None,
        "orchestrator_running": orchestrator.running,
        "healing_in_flight": len(orchestrator.sequencer.in_flight()),
        "version": "1.0.0",
    }


@router.get("/summary", response_model=HealthSummary)
async def summary(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return orchestrator.summary()
