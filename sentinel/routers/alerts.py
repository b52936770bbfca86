"""Alert store endpoints and the manual healing hook."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from sentinel.deps import get_orchestrator
from sentinel.detection.models import Alert
from sentinel.healing.models import HealingPhase
from sentinel.healing.sequencer import HealingError
from sentinel.ingestion.models import LogRecord
from sentinel.orchestrator import Orchestrator
from sentinel.store.alerts import AlertNotFoundError

router = APIRouter(prefix="/alerts", tags=["alerts"])


class AlertView(Alert):
    """Alert as shown to the presentation layer, with its live healing phase."""

    healing_phase: HealingPhase | None = None


def _view(orchestrator: Orchestrator, alert: Alert) -> AlertView:
    return AlertView(**alert.model_dump(), healing_phase=orchestrator.sequencer.phase(alert.id))


@router.get("", response_model=list[AlertView])
async def list_alerts(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return [_view(orchestrator, a) for a in orchestrator.alerts.snapshot()]


@router.get("/{alert_id}", response_model=AlertView)
async def get_alert(alert_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return _view(orchestrator, orchestrator.alerts.get(alert_id))
    except AlertNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/{alert_id}/logs", response_model=list[LogRecord])
async def alert_logs(alert_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.related_logs(alert_id)
    except AlertNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("/{alert_id}/retry", response_model=AlertView, status_code=202)
async def retry_healing(alert_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Re-run diagnosis and remediation for an alert stalled in healing."""
    try:
        alert = orchestrator.retry(alert_id)
    except AlertNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except HealingError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _view(orchestrator, alert)
