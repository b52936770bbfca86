"""LangGraph healing workflow — one alert's diagnose, act, resolve sequence."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Literal

from langgraph.graph import END, StateGraph
from opentelemetry import trace

from sentinel.detection.models import Alert, AlertStatus
from sentinel.healing.models import Diagnosis, HealingPhase
from sentinel.healing.state import HealingState
from sentinel.ingestion.models import LogLevel, LogRecord, new_log_id
from sentinel.store.alerts import AlertStore
from sentinel.store.logs import LogStore
from sentinel.telemetry.metrics import (
    collaborator_failures_total,
    diagnosis_duration,
    healing_outcomes_total,
)

logger = logging.getLogger("sentinel.healing")
tracer = trace.get_tracer(__name__)

AGENT_SERVICE = "Sentinel-Agent"

DiagnoseFn = Callable[[Alert], Awaitable[Diagnosis]]
PhaseFn = Callable[[str, HealingPhase], None]


def resolution_record(alert: Alert, action: str) -> LogRecord:
    return LogRecord(
        id=new_log_id("sys"),
        service=AGENT_SERVICE,
        level=LogLevel.SUCCESS,
        message=f"Resolved alert: {alert.title}. Action Taken: {action}",
    )


def build_healing_graph(
    alerts: AlertStore,
    logs: LogStore,
    diagnose: DiagnoseFn,
    on_phase: PhaseFn,
    thinking_delay: float = 2.0,
    action_delay: float = 4.0,
) -> StateGraph:
    """Construct the LangGraph state machine for healing a single alert."""

    # ── Node functions ──────────────────────────────────────────────

    async def start(state: HealingState) -> dict:
        alert = alerts.get(state["alert_id"])
        if alert.status in (AlertStatus.ACTIVE, AlertStatus.INVESTIGATING):
            alerts.update(alert.id, status=AlertStatus.HEALING)
        return {"diagnosis_failed": False}

    async def think(state: HealingState) -> dict:
        on_phase(state["alert_id"], HealingPhase.THINKING)
        await asyncio.sleep(thinking_delay)
        return {}

    async def run_diagnosis(state: HealingState) -> dict:
        alert_id = state["alert_id"]
        on_phase(alert_id, HealingPhase.DIAGNOSING)
        alert = alerts.get(alert_id)

        failed = False
        started = time.perf_counter()
        with tracer.start_as_current_span("diagnose-alert") as span:
            span.set_attribute("alert.id", alert_id)
            span.set_attribute("alert.service", alert.affected_service)
            try:
                diagnosis = await diagnose(alert)
            except Exception:
                logger.exception("Diagnosis failed for alert=%s — using fallback", alert_id)
                collaborator_failures_total.labels(collaborator="diagnosis").inc()
                diagnosis = Diagnosis.fallback()
                failed = True
            span.set_attribute("diagnosis.succeeded", diagnosis.succeeded)
        diagnosis_duration.observe(time.perf_counter() - started)

        alert = alerts.get(alert_id)
        alerts.update(
            alert_id,
            agent_thoughts=alert.agent_thoughts + (diagnosis.narrative,),
            fix_action=diagnosis.action,
        )
        return {"diagnosis": diagnosis, "diagnosis_failed": failed}

    async def act(state: HealingState) -> dict:
        on_phase(state["alert_id"], HealingPhase.ACTING)
        await asyncio.sleep(action_delay)
        return {}

    async def resolve(state: HealingState) -> dict:
        alert_id = state["alert_id"]
        action = state["diagnosis"].action
        alert = alerts.update(alert_id, status=AlertStatus.RESOLVED)
        logs.append([resolution_record(alert, action)])
        on_phase(alert_id, HealingPhase.DONE)
        healing_outcomes_total.labels(outcome="resolved").inc()
        logger.info("Alert %s resolved by action %r", alert_id, action)
        return {"outcome": "resolved"}

    async def stall(state: HealingState) -> dict:
        alert_id = state["alert_id"]
        on_phase(alert_id, HealingPhase.STALLED)
        healing_outcomes_total.labels(outcome="stalled").inc()
        logger.warning(
            "Alert %s stalled in healing (action=%r) — manual intervention needed",
            alert_id, state["diagnosis"].action,
        )
        return {"outcome": "stalled"}

    # ── Routing logic ───────────────────────────────────────────────

    def after_action(state: HealingState) -> Literal["resolve", "stall"]:
        return "resolve" if state["diagnosis"].succeeded else "stall"

    # ── Build the graph ─────────────────────────────────────────────

    graph = StateGraph(HealingState)

    graph.add_node("start", start)
    graph.add_node("think", think)
    graph.add_node("diagnose", run_diagnosis)
    graph.add_node("act", act)
    graph.add_node("resolve", resolve)
    graph.add_node("stall", stall)

    graph.set_entry_point("start")
    graph.add_edge("start", "think")
    graph.add_edge("think", "diagnose")
    graph.add_edge("diagnose", "act")

    graph.add_conditional_edges("act", after_action, {
        "resolve": "resolve",
        "stall": "stall",
    })

    graph.add_edge("resolve", END)
    graph.add_edge("stall", END)

    return graph


def compile_healing_graph(
    alerts: AlertStore,
    logs: LogStore,
    diagnose: DiagnoseFn,
    on_phase: PhaseFn,
    thinking_delay: float = 2.0,
    action_delay: float = 4.0,
):
    """Build and compile the healing graph, ready to invoke."""
    graph = build_healing_graph(alerts, logs, diagnose, on_phase, thinking_delay, action_delay)
    return graph.compile()
